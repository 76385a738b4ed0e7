"""Command line helpers for generating and playing puzzles."""

from __future__ import annotations

import argparse
import json
import os
import random
import sys
from typing import Callable, Dict, List, Optional, TextIO

from engine import Difficulty, GameTable, Session, format_time, generate
from engine.codec import encode_grid, format_grid
from engine.events import Event, MistakeOccurred, event_to_dict
from engine.puzzle_source import LocalPuzzleSource
from feature_flags import is_debug_hook_enabled
from ports.stats_port import JsonFileStats
from project_config import get_section

_DIFFICULTIES = [d.value for d in Difficulty]

_HELP = """commands:
  s ROW COL     select a cell (0-based)
  d DIGIT       enter a digit into the selected cell
  x             erase the selected cell
  m DIR         move the selection (up/down/left/right)
  clear         clear every entry you made
  check         highlight duplicated digits
  reveal        show the solution (ends the game)
  new LEVEL     start over at easy/medium/hard
  q             quit"""


def _stats_store(path: Optional[str]) -> JsonFileStats:
    return JsonFileStats(path or get_section("stats.path", "data/stats.json"))


def _render(session: Session) -> str:
    values = session.grid.values()
    header = (
        f"[{session.difficulty.value}] state={session.state.value} "
        f"mistakes={session.mistake_count}/{session.max_mistakes} "
        f"time={format_time(session.elapsed_seconds)}"
    )
    selected = f"selected={session.selected}" if session.selected else "selected=-"
    return "\n".join([header, selected, format_grid(values)])


def _print_event(out: TextIO) -> Callable[[Event], None]:
    def handler(event: Event) -> None:
        if isinstance(event, MistakeOccurred):
            out.write(f"{event.message}\n")
        else:
            out.write(json.dumps(event_to_dict(event), sort_keys=True) + "\n")
    return handler


def _debug_hook(out: TextIO) -> Callable[[Session], None]:
    def hook(session: Session) -> None:
        snapshot = session.snapshot()
        snapshot.pop("cells")
        out.write(f"[debug] {json.dumps(snapshot, sort_keys=True)}\n")
    return hook


def _dispatch(table: GameTable, line: str, out: TextIO) -> bool:
    session = table.current
    assert session is not None
    parts = line.split()
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]
    try:
        if cmd in {"q", "quit", "exit"}:
            return False
        if cmd == "s" and len(args) == 2:
            session.select(int(args[0]), int(args[1]))
        elif cmd == "d" and len(args) == 1:
            session.input(int(args[0]))
        elif cmd == "x":
            session.erase()
        elif cmd == "m" and len(args) == 1:
            session.move_selection(args[0].lower())
        elif cmd == "clear":
            session.clear_all_user_entries()
        elif cmd == "check":
            bad = sorted(session.validate_board())
            out.write(f"conflicts: {bad}\n" if bad else "no conflicts\n")
        elif cmd == "reveal":
            session.reveal_solution()
        elif cmd == "new" and len(args) == 1:
            table.change_difficulty(args[0])
        else:
            out.write(_HELP + "\n")
            return True
    except (ValueError, IndexError) as exc:
        out.write(f"error: {exc}\n")
        return True
    out.write(_render(table.current) + "\n")
    return True


def cmd_generate(args: argparse.Namespace) -> int:
    source = LocalPuzzleSource(seed=args.seed)
    rng = random.Random(args.seed) if args.seed is not None else None
    generated = generate(args.difficulty, source, rng=rng)
    payload = {
        "difficulty": generated.difficulty.value,
        "puzzle": encode_grid(generated.puzzle),
        "solution": encode_grid(generated.solution),
        "origin": generated.origin,
        "clues": generated.clues,
    }
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def run_repl(table: GameTable, difficulty: str, stdin: TextIO, out: TextIO) -> int:
    session = table.new_game(difficulty)
    out.write(_render(session) + "\n")
    for line in stdin:
        if not _dispatch(table, line.strip(), out):
            break
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    out = sys.stdout
    env: Dict[str, str] = dict(os.environ)
    hook = _debug_hook(out) if is_debug_hook_enabled(env, profile=args.profile) else None
    table = GameTable(
        LocalPuzzleSource(seed=args.seed),
        _stats_store(args.stats),
        rng=random.Random(args.seed) if args.seed is not None else None,
        on_event=_print_event(out),
        debug_hook=hook,
    )
    return run_repl(table, args.difficulty, sys.stdin, out)


def cmd_stats(args: argparse.Namespace) -> int:
    store = _stats_store(args.stats)
    if args.reset:
        store.reset()
    print(json.dumps(store.get_stats(), indent=2, sort_keys=True))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sudoku puzzle engine helpers")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate one puzzle and print it as JSON")
    gen.add_argument("--difficulty", choices=_DIFFICULTIES, default="easy")
    gen.add_argument("--seed", type=int, default=None)
    gen.set_defaults(func=cmd_generate)

    play = sub.add_parser("play", help="Play a puzzle in the terminal")
    play.add_argument("--difficulty", choices=_DIFFICULTIES, default="easy")
    play.add_argument("--seed", type=int, default=None)
    play.add_argument("--stats", default=None, help="Path of the win-count JSON file")
    play.add_argument("--profile", default="prod", help="Feature flag profile (dev enables the debug hook)")
    play.set_defaults(func=cmd_play)

    stats = sub.add_parser("stats", help="Show win counts")
    stats.add_argument("--stats", default=None, help="Path of the win-count JSON file")
    stats.add_argument("--reset", action="store_true", help="Zero every counter first")
    stats.set_defaults(func=cmd_stats)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
