from __future__ import annotations

import io
import json

from engine import GameTable
from ports.stats_port import InMemoryStats
from tools.cli import play

SOLUTION = "417369825632158947958724316825437169791586432346912758289643571573291684164875293"


def _table(stats) -> tuple[GameTable, io.StringIO]:
    def source(difficulty):
        return {"puzzle": ".." + SOLUTION[2:], "solution": SOLUTION}

    events_out = io.StringIO()
    return GameTable(source, stats, on_event=play._print_event(events_out)), events_out


def test_repl_plays_a_game_to_the_win():
    stats = InMemoryStats()
    table, events_out = _table(stats)
    stdin = io.StringIO("s 0 1\nd 9\nd 1\ns 0 0\nd 4\nq\n")
    out = io.StringIO()
    assert play.run_repl(table, "easy", stdin, out) == 0
    assert "Incorrect!" in events_out.getvalue()
    assert '"event": "PuzzleSolved"' in events_out.getvalue()
    assert "state=solved" in out.getvalue()
    assert stats.get_stats()["sudoku"] == 1


def test_repl_reports_bad_commands():
    table, _ = _table(InMemoryStats())
    out = io.StringIO()
    play.run_repl(table, "easy", io.StringIO("s 0 x\nbogus\nm nowhere\n"), out)
    text = out.getvalue()
    assert "error:" in text
    assert "commands:" in text


def test_stats_command(tmp_path, capsys):
    path = tmp_path / "stats.json"
    path.write_text(json.dumps({"sudoku": 3}), "utf-8")
    assert play.main(["stats", "--stats", str(path)]) == 0
    assert json.loads(capsys.readouterr().out)["sudoku"] == 3
    play.main(["stats", "--stats", str(path), "--reset"])
    assert json.loads(capsys.readouterr().out)["sudoku"] == 0


def test_generate_command_prints_pair(capsys):
    assert play.main(["generate", "--difficulty", "easy", "--seed", "5"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["difficulty"] == "easy"
    assert len(payload["puzzle"]) == 81
    assert payload["origin"] in {"source", "retry", "fallback"}
    assert payload["clues"] >= 17
