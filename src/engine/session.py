"""Play state machine for a single Sudoku session.

A :class:`Session` owns its grid and solution for its whole lifetime.  Every
public transition runs to completion before returning; illegal or stale calls
are silent no-ops (they return a falsy value).  Coordinates outside the grid
raise IndexError.

States::

    PLAYING -> SOLVED | GAME_OVER | REVEALED
    GAME_OVER -> REVEALED

``SOLVED``, ``GAME_OVER`` and ``REVEALED`` are terminal: a new session is
needed to play again.
"""

from __future__ import annotations

import random
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from ports.puzzle_source_port import SourceLike
from ports.stats_port import StatsSink
from project_config import get_section

from . import log
from .events import (
    Event,
    GameOver,
    MistakeOccurred,
    PuzzleSolved,
    SessionState,
    SolutionRevealed,
)
from .generator import Difficulty, GeneratedPuzzle, generate
from .grid import DIGITS, SIZE, Grid, Position
from .validator import find_violations
from .win_reporter import Dispatch, WinReporter

EventListener = Callable[[Event], None]
DebugHook = Callable[["Session"], None]

DEFAULT_MAX_MISTAKES = 3

_MOVES = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


def format_time(seconds: int) -> str:
    """Render elapsed seconds as ``M:SS``."""
    mins, secs = divmod(max(int(seconds), 0), 60)
    return f"{mins}:{secs:02d}"


class Session:
    def __init__(
        self,
        generated: GeneratedPuzzle,
        *,
        stats: Optional[StatsSink] = None,
        clock: Callable[[], float] = time.monotonic,
        max_mistakes: Optional[int] = None,
        game_id: Optional[str] = None,
        on_event: Optional[EventListener] = None,
        debug_hook: Optional[DebugHook] = None,
        report_dispatch: Optional[Dispatch] = None,
    ) -> None:
        self.difficulty: Difficulty = generated.difficulty
        self.grid: Grid = generated.to_grid()
        self.solution: Tuple[Tuple[int, ...], ...] = generated.solution
        self.origin = generated.origin
        self.selected: Optional[Position] = None
        self.mistake_count = 0
        self.state = SessionState.PLAYING
        self.max_mistakes = int(
            max_mistakes if max_mistakes is not None
            else get_section("engine.max_mistakes", DEFAULT_MAX_MISTAKES)
        )
        self._reporter = WinReporter(
            stats,
            game_id or str(get_section("engine.game_id", "sudoku")),
            dispatch=report_dispatch,
        )
        self._clock = clock
        self._started = clock()
        self._frozen_elapsed: Optional[int] = None
        self._on_event = on_event
        self._debug_hook = debug_hook

    # ---------- read side ----------

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since creation, frozen once a terminal state is hit.

        Derived from the clock rather than counted ticks, so late or skipped
        host ticks do not drift.
        """
        if self._frozen_elapsed is not None:
            return self._frozen_elapsed
        return max(int(self._clock() - self._started), 0)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def win_reported(self) -> bool:
        return self._reporter.fired

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "difficulty": self.difficulty.value,
            "selected": list(self.selected) if self.selected else None,
            "mistakes": self.mistake_count,
            "max_mistakes": self.max_mistakes,
            "elapsed_seconds": self.elapsed_seconds,
            "cells": self.grid.to_rows(),
        }

    # ---------- transitions ----------

    def select(self, row: int, col: int) -> bool:
        cell = self.grid.cell(row, col)
        if cell.is_prefilled or self.state is not SessionState.PLAYING:
            return False
        self.selected = (row, col)
        self._finish([])
        return True

    def move_selection(self, direction: str) -> bool:
        """Arrow-key movement; clamps at the edges and may land on a clue."""
        if self.state is not SessionState.PLAYING or self.selected is None:
            return False
        try:
            dr, dc = _MOVES[direction]
        except KeyError:
            raise ValueError(f"Unknown direction {direction!r}") from None
        row, col = self.selected
        self.selected = (min(max(row + dr, 0), SIZE - 1), min(max(col + dc, 0), SIZE - 1))
        self._finish([])
        return True

    def input(self, digit: int) -> Tuple[Event, ...]:
        """Enter *digit* into the selected cell.

        Returns the events raised by this input; an ignored call returns an
        empty tuple.  A wrong digit stays visible, is flagged as a mistake and
        produces :class:`MistakeOccurred`; reaching the mistake limit ends the
        game.
        """
        if self.state is not SessionState.PLAYING or self.selected is None:
            return ()
        if isinstance(digit, bool) or digit not in DIGITS:
            return ()
        row, col = self.selected
        if self.grid.cell(row, col).is_prefilled:
            return ()

        events: List[Event] = []
        self.grid.set_value(row, col, digit)
        if digit == self.solution[row][col]:
            self.grid.set_mistake(row, col, False)
            self.grid.set_invalid(row, col, False)
            self._refresh_violations()
        else:
            self.grid.set_mistake(row, col, True)
            self.mistake_count += 1
            # correctness and uniqueness are separate checks: a wrong entry is
            # a mistake, never an invalid cell
            self._refresh_violations(exempt=(row, col))
            events.append(MistakeOccurred(row, col, digit, self.mistake_count))
            if self.mistake_count >= self.max_mistakes:
                self.selected = None
                self._enter_terminal(SessionState.GAME_OVER)
                events.append(GameOver(self.mistake_count, self.elapsed_seconds))

        events.extend(self._check_win())
        return self._finish(events)

    def clear(self, row: int, col: int) -> bool:
        cell = self.grid.cell(row, col)
        if self.state is not SessionState.PLAYING or cell.is_prefilled:
            return False
        self.grid.set_value(row, col, None)
        self.grid.set_mistake(row, col, False)
        self.grid.set_invalid(row, col, False)
        self._refresh_violations()
        self._finish(self._check_win())
        return True

    def erase(self) -> bool:
        """Clear the selected cell."""
        if self.selected is None:
            return False
        return self.clear(*self.selected)

    def clear_all_user_entries(self) -> bool:
        if self.state is not SessionState.PLAYING:
            return False
        self.grid.clear_user_entries()
        self.selected = None
        self._refresh_violations()
        self._finish([])
        return True

    def validate_board(self) -> Set[Position]:
        """Recompute every invalid flag and return the violating cells."""
        if self.state is not SessionState.PLAYING:
            return set()
        violations = self._refresh_violations()
        self._finish([])
        return violations

    def check_win_condition(self) -> bool:
        """Run the win check; True only on the call that solves the puzzle."""
        events = self._check_win()
        if events:
            self._finish(events)
        return bool(events)

    def reveal_solution(self) -> bool:
        if self.state not in (SessionState.PLAYING, SessionState.GAME_OVER):
            return False
        previous = self.state
        self.grid.reveal(self.solution)
        self.selected = None
        self._enter_terminal(SessionState.REVEALED)
        self._finish([SolutionRevealed(previous)])
        return True

    # ---------- internals ----------

    def _refresh_violations(self, exempt: Optional[Position] = None) -> Set[Position]:
        violations = find_violations(self.grid)
        self.grid.apply_violations(violations - {exempt} if exempt else violations)
        return violations

    def _check_win(self) -> List[Event]:
        if self.state is not SessionState.PLAYING:
            return []
        if not self.grid.is_full() or self.grid.has_invalid():
            return []
        values = self.grid.values()
        if any(values[r][c] != self.solution[r][c] for r in range(SIZE) for c in range(SIZE)):
            return []
        self.selected = None
        self._enter_terminal(SessionState.SOLVED)
        self._reporter.notify_win()
        return [PuzzleSolved(self.elapsed_seconds)]

    def _enter_terminal(self, state: SessionState) -> None:
        if self._frozen_elapsed is None:
            self._frozen_elapsed = self.elapsed_seconds
        self.state = state
        log.append_event({
            "type": "sudoku.session.terminal.v1",
            "state": state.value,
            "difficulty": self.difficulty.value,
            "mistakes": self.mistake_count,
            "elapsed_seconds": self._frozen_elapsed,
        })

    def _finish(self, events: Sequence[Event]) -> Tuple[Event, ...]:
        if self._on_event is not None:
            for event in events:
                self._on_event(event)
        if self._debug_hook is not None:
            self._debug_hook(self)
        return tuple(events)


def new_game(
    difficulty: "str | Difficulty",
    source: Optional[SourceLike] = None,
    *,
    stats: Optional[StatsSink] = None,
    rng: Optional[random.Random] = None,
    clock: Callable[[], float] = time.monotonic,
    on_event: Optional[EventListener] = None,
    debug_hook: Optional[DebugHook] = None,
    report_dispatch: Optional[Dispatch] = None,
) -> Session:
    """Generate a puzzle and start a fresh session on it."""
    generated = generate(difficulty, source, rng=rng)
    return Session(
        generated,
        stats=stats,
        clock=clock,
        on_event=on_event,
        debug_hook=debug_hook,
        report_dispatch=report_dispatch,
    )


class GameTable:
    """Holds the collaborators and the one live session of a player.

    Starting a game or changing difficulty discards the previous session,
    including its mistakes and elapsed time.
    """

    def __init__(
        self,
        source: Optional[SourceLike] = None,
        stats: Optional[StatsSink] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        on_event: Optional[EventListener] = None,
        debug_hook: Optional[DebugHook] = None,
        report_dispatch: Optional[Dispatch] = None,
    ) -> None:
        self.source = source
        self.stats = stats
        self.rng = rng
        self.clock = clock
        self.on_event = on_event
        self.debug_hook = debug_hook
        self.report_dispatch = report_dispatch
        self.current: Optional[Session] = None

    def new_game(self, difficulty: "str | Difficulty") -> Session:
        self.current = new_game(
            difficulty,
            self.source,
            stats=self.stats,
            rng=self.rng,
            clock=self.clock,
            on_event=self.on_event,
            debug_hook=self.debug_hook,
            report_dispatch=self.report_dispatch,
        )
        return self.current

    def change_difficulty(self, difficulty: "str | Difficulty") -> Session:
        return self.new_game(difficulty)


__all__ = ["GameTable", "Session", "format_time", "new_game"]
