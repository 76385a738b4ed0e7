from __future__ import annotations

import random

import pytest

from contracts.errors import PuzzleGenerationExhausted
from engine import fallback
from engine.generator import (
    ORIGIN_FALLBACK,
    ORIGIN_RETRY,
    ORIGIN_SOURCE,
    Difficulty,
    generate,
)

PUZZLE = "52...6.........7.13...........4..8..6......5...........418.........3..2...87....."
SOLUTION = "527316489896542731314987562172453896689271354453698217941825673765134928238769145"
BROKEN = {"puzzle": PUZZLE, "solution": SOLUTION[:-1] + "4"}


class ScriptedSource:
    """Returns (or raises) the scripted replies in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[str] = []

    def get_puzzle(self, difficulty):
        self.calls.append(difficulty)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def test_valid_first_answer_is_used():
    source = ScriptedSource({"puzzle": PUZZLE, "solution": SOLUTION})
    generated = generate("medium", source)
    assert generated.origin == ORIGIN_SOURCE
    assert generated.difficulty is Difficulty.MEDIUM
    assert source.calls == ["medium"]
    assert generated.clues == 17
    assert "".join(str(v) for row in generated.solution for v in row) == SOLUTION


def test_invalid_solution_is_retried_once(logged_events):
    source = ScriptedSource(BROKEN, {"puzzle": PUZZLE.replace(".", "-"), "solution": SOLUTION})
    generated = generate("hard", source)
    assert generated.origin == ORIGIN_RETRY
    assert len(source.calls) == 2
    failures = [e for e in logged_events() if e["type"] == "sudoku.generation.attempt_failed.v1"]
    assert [e["attempt"] for e in failures] == [1]


def test_two_failures_fall_back_to_the_pool(logged_events):
    source = ScriptedSource(BROKEN, BROKEN, {"puzzle": PUZZLE, "solution": SOLUTION})
    generated = generate(Difficulty.EASY, source, rng=random.Random(3))
    assert generated.origin == ORIGIN_FALLBACK
    assert len(source.calls) == 2
    entry = fallback.FALLBACK_PUZZLES[generated.fallback_index]
    assert "".join(str(v) for row in generated.solution for v in row) == entry["solution"]
    types = [e["type"] for e in logged_events()]
    assert types.count("sudoku.generation.attempt_failed.v1") == 2
    assert "sudoku.generation.fallback_used.v1" in types


def test_clue_contradicting_solution_is_retried(logged_events):
    # valid solution, but the first clue (5) is replaced by a 9
    mismatched = {"puzzle": "9" + PUZZLE[1:], "solution": SOLUTION}
    source = ScriptedSource(mismatched, {"puzzle": PUZZLE, "solution": SOLUTION})
    generated = generate("easy", source)
    assert generated.origin == ORIGIN_RETRY
    assert generated.puzzle[0][0] == 5
    failures = [e for e in logged_events() if e["type"] == "sudoku.generation.attempt_failed.v1"]
    assert [(e["attempt"], e["reason"]) for e in failures] == [
        (1, "puzzle clue disagrees with solution"),
    ]


def test_clue_mismatch_on_every_attempt_falls_back():
    mismatched = {"puzzle": "9" + PUZZLE[1:], "solution": SOLUTION}
    generated = generate("easy", ScriptedSource(mismatched, mismatched), rng=random.Random(1))
    assert generated.origin == ORIGIN_FALLBACK


def test_source_errors_and_bad_payloads_count_as_failed_attempts():
    source = ScriptedSource(RuntimeError("offline"), ["not", "a", "mapping"])
    generated = generate("easy", source, rng=random.Random(0))
    assert generated.origin == ORIGIN_FALLBACK
    assert len(source.calls) == 2


def test_callable_source_is_accepted():
    calls = []

    def source(difficulty):
        calls.append(difficulty)
        return {"puzzle": PUZZLE, "solution": SOLUTION}

    assert generate("easy", source).origin == ORIGIN_SOURCE
    assert calls == ["easy"]


def test_puzzle_grid_has_clean_cells():
    grid = generate("easy", ScriptedSource({"puzzle": PUZZLE, "solution": SOLUTION})).to_grid()
    assert grid.prefilled_count() == 17
    assert grid.cell(0, 0).value == 5 and grid.cell(0, 0).is_prefilled
    assert grid.cell(0, 2).value is None and not grid.cell(0, 2).is_prefilled
    assert not any(cell.is_invalid or cell.is_mistake for _, cell in grid)


def test_unknown_difficulty_is_rejected():
    with pytest.raises(ValueError):
        generate("expert", ScriptedSource())


def test_defective_pool_surfaces_exhaustion(monkeypatch):
    monkeypatch.setattr(fallback, "FALLBACK_PUZZLES", ({"puzzle": "." * 81, "solution": "9" * 81},))
    fallback.verified_pool.cache_clear()
    try:
        with pytest.raises(PuzzleGenerationExhausted):
            generate("easy", ScriptedSource(BROKEN, BROKEN))
    finally:
        monkeypatch.undo()
        fallback.verified_pool.cache_clear()
