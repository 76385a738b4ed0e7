from __future__ import annotations

import random

import pytest

from contracts.errors import PuzzleGenerationExhausted
from engine import fallback
from engine.codec import count_clues, decode_grid
from engine.grid import Grid
from engine.validator import is_complete_valid_solution


def test_bundled_pool_passes_validation():
    assert fallback.validate_pool(fallback.FALLBACK_PUZZLES) == []
    assert len(fallback.verified_pool()) == 5


def test_first_pool_entry_decodes_to_playable_grid():
    entry = fallback.FALLBACK_PUZZLES[0]
    assert entry["puzzle"] == "4.....8.5.3..........7......2.....6.....8.4......1.......6.3.7.5..2.....1.4......"
    grid = Grid.from_values(decode_grid(entry["puzzle"]))
    assert grid.prefilled_count() == 17
    assert is_complete_valid_solution(decode_grid(entry["solution"]))


def test_schema_rejects_malformed_entries():
    issues = fallback.validate_pool([{"puzzle": "123", "solution": "9" * 81, "extra": 1}])
    codes = {issue.code for issue in issues}
    assert "schema.pattern" in codes
    assert "schema.additionalProperties" in codes


def test_pool_checks_solution_and_clues():
    good = fallback.FALLBACK_PUZZLES[0]
    bad_solution = {"puzzle": good["puzzle"], "solution": good["solution"][1:] + good["solution"][0]}
    bad_clue = {"puzzle": "9" + good["puzzle"][1:], "solution": good["solution"]}
    issues = fallback.validate_pool([bad_solution, bad_clue])
    assert [(i.code, i.path) for i in issues] == [
        ("pool.invalid_solution", "$[0].solution"),
        ("pool.clue_mismatch", "$[1].puzzle"),
    ]


def test_pick_fallback_is_uniform_over_pool_indices():
    rng = random.Random(7)
    seen = {fallback.pick_fallback(rng)[0] for _ in range(200)}
    assert seen == set(range(len(fallback.FALLBACK_PUZZLES)))


def test_pick_fallback_returns_decoded_pair():
    index, puzzle, solution = fallback.pick_fallback(random.Random(1))
    entry = fallback.FALLBACK_PUZZLES[index]
    assert count_clues(puzzle) == 17
    assert solution == decode_grid(entry["solution"])


def test_defective_pool_is_fatal(monkeypatch):
    broken = ({"puzzle": "." * 81, "solution": "1" * 81},)
    monkeypatch.setattr(fallback, "FALLBACK_PUZZLES", broken)
    fallback.verified_pool.cache_clear()
    try:
        with pytest.raises(PuzzleGenerationExhausted) as excinfo:
            fallback.pick_fallback(random.Random(0))
        assert excinfo.value.issues[0].code == "pool.invalid_solution"
    finally:
        monkeypatch.undo()
        fallback.verified_pool.cache_clear()


def test_custom_pool_entry_is_revalidated_when_drawn():
    with pytest.raises(PuzzleGenerationExhausted):
        fallback.pick_fallback(random.Random(0), pool=[{"puzzle": "." * 81, "solution": "12" * 40 + "1"}])
    with pytest.raises(PuzzleGenerationExhausted):
        fallback.pick_fallback(pool=[])
