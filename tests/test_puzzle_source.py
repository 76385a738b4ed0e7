from __future__ import annotations

import random

import pytest

from engine.codec import count_clues, decode_grid
from engine.puzzle_source import (
    LocalPuzzleSource,
    clue_target,
    generate_full_solution,
    has_unique_solution,
    symmetric_pairs,
)
from engine.validator import is_complete_valid_solution

SOLUTION = "617459823248736915539128467982564371374291586156873294823647159791385642465912738"


def test_clue_targets_follow_difficulty():
    assert clue_target("easy") == 40
    assert clue_target("medium") == 30
    assert clue_target("hard") == 25
    with pytest.raises(ValueError):
        clue_target("expert")


def test_full_solutions_are_valid():
    rng = random.Random(42)
    for _ in range(3):
        assert is_complete_valid_solution(generate_full_solution(rng))


def test_full_solution_falls_back_to_pattern_when_out_of_time():
    assert is_complete_valid_solution(generate_full_solution(random.Random(1), time_limit=-1.0))


def test_uniqueness_checker():
    assert has_unique_solution(decode_grid(SOLUTION))
    nearly_full = decode_grid(SOLUTION)
    for r, c in [(0, 0), (1, 4), (2, 8), (4, 1), (8, 6)]:
        nearly_full[r][c] = 0
    assert has_unique_solution(nearly_full)
    assert not has_unique_solution([[0] * 9 for _ in range(9)])
    clash = decode_grid(SOLUTION)
    clash[0][0] = clash[0][1]
    assert not has_unique_solution(clash)


def test_symmetric_pairs_cover_the_board_once():
    cells = set()
    for a, b in symmetric_pairs():
        cells.update({a, b})
    assert len(symmetric_pairs()) == 41
    assert len(cells) == 81


def test_local_source_emits_unique_easy_puzzle():
    pair = LocalPuzzleSource(seed=11).get_puzzle("easy")
    assert len(pair["puzzle"]) == 81 and len(pair["solution"]) == 81
    puzzle = decode_grid(pair["puzzle"])
    solution = decode_grid(pair["solution"])
    assert is_complete_valid_solution(solution)
    assert count_clues(puzzle) >= clue_target("easy")
    assert count_clues(puzzle) < 81
    assert has_unique_solution(puzzle)
    for r in range(9):
        for c in range(9):
            assert puzzle[r][c] in (0, solution[r][c])
