"""Puzzle generation with bounded retry and a bundled fallback."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from contracts.errors import InvalidPuzzlePayload
from ports.puzzle_source_port import SourceLike, fetch_pair
from project_config import get_section

from . import log
from .codec import count_clues, decode_grid
from .fallback import pick_fallback
from .grid import Grid
from .puzzle_source import LocalPuzzleSource
from .validator import clue_mismatches, is_complete_valid_solution


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {value!r}; expected one of {choices}") from None


ORIGIN_SOURCE = "source"
ORIGIN_RETRY = "retry"
ORIGIN_FALLBACK = "fallback"


@dataclass(frozen=True)
class GeneratedPuzzle:
    """A decoded puzzle and its solution, both 9x9 integer grids."""

    difficulty: Difficulty
    puzzle: Tuple[Tuple[int, ...], ...]
    solution: Tuple[Tuple[int, ...], ...]
    origin: str
    fallback_index: Optional[int] = None

    @property
    def clues(self) -> int:
        return count_clues(self.puzzle)

    def to_grid(self) -> Grid:
        """Cells for play: non-zero values become prefilled clues."""
        return Grid.from_values(self.puzzle)


def _freeze(values: List[List[int]]) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(row) for row in values)


def _attempt(source: SourceLike, difficulty: Difficulty, attempt: int) -> Optional[Tuple[List[List[int]], List[List[int]]]]:
    try:
        pair = fetch_pair(source, difficulty.value)
    except InvalidPuzzlePayload as exc:
        reason = str(exc)
    except Exception as exc:  # source faults are recoverable by retry/fallback
        reason = f"source raised {exc!r}"
    else:
        puzzle = decode_grid(pair["puzzle"])
        solution = decode_grid(pair["solution"])
        if not is_complete_valid_solution(solution):
            reason = "solution failed validation"
        elif clue_mismatches(puzzle, solution):
            reason = "puzzle clue disagrees with solution"
        else:
            return puzzle, solution

    log.append_event({
        "type": "sudoku.generation.attempt_failed.v1",
        "difficulty": difficulty.value,
        "attempt": attempt,
        "reason": reason,
    })
    return None


def generate(
    difficulty: "str | Difficulty",
    source: Optional[SourceLike] = None,
    *,
    rng: Optional[random.Random] = None,
    attempts: Optional[int] = None,
) -> GeneratedPuzzle:
    """Produce a (puzzle, solution) pair for *difficulty*.

    The source is tried ``attempts`` times (default from config, 2); each
    result is gated by :func:`is_complete_valid_solution` and must have every
    clue agree with its solution.  After that a pair is drawn uniformly
    from the bundled pool.  Only a defective pool raises, with
    :class:`contracts.errors.PuzzleGenerationExhausted`.
    """
    level = Difficulty.parse(difficulty)
    if source is None:
        source = LocalPuzzleSource()
    if attempts is None:
        attempts = int(get_section("generator.attempts", 2))

    origin = ORIGIN_SOURCE
    result = None
    fallback_index = None
    for attempt in range(1, max(attempts, 0) + 1):
        result = _attempt(source, level, attempt)
        if result is not None:
            origin = ORIGIN_SOURCE if attempt == 1 else ORIGIN_RETRY
            break

    if result is None:
        fallback_index, puzzle, solution = pick_fallback(rng)
        origin = ORIGIN_FALLBACK
        log.append_event({
            "type": "sudoku.generation.fallback_used.v1",
            "difficulty": level.value,
            "pool_index": fallback_index,
        })
    else:
        puzzle, solution = result

    generated = GeneratedPuzzle(
        difficulty=level,
        puzzle=_freeze(puzzle),
        solution=_freeze(solution),
        origin=origin,
        fallback_index=fallback_index,
    )
    log.append_event({
        "type": "sudoku.generation.ready.v1",
        "difficulty": level.value,
        "origin": origin,
        "clues": generated.clues,
    })
    return generated


__all__ = [
    "Difficulty",
    "GeneratedPuzzle",
    "ORIGIN_FALLBACK",
    "ORIGIN_RETRY",
    "ORIGIN_SOURCE",
    "generate",
]
