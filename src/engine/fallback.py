"""Pre-verified puzzle/solution pairs used when the puzzle source fails."""

from __future__ import annotations

import random
from functools import lru_cache
from typing import List, Mapping, Sequence, Tuple

from contracts.errors import PuzzleGenerationExhausted, ValidationIssue, make_error
from contracts.validator import validate

from .codec import decode_grid
from .validator import clue_mismatches, is_complete_valid_solution

FALLBACK_PUZZLES: Tuple[Mapping[str, str], ...] = (
    {
        "puzzle": "4.....8.5.3..........7......2.....6.....8.4......1.......6.3.7.5..2.....1.4......",
        "solution": "417369825632158947958724316825437169791586432346912758289643571573291684164875293",
    },
    {
        "puzzle": "52...6.........7.13...........4..8..6......5...........418.........3..2...87.....",
        "solution": "527316489896542731314987562172453896689271354453698217941825673765134928238769145",
    },
    {
        "puzzle": "6.....8.3.4.7.................5.4.7.3..2.....1.6.......2.....5.....8.6......1....",
        "solution": "617459823248736915539128467982564371374291586156873294823647159791385642465912738",
    },
    {
        "puzzle": "48.3............71.2.......7.5....6....2..8.............1.76...3.....4......5....",
        "solution": "487312695593684271126597384735849162914265837268731549851476923379128456642953718",
    },
    {
        "puzzle": "....14....3....2...7..........9...3.6.1.............8.2.....1.4....5.6.....7.8...",
        "solution": "962314857134587269578296413847962531651873942329145786285639174793451628416728395",
    },
)


def validate_pool(entries: Sequence[Mapping[str, str]]) -> List[ValidationIssue]:
    """Schema-check *entries* and verify each pair against its solution."""

    issues = validate(list(entries), "FallbackPool")
    if issues:
        return issues

    for index, entry in enumerate(entries):
        puzzle = decode_grid(entry["puzzle"])
        solution = decode_grid(entry["solution"])
        if not is_complete_valid_solution(solution):
            issues.append(make_error(
                "pool.invalid_solution",
                "solution is not a complete valid grid",
                f"$[{index}].solution",
            ))
            continue
        for r, c in clue_mismatches(puzzle, solution):
            issues.append(make_error(
                "pool.clue_mismatch",
                f"clue at ({r}, {c}) disagrees with the solution",
                f"$[{index}].puzzle",
            ))
    return issues


@lru_cache(maxsize=1)
def verified_pool() -> Tuple[Mapping[str, str], ...]:
    """Return the bundled pool, raising if any entry is defective."""

    issues = validate_pool(FALLBACK_PUZZLES)
    if issues:
        codes = ", ".join(f"{issue.code}@{issue.path}" for issue in issues[:5])
        raise PuzzleGenerationExhausted(f"Bundled fallback pool is invalid: {codes}", issues)
    return FALLBACK_PUZZLES


def pick_fallback(
    rng: random.Random | None = None,
    pool: Sequence[Mapping[str, str]] | None = None,
) -> Tuple[int, List[List[int]], List[List[int]]]:
    """Choose a pool entry uniformly and return ``(index, puzzle, solution)``.

    The chosen solution is validated again; a failure is a configuration
    defect and raises :class:`PuzzleGenerationExhausted`.
    """
    entries = verified_pool() if pool is None else pool
    if not entries:
        raise PuzzleGenerationExhausted("Fallback pool is empty")
    rng = rng or random.Random()
    index = rng.randrange(len(entries))
    entry = entries[index]
    puzzle = decode_grid(entry["puzzle"])
    solution = decode_grid(entry["solution"])
    if not is_complete_valid_solution(solution):
        raise PuzzleGenerationExhausted(
            f"Fallback entry {index} does not hold a valid solution",
            [make_error("pool.invalid_solution", "solution is not a complete valid grid", f"$[{index}].solution")],
        )
    return index, puzzle, solution


__all__ = ["FALLBACK_PUZZLES", "pick_fallback", "validate_pool", "verified_pool"]
