"""Uniqueness checks over the 27 row/column/box groups.

All functions are pure.  ``find_violations`` works on partial boards and is
what live sessions use; ``is_complete_valid_solution`` and ``clue_mismatches``
only gate generator output and the bundled fallback pool.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence, Set

from .grid import ALL_GROUPS, DIGITS, SIZE, Grid, Position

CellValue = Optional[int]


def _as_values(grid: Any) -> Sequence[Sequence[CellValue]]:
    if isinstance(grid, Grid):
        return grid.values()
    return grid


def find_violations(grid: Any) -> Set[Position]:
    """Return every cell whose value repeats inside one of its groups.

    *grid* is a :class:`Grid` or a 9x9 matrix where ``0``/``None`` mark empty
    cells.  Prefilled cells take part like any other; empty cells never do.
    Every member of a duplicated value within a group is reported.
    """
    values = _as_values(grid)
    violations: Set[Position] = set()
    for group in ALL_GROUPS:
        seen: Dict[int, List[Position]] = defaultdict(list)
        for r, c in group:
            v = values[r][c]
            if v:
                seen[v].append((r, c))
        for members in seen.values():
            if len(members) > 1:
                violations.update(members)
    return violations


def is_complete_valid_solution(grid: Any) -> bool:
    """True iff every row, column and box holds exactly the digits 1..9."""
    values = _as_values(grid)
    try:
        if len(values) != SIZE or any(len(row) != SIZE for row in values):
            return False
    except TypeError:
        return False
    for group in ALL_GROUPS:
        if {values[r][c] for r, c in group} != DIGITS:
            return False
    return True


def clue_mismatches(puzzle: Any, solution: Any) -> List[Position]:
    """Return the clue positions of *puzzle* whose digit differs from *solution*."""
    clues = _as_values(puzzle)
    answer = _as_values(solution)
    return [
        (r, c)
        for r in range(SIZE)
        for c in range(SIZE)
        if clues[r][c] and clues[r][c] != answer[r][c]
    ]


__all__ = ["clue_mismatches", "find_violations", "is_complete_valid_solution"]
