"""9x9 cell matrix and its constraint-group views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

SIZE = 9
BOX = 3
DIGITS = frozenset(range(1, SIZE + 1))

Position = Tuple[int, int]


def row_positions(i: int) -> List[Position]:
    return [(i, c) for c in range(SIZE)]


def col_positions(i: int) -> List[Position]:
    return [(r, i) for r in range(SIZE)]


def box_positions(i: int) -> List[Position]:
    """Box ``i`` spans rows ``3*(i//3)..+3`` and columns ``3*(i%3)..+3``."""
    r0 = BOX * (i // BOX)
    c0 = BOX * (i % BOX)
    return [(r0 + dr, c0 + dc) for dr in range(BOX) for dc in range(BOX)]


def box_index(row: int, col: int) -> int:
    return (row // BOX) * BOX + col // BOX


# The 27 groups: rows 0-8, columns 0-8, boxes 0-8.
ROW_GROUPS = tuple(tuple(row_positions(i)) for i in range(SIZE))
COL_GROUPS = tuple(tuple(col_positions(i)) for i in range(SIZE))
BOX_GROUPS = tuple(tuple(box_positions(i)) for i in range(SIZE))
ALL_GROUPS = ROW_GROUPS + COL_GROUPS + BOX_GROUPS


def _check_position(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise IndexError(f"cell ({row}, {col}) is outside the 9x9 grid")


@dataclass
class Cell:
    value: Optional[int] = None
    is_prefilled: bool = False
    is_invalid: bool = False
    is_mistake: bool = False

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "is_prefilled": self.is_prefilled,
            "is_invalid": self.is_invalid,
            "is_mistake": self.is_mistake,
        }


class Grid:
    """Row-major 9x9 matrix of :class:`Cell`.

    Values of prefilled cells never change; only their ``is_invalid`` flag is
    recomputed.  All writes go through :meth:`set_value` and the flag setters.
    """

    def __init__(self, cells: Sequence[Sequence[Cell]]) -> None:
        if len(cells) != SIZE or any(len(row) != SIZE for row in cells):
            raise ValueError("grid must be 9x9")
        self._cells: List[List[Cell]] = [list(row) for row in cells]

    @classmethod
    def from_values(cls, values: Sequence[Sequence[int]]) -> "Grid":
        """Build a puzzle grid: non-zero values become prefilled clues."""
        cells = []
        for row in values:
            cells.append([
                Cell(value=v, is_prefilled=True) if v else Cell()
                for v in row
            ])
        return cls(cells)

    def cell(self, row: int, col: int) -> Cell:
        _check_position(row, col)
        return self._cells[row][col]

    def __iter__(self) -> Iterator[Tuple[Position, Cell]]:
        for r in range(SIZE):
            for c in range(SIZE):
                yield (r, c), self._cells[r][c]

    def row_group(self, i: int) -> List[Cell]:
        return [self._cells[r][c] for r, c in ROW_GROUPS[i]]

    def col_group(self, i: int) -> List[Cell]:
        return [self._cells[r][c] for r, c in COL_GROUPS[i]]

    def box_group(self, i: int) -> List[Cell]:
        return [self._cells[r][c] for r, c in BOX_GROUPS[i]]

    def values(self) -> List[List[int]]:
        """Numeric view with 0 for empty cells."""
        return [[cell.value or 0 for cell in row] for row in self._cells]

    def set_value(self, row: int, col: int, value: Optional[int]) -> None:
        cell = self.cell(row, col)
        if cell.is_prefilled:
            raise ValueError(f"cell ({row}, {col}) is prefilled")
        if value is not None and value not in DIGITS:
            raise ValueError(f"digit must be in 1..9, got {value!r}")
        cell.value = value

    def set_mistake(self, row: int, col: int, flag: bool) -> None:
        self.cell(row, col).is_mistake = flag

    def set_invalid(self, row: int, col: int, flag: bool) -> None:
        self.cell(row, col).is_invalid = flag

    def apply_violations(self, violations: "set[Position]") -> None:
        for (r, c), cell in self:
            cell.is_invalid = (r, c) in violations

    def reveal(self, solution: Sequence[Sequence[int]]) -> None:
        """Overwrite every value with *solution*; prefilled flags are kept."""
        for (r, c), cell in self:
            cell.value = solution[r][c]
            cell.is_invalid = False
            cell.is_mistake = False

    def clear_user_entries(self) -> None:
        for _, cell in self:
            if not cell.is_prefilled:
                cell.value = None
                cell.is_invalid = False
                cell.is_mistake = False

    def is_full(self) -> bool:
        return all(cell.value is not None for _, cell in self)

    def has_invalid(self) -> bool:
        return any(cell.is_invalid for _, cell in self)

    def prefilled_count(self) -> int:
        return sum(1 for _, cell in self if cell.is_prefilled)

    def to_rows(self) -> List[List[dict]]:
        return [[cell.to_dict() for cell in row] for row in self._cells]


__all__ = [
    "ALL_GROUPS",
    "BOX_GROUPS",
    "COL_GROUPS",
    "Cell",
    "DIGITS",
    "Grid",
    "Position",
    "ROW_GROUPS",
    "SIZE",
    "box_index",
    "box_positions",
    "col_positions",
    "row_positions",
]
