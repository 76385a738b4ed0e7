from __future__ import annotations

import pytest

from engine.grid import BOX_GROUPS, Grid, box_index, box_positions


def _values() -> list[list[int]]:
    values = [[0] * 9 for _ in range(9)]
    values[0][0] = 5
    values[4][4] = 3
    return values


def test_box_positions_follow_row_major_box_numbering():
    assert box_positions(0)[0] == (0, 0)
    assert box_positions(5) == [(3, 6), (3, 7), (3, 8), (4, 6), (4, 7), (4, 8), (5, 6), (5, 7), (5, 8)]
    assert box_positions(7)[-1] == (8, 5)
    for i, group in enumerate(BOX_GROUPS):
        assert {box_index(r, c) for r, c in group} == {i}


def test_groups_yield_nine_cells_each():
    grid = Grid.from_values(_values())
    for i in range(9):
        assert len(grid.row_group(i)) == 9
        assert len(grid.col_group(i)) == 9
        assert len(grid.box_group(i)) == 9
    assert grid.row_group(0)[0] is grid.cell(0, 0)
    assert grid.col_group(4)[4] is grid.cell(4, 4)
    assert grid.box_group(4)[4] is grid.cell(4, 4)


def test_from_values_marks_clues_prefilled():
    grid = Grid.from_values(_values())
    assert grid.cell(0, 0).is_prefilled and grid.cell(0, 0).value == 5
    assert not grid.cell(0, 1).is_prefilled and grid.cell(0, 1).value is None
    assert grid.prefilled_count() == 2
    assert not any(cell.is_invalid or cell.is_mistake for _, cell in grid)


def test_prefilled_cells_cannot_be_written():
    grid = Grid.from_values(_values())
    with pytest.raises(ValueError):
        grid.set_value(0, 0, 1)
    with pytest.raises(ValueError):
        grid.set_value(0, 1, 10)
    with pytest.raises(IndexError):
        grid.cell(9, 0)
    grid.set_value(0, 1, 7)
    assert grid.values()[0][:2] == [5, 7]


def test_reveal_keeps_prefilled_flags():
    grid = Grid.from_values(_values())
    grid.set_value(1, 1, 9)
    grid.set_mistake(1, 1, True)
    solution = [[(r * 3 + r // 3 + c) % 9 + 1 for c in range(9)] for r in range(9)]
    grid.reveal(solution)
    assert grid.values() == solution
    assert grid.cell(0, 0).is_prefilled
    assert not grid.cell(1, 1).is_prefilled
    assert not grid.cell(1, 1).is_mistake
