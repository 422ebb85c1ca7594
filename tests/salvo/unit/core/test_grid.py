import numpy as np
import pytest

from salvo.core.grid import Grid
from salvo.core.models import CellState, Coord


def test_from_rows_parses_every_symbol() -> None:
    rows = ["*.ox#....."] + [".........."] * 9
    grid = Grid.from_rows(rows)
    assert grid.state_at(Coord(0, 0)) is CellState.UNKNOWN
    assert grid.bonus[0, 0]
    assert grid.state_at(Coord(0, 2)) is CellState.MISS
    assert grid.state_at(Coord(0, 3)) is CellState.HIT
    assert grid.state_at(Coord(0, 4)) is CellState.SUNK
    assert not grid.bonus[0, 1]


def test_from_rows_rejects_unknown_symbol_and_bad_width() -> None:
    with pytest.raises(ValueError):
        Grid.from_rows(["?........."] + [".........."] * 9)
    with pytest.raises(ValueError):
        Grid.from_rows(["...."] + [".........."] * 9)


def test_counts_and_open_cells(empty_grid: Grid) -> None:
    assert empty_grid.is_pristine()
    grid = Grid.from_states(
        {Coord(1, 1): CellState.MISS, Coord(2, 2): CellState.HIT, Coord(3, 3): CellState.SUNK}
    )
    assert not grid.is_pristine()
    assert grid.count(CellState.UNKNOWN) == 97
    assert grid.open_cell_count() == 98
    assert grid.cells_with(CellState.HIT) == [Coord(2, 2)]


def test_bonus_markers_are_dropped_on_revealed_cells() -> None:
    grid = Grid.from_states(
        {Coord(0, 0): CellState.MISS},
        bonus=[Coord(0, 0), Coord(5, 5)],
    )
    assert not grid.bonus[0, 0]
    assert grid.bonus[5, 5]


def test_states_shape_is_validated() -> None:
    with pytest.raises(ValueError):
        Grid(size=10, states=np.zeros((3, 3), dtype=np.int8))
