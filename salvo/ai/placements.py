"""Ship placement enumeration and legality against a sensed grid."""

from __future__ import annotations

from salvo.core.grid import Grid
from salvo.core.models import (
    SHIP_ORIENTATIONS,
    AdjacencyRule,
    CellState,
    Coord,
    Orientation,
    Placement,
    orthogonal_neighbors,
    placement_cells,
    ring_neighbors,
)


def contact_neighbors(coord: Coord, rule: AdjacencyRule, size: int) -> list[Coord]:
    """Cells another ship may not occupy when a ship sits on ``coord``."""
    if rule is AdjacencyRule.ORTHOGONAL:
        return orthogonal_neighbors(coord, size)
    if rule is AdjacencyRule.DIAGONAL:
        return ring_neighbors(coord, size)
    return []


def touches_sunk(grid: Grid, coord: Coord, rule: AdjacencyRule) -> bool:
    """Return whether a cell is in forbidden contact with a sunk ship."""
    return any(
        grid.is_state(neighbor, CellState.SUNK)
        for neighbor in contact_neighbors(coord, rule, grid.size)
    )


def is_legal(
    start_row: int,
    start_col: int,
    length: int,
    orientation: Orientation,
    grid: Grid,
    rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL,
) -> bool:
    """Return whether a ship of ``length`` may lie at the given start and orientation."""
    if orientation is Orientation.UNKNOWN or length <= 0:
        return False
    cells = placement_cells(start_row, start_col, length, orientation)
    for cell in cells:
        if not grid.in_bounds(cell):
            return False
        if grid.is_state(cell, CellState.MISS) or grid.is_state(cell, CellState.SUNK):
            return False
    if not rule.forbids_contact:
        return True
    occupied = set(cells)
    for cell in cells:
        for neighbor in contact_neighbors(cell, rule, grid.size):
            if neighbor in occupied:
                continue
            if grid.is_state(neighbor, CellState.SUNK):
                return False
    return True


def placements_covering(
    target: Coord,
    length: int,
    grid: Grid,
    rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL,
    orientations: tuple[Orientation, ...] = SHIP_ORIENTATIONS,
) -> list[Placement]:
    """Enumerate legal placements of one ship that cover ``target``."""
    result: list[Placement] = []
    for orientation in orientations:
        dr, dc = orientation.step
        for offset in range(length):
            start_row = target.row - dr * offset
            start_col = target.col - dc * offset
            if is_legal(start_row, start_col, length, orientation, grid, rule):
                result.append(Placement(Coord(start_row, start_col), length, orientation))
    return result


def all_placements(
    length: int,
    grid: Grid,
    rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL,
) -> list[Placement]:
    """Enumerate every legal placement of one ship on the grid."""
    result: list[Placement] = []
    for orientation in SHIP_ORIENTATIONS:
        dr, dc = orientation.step
        max_row = grid.size - dr * (length - 1)
        max_col = grid.size - dc * (length - 1)
        for row in range(max_row):
            for col in range(max_col):
                if is_legal(row, col, length, orientation, grid, rule):
                    result.append(Placement(Coord(row, col), length, orientation))
    return result


def placements_conflict(first: Placement, second: Placement, rule: AdjacencyRule, size: int) -> bool:
    """Return whether two ships overlap or touch in a way the rule forbids."""
    first_cells = set(first.cells)
    for cell in second.cells:
        if cell in first_cells:
            return True
        if any(n in first_cells for n in contact_neighbors(cell, rule, size)):
            return True
    return False
