"""Core domain models used by the targeting engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

BOARD_SIZE = 10

STANDARD_FLEET: tuple[int, ...] = (5, 4, 3, 3, 2)


class CellState(StrEnum):
    """Sensed state of one opponent cell."""

    UNKNOWN = "UNKNOWN"
    MISS = "MISS"
    HIT = "HIT"
    SUNK = "SUNK"


class Orientation(StrEnum):
    """Ship or cluster orientation."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"
    UNKNOWN = "UNKNOWN"

    @property
    def step(self) -> tuple[int, int]:
        if self is Orientation.HORIZONTAL:
            return 0, 1
        if self is Orientation.VERTICAL:
            return 1, 0
        raise ValueError("UNKNOWN orientation has no step")


SHIP_ORIENTATIONS: tuple[Orientation, ...] = (Orientation.HORIZONTAL, Orientation.VERTICAL)


class WeaponKind(StrEnum):
    """Attack kinds offered by the host game."""

    SINGLE = "SINGLE"
    CROSS5 = "CROSS5"
    LINE4 = "LINE4"
    BLOCK9 = "BLOCK9"

    @property
    def pattern(self) -> tuple[tuple[int, int], ...]:
        return WEAPON_PATTERNS[self]


WEAPON_PATTERNS: dict[WeaponKind, tuple[tuple[int, int], ...]] = {
    WeaponKind.SINGLE: ((0, 0),),
    WeaponKind.CROSS5: ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1)),
    # Host label; the footprint is three cells in a row.
    WeaponKind.LINE4: ((0, -1), (0, 0), (0, 1)),
    WeaponKind.BLOCK9: tuple((dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1)),
}

WeaponInventory = dict[WeaponKind, int]


class AdjacencyRule(StrEnum):
    """How closely two ships may sit next to each other."""

    ORTHOGONAL = "ORTHOGONAL"  # no shared edge, corners may touch
    DIAGONAL = "DIAGONAL"  # no shared edge or corner
    NONE = "NONE"

    @property
    def forbids_contact(self) -> bool:
        return self is not AdjacencyRule.NONE


class TargetingMode(StrEnum):
    """Scoring regime used for one decision cycle."""

    HUNT = "HUNT"
    TARGET = "TARGET"
    ENDGAME = "ENDGAME"
    RANDOM = "RANDOM"


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    row: int
    col: int

    def offset(self, dr: int, dc: int) -> Coord:
        return Coord(self.row + dr, self.col + dc)

    def distance(self, other: Coord) -> int:
        """Manhattan distance."""
        return abs(self.row - other.row) + abs(self.col - other.col)

    def is_adjacent(self, other: Coord) -> bool:
        return self.distance(other) == 1


@dataclass(frozen=True, slots=True)
class Placement:
    """Candidate position of a single ship."""

    start: Coord
    length: int
    orientation: Orientation

    @property
    def cells(self) -> tuple[Coord, ...]:
        return placement_cells(self.start.row, self.start.col, self.length, self.orientation)


def placement_cells(
    start_row: int, start_col: int, length: int, orientation: Orientation
) -> tuple[Coord, ...]:
    """Compute occupied cells for a ship placement."""
    dr, dc = orientation.step
    return tuple(Coord(start_row + dr * i, start_col + dc * i) for i in range(length))


def all_coords(size: int = BOARD_SIZE) -> list[Coord]:
    return [Coord(r, c) for r in range(size) for c in range(size)]


def in_bounds(coord: Coord, size: int = BOARD_SIZE) -> bool:
    return 0 <= coord.row < size and 0 <= coord.col < size


def orthogonal_neighbors(coord: Coord, size: int = BOARD_SIZE) -> list[Coord]:
    result: list[Coord] = []
    for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        cell = coord.offset(dr, dc)
        if in_bounds(cell, size):
            result.append(cell)
    return result


def ring_neighbors(coord: Coord, size: int = BOARD_SIZE) -> list[Coord]:
    """Return all 8 surrounding cells in bounds."""
    result: list[Coord] = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            cell = coord.offset(dr, dc)
            if in_bounds(cell, size):
                result.append(cell)
    return result
