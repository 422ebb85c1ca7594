"""Random hidden-fleet generation for simulated opponents."""

from __future__ import annotations

import random

from salvo.ai.placements import contact_neighbors
from salvo.core.models import (
    BOARD_SIZE,
    SHIP_ORIENTATIONS,
    STANDARD_FLEET,
    AdjacencyRule,
    Coord,
    Placement,
)


def random_fleet(
    rng: random.Random,
    lengths: tuple[int, ...] = STANDARD_FLEET,
    *,
    rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL,
    size: int = BOARD_SIZE,
) -> list[Placement]:
    """Generate a random fleet whose ships respect the adjacency rule."""
    for _ in range(400):
        generated = _generate_fleet(rng, lengths, rule, size)
        if generated is not None:
            return generated
    raise RuntimeError("Failed to generate random fleet placement.")


def validate_fleet(
    placements: list[Placement],
    *,
    rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL,
    size: int = BOARD_SIZE,
) -> tuple[bool, str]:
    """Validate that ships are on the board and never touch against the rule."""
    occupied: set[Coord] = set()
    for placement in placements:
        cells = placement.cells
        if any(not (0 <= c.row < size and 0 <= c.col < size) for c in cells):
            return False, f"Ship at ({placement.start.row}, {placement.start.col}) leaves the board."
        if _blocked(cells, occupied, rule, size):
            return False, f"Ship at ({placement.start.row}, {placement.start.col}) overlaps or touches."
        occupied.update(cells)
    return True, ""


def _generate_fleet(
    rng: random.Random, lengths: tuple[int, ...], rule: AdjacencyRule, size: int
) -> list[Placement] | None:
    occupied: set[Coord] = set()
    placements: list[Placement] = []
    order = sorted(lengths, reverse=True)

    for length in order:
        candidates = _candidate_placements(length, size, occupied, rule)
        if not candidates:
            return None
        placement = rng.choice(candidates)
        placements.append(placement)
        occupied.update(placement.cells)
    return placements


def _candidate_placements(
    length: int, size: int, occupied: set[Coord], rule: AdjacencyRule
) -> list[Placement]:
    candidates: list[Placement] = []
    for orientation in SHIP_ORIENTATIONS:
        dr, dc = orientation.step
        for row in range(size - dr * (length - 1)):
            for col in range(size - dc * (length - 1)):
                placement = Placement(Coord(row, col), length, orientation)
                if _blocked(placement.cells, occupied, rule, size):
                    continue
                candidates.append(placement)
    return candidates


def _blocked(cells: tuple[Coord, ...], occupied: set[Coord], rule: AdjacencyRule, size: int) -> bool:
    for cell in cells:
        if cell in occupied:
            return True
        if any(neighbor in occupied for neighbor in contact_neighbors(cell, rule, size)):
            return True
    return False
