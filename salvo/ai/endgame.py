"""Exact enumeration of the remaining fleet for small endgames."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from salvo.ai.placements import all_placements, placements_conflict
from salvo.core.grid import Grid
from salvo.core.models import AdjacencyRule, CellState, Coord, Placement
from salvo.infra.config import TargetingConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EndgameSolution:
    """Exact per-cell occupancy marginals over all consistent fleet layouts."""

    probabilities: np.ndarray
    configurations: int


def endgame_eligible(grid: Grid, remaining: Sequence[int], config: TargetingConfig) -> bool:
    """Return whether the search space is small enough to enumerate exactly."""
    if not config.endgame_enabled or not remaining:
        return False
    if len(remaining) > config.endgame_max_ships:
        return False
    return grid.open_cell_count() < config.endgame_open_cells


def solve_endgame(
    grid: Grid,
    remaining: Sequence[int],
    rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL,
) -> EndgameSolution | None:
    """Enumerate every joint placement of ``remaining`` consistent with the grid.

    A layout is consistent when each ship is legal, no two ships conflict under
    ``rule`` and together they cover every HIT cell. Returns None when no layout
    exists.
    """
    hits = frozenset(grid.cells_with(CellState.HIT))
    if sum(remaining) < len(hits):
        logger.info("endgame_hits_exceed_fleet hits=%d remaining=%s", len(hits), list(remaining))
        return None

    # Longest ships first keeps the candidate lists short at the top of the search.
    lengths = sorted(remaining, reverse=True)
    candidates = [all_placements(length, grid, rule) for length in lengths]
    counts = np.zeros((grid.size, grid.size), dtype=np.int64)
    total = _enumerate(candidates, 0, [], hits, rule, grid.size, counts)

    if total == 0:
        logger.info(
            "endgame_no_configurations remaining=%s hits=%d", list(remaining), len(hits)
        )
        return None

    probabilities = counts.astype(np.float64) / float(total)
    probabilities[~grid.mask(CellState.UNKNOWN)] = 0.0
    logger.debug("endgame_solved configurations=%d remaining=%s", total, list(remaining))
    return EndgameSolution(probabilities=probabilities, configurations=total)


def _enumerate(
    candidates: list[list[Placement]],
    index: int,
    chosen: list[Placement],
    hits: frozenset[Coord],
    rule: AdjacencyRule,
    size: int,
    counts: np.ndarray,
) -> int:
    if index == len(candidates):
        covered = {cell for placement in chosen for cell in placement.cells}
        if not hits <= covered:
            return 0
        for cell in covered:
            counts[cell.row, cell.col] += 1
        return 1

    ships_left = len(candidates) - index
    total = 0
    for placement in candidates[index]:
        if any(placements_conflict(other, placement, rule, size) for other in chosen):
            continue
        if ships_left == 1 and not _could_finish(chosen, placement, hits):
            continue
        chosen.append(placement)
        total += _enumerate(candidates, index + 1, chosen, hits, rule, size, counts)
        chosen.pop()
    return total


def _could_finish(chosen: list[Placement], last: Placement, hits: frozenset[Coord]) -> bool:
    covered = set(last.cells)
    for placement in chosen:
        covered.update(placement.cells)
    return hits <= covered
