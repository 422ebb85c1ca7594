"""Heuristic probability fields for hunt and target modes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from salvo.ai.clusters import HitCluster
from salvo.ai.placements import all_placements, placements_covering, touches_sunk
from salvo.ai.utility import empty_field
from salvo.core.grid import Grid
from salvo.core.models import SHIP_ORIENTATIONS, CellState, Orientation, Placement
from salvo.infra.config import TargetingConfig


def candidate_mask(grid: Grid, config: TargetingConfig) -> np.ndarray:
    """Boolean mask of cells that may still hold an undiscovered ship cell."""
    mask = grid.mask(CellState.UNKNOWN).copy()
    if not config.adjacency_rule.forbids_contact or grid.count(CellState.SUNK) == 0:
        return mask
    for coord in grid.cells_with(CellState.UNKNOWN):
        if touches_sunk(grid, coord, config.adjacency_rule):
            mask[coord.row, coord.col] = False
    return mask


def parity_class(grid: Grid, shortest: int) -> int | None:
    """Residue of ``(row + col) mod shortest`` holding the most unresolved cells.

    Ties resolve to the lowest residue. Returns None when parity cannot help.
    """
    if shortest < 2:
        return None
    counts = [0] * shortest
    for coord in grid.cells_with(CellState.UNKNOWN):
        counts[(coord.row + coord.col) % shortest] += 1
    if not any(counts):
        return None
    return counts.index(max(counts))


def hunt_field(grid: Grid, remaining: Sequence[int], config: TargetingConfig) -> np.ndarray:
    """Score unresolved cells by how many legal ship placements cover them."""
    field = empty_field(grid.size)
    candidates = candidate_mask(grid, config)
    for length in remaining:
        for placement in all_placements(length, grid, config.adjacency_rule):
            for cell in placement.cells:
                if candidates[cell.row, cell.col]:
                    field[cell.row, cell.col] += 1.0

    if remaining:
        shortest = min(remaining)
        residue = parity_class(grid, shortest)
        if residue is not None:
            rows, cols = np.indices(field.shape)
            in_class = (rows + cols) % shortest == residue
            field = np.where(
                in_class, field * config.parity_bonus, field * config.parity_penalty
            )

    field[candidates & grid.bonus] += config.bonus_marker_score
    field[~candidates] = 0.0
    return field


def target_field(
    grid: Grid,
    clusters: Iterable[HitCluster],
    remaining: Sequence[int],
    config: TargetingConfig,
) -> np.ndarray:
    """Score cells that could extend or complete one of the hit clusters.

    Each placement that covers at least one cluster cell contributes
    ``target_overlap_base ** overlap`` to its unresolved cells, so placements
    agreeing with more confirmed hits dominate. Contributions from every
    cluster and every remaining ship are summed.
    """
    field = empty_field(grid.size)
    candidates = candidate_mask(grid, config)
    for cluster in clusters:
        orientations = _cluster_orientations(cluster)
        for length in remaining:
            for placement in _placements_touching(cluster, length, grid, config, orientations):
                cells = placement.cells
                weight = config.target_overlap_base ** cluster.overlap(cells)
                for cell in cells:
                    if candidates[cell.row, cell.col]:
                        field[cell.row, cell.col] += weight
    return field


def _cluster_orientations(cluster: HitCluster) -> tuple[Orientation, ...]:
    if cluster.orientation is Orientation.UNKNOWN:
        return SHIP_ORIENTATIONS
    return (cluster.orientation,)


def _placements_touching(
    cluster: HitCluster,
    length: int,
    grid: Grid,
    config: TargetingConfig,
    orientations: tuple[Orientation, ...],
) -> set[Placement]:
    found: set[Placement] = set()
    for cell in cluster.cells:
        found.update(
            placements_covering(cell, length, grid, config.adjacency_rule, orientations)
        )
    return found
