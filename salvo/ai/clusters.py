"""Hit clustering: group unsunk hits into ships in progress."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from salvo.core.grid import Grid
from salvo.core.models import CellState, Coord, Orientation, orthogonal_neighbors
from salvo.infra.errors import Inconsistency, report_inconsistency

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HitCluster:
    """A maximal 4-connected group of unsunk hit cells."""

    cells: frozenset[Coord]
    orientation: Orientation

    @property
    def size(self) -> int:
        return len(self.cells)

    def overlap(self, cells: Iterable[Coord]) -> int:
        return sum(1 for cell in cells if cell in self.cells)


def find_clusters(
    grid: Grid, longest_remaining: int | None = None
) -> tuple[list[HitCluster], list[Inconsistency]]:
    """Split the grid's HIT cells into connected clusters.

    SUNK cells are never part of a cluster. Orientation is inferred for clusters
    of two or more cells; a cluster that is neither a row nor a column, or that
    is longer than ``longest_remaining``, is reported as an inconsistency.
    """
    hits = set(grid.cells_with(CellState.HIT))
    seen: set[Coord] = set()
    clusters: list[HitCluster] = []
    issues: list[Inconsistency] = []

    for start in sorted(hits, key=lambda c: (c.row, c.col)):
        if start in seen:
            continue
        component = _connected_component(start, hits, grid.size)
        seen.update(component)
        orientation = infer_orientation(component)
        if len(component) >= 2 and orientation is Orientation.UNKNOWN:
            issues.append(
                report_inconsistency(
                    logger,
                    "cluster_not_linear",
                    f"cells={_format_cells(component)}",
                )
            )
        if longest_remaining is not None and len(component) > longest_remaining:
            issues.append(
                report_inconsistency(
                    logger,
                    "cluster_too_long",
                    f"size={len(component)} longest_remaining={longest_remaining}",
                )
            )
        clusters.append(HitCluster(cells=frozenset(component), orientation=orientation))
    return clusters, issues


def infer_orientation(cells: Iterable[Coord]) -> Orientation:
    """Infer orientation from cells sharing one row or one column."""
    members = list(cells)
    if len(members) < 2:
        return Orientation.UNKNOWN
    rows = {cell.row for cell in members}
    cols = {cell.col for cell in members}
    if len(rows) == 1:
        return Orientation.HORIZONTAL
    if len(cols) == 1:
        return Orientation.VERTICAL
    return Orientation.UNKNOWN


def _connected_component(start: Coord, hits: set[Coord], size: int) -> set[Coord]:
    component = {start}
    frontier: deque[Coord] = deque([start])
    while frontier:
        cell = frontier.popleft()
        for neighbor in orthogonal_neighbors(cell, size):
            if neighbor in hits and neighbor not in component:
                component.add(neighbor)
                frontier.append(neighbor)
    return component


def _format_cells(cells: Iterable[Coord]) -> str:
    return ",".join(f"({c.row},{c.col})" for c in sorted(cells, key=lambda c: (c.row, c.col)))
