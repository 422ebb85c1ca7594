"""Fleet tracking from observed sunk-cell deltas."""

from __future__ import annotations

import itertools
import logging
from collections import Counter
from dataclasses import dataclass, field, replace

from salvo.core.grid import Grid
from salvo.core.models import STANDARD_FLEET, CellState, Coord, orthogonal_neighbors
from salvo.infra.errors import Inconsistency, report_inconsistency

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FleetState:
    """Remaining and sunk ship lengths plus the last observation they were derived from."""

    initial: tuple[int, ...] = STANDARD_FLEET
    remaining: tuple[int, ...] = STANDARD_FLEET
    sunk: tuple[int, ...] = ()
    sunk_cells: frozenset[Coord] = field(default_factory=frozenset)
    hits: tuple[Coord, ...] = ()

    @classmethod
    def fresh(cls, fleet: tuple[int, ...] = STANDARD_FLEET) -> FleetState:
        ordered = tuple(sorted(fleet, reverse=True))
        return cls(initial=ordered, remaining=ordered)

    @property
    def sunk_count(self) -> int:
        return len(self.sunk_cells)

    @property
    def total_cells(self) -> int:
        return sum(self.initial)

    @property
    def has_progress(self) -> bool:
        return bool(self.sunk or self.sunk_cells or self.hits)

    def is_conserved(self) -> bool:
        return sum(self.remaining) + sum(self.sunk) == self.total_cells

    def with_sunk(self, lengths: list[int]) -> FleetState:
        remaining = list(self.remaining)
        for length in lengths:
            remaining.remove(length)
        return replace(
            self,
            remaining=tuple(sorted(remaining, reverse=True)),
            sunk=tuple(sorted((*self.sunk, *lengths), reverse=True)),
        )


def track_fleet(state: FleetState, grid: Grid) -> tuple[FleetState, list[Inconsistency]]:
    """Advance the fleet state to match a freshly sensed grid."""
    issues: list[Inconsistency] = []
    if grid.is_pristine() and state.has_progress:
        logger.info("new_match_detected sunk=%s remaining=%s", state.sunk, state.remaining)
        state = FleetState.fresh(state.initial)

    sunk_now = frozenset(grid.cells_with(CellState.SUNK))
    hits_now = tuple(grid.cells_with(CellState.HIT))
    delta = len(sunk_now) - state.sunk_count

    if delta > 0:
        lengths = _resolve_sunk_lengths(state, sunk_now - state.sunk_cells, delta, grid.size)
        if lengths is None:
            issues.append(
                report_inconsistency(
                    logger,
                    "unmatched_sunk_delta",
                    f"delta={delta} remaining={list(state.remaining)}",
                )
            )
        else:
            if len(lengths) > 1:
                issues.append(
                    report_inconsistency(
                        logger,
                        "multi_sink",
                        f"delta={delta} lengths={lengths}",
                    )
                )
            state = state.with_sunk(lengths)
            logger.info("ship_sunk lengths=%s remaining=%s", lengths, list(state.remaining))
    elif delta < 0:
        issues.append(
            report_inconsistency(
                logger,
                "sunk_count_decreased",
                f"previous={state.sunk_count} observed={len(sunk_now)}",
            )
        )

    return replace(state, sunk_cells=sunk_now, hits=hits_now), issues


def _resolve_sunk_lengths(
    state: FleetState, new_cells: frozenset[Coord], delta: int, size: int
) -> list[int] | None:
    # A ship's cells turn SUNK together, so each new component is one ship
    # unless ships were allowed to touch.
    pieces = sorted((len(group) for group in _components(new_cells, size)), reverse=True)
    if sum(pieces) == delta and _is_submultiset(pieces, state.remaining):
        return pieces

    if delta in state.remaining:
        return [delta]

    for count in range(2, len(state.remaining) + 1):
        for combo in itertools.combinations(state.remaining, count):
            if sum(combo) == delta:
                return list(combo)
    return None


def _components(cells: frozenset[Coord], size: int) -> list[set[Coord]]:
    pending = set(cells)
    groups: list[set[Coord]] = []
    while pending:
        start = pending.pop()
        group = {start}
        stack = [start]
        while stack:
            cell = stack.pop()
            for neighbor in orthogonal_neighbors(cell, size):
                if neighbor in pending:
                    pending.discard(neighbor)
                    group.add(neighbor)
                    stack.append(neighbor)
        groups.append(group)
    return groups


def _is_submultiset(items: list[int], pool: tuple[int, ...]) -> bool:
    needed = Counter(items)
    available = Counter(pool)
    return all(available[item] >= count for item, count in needed.items())
