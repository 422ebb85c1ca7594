"""Per-cycle probability field selection: endgame, target, hunt or random."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from salvo.ai.clusters import HitCluster, find_clusters
from salvo.ai.endgame import endgame_eligible, solve_endgame
from salvo.ai.probability import hunt_field, target_field
from salvo.core.grid import Grid
from salvo.core.models import CellState, TargetingMode
from salvo.infra.config import TargetingConfig
from salvo.infra.errors import Inconsistency, report_inconsistency

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldResult:
    """Probability field for one decision cycle and how it was obtained."""

    field: np.ndarray
    mode: TargetingMode
    clusters: tuple[HitCluster, ...]
    issues: tuple[Inconsistency, ...] = ()

    @property
    def has_candidates(self) -> bool:
        return bool(np.any(self.field > 0.0))


def compute_field(
    grid: Grid, remaining: tuple[int, ...], config: TargetingConfig
) -> FieldResult:
    """Compute the scoring field for the sensed grid and remaining fleet."""
    longest = max(remaining) if remaining else None
    clusters, issues = find_clusters(grid, longest)

    if endgame_eligible(grid, remaining, config):
        solution = solve_endgame(grid, remaining, config.adjacency_rule)
        if solution is None:
            issues.append(
                report_inconsistency(
                    logger, "endgame_no_configurations", f"remaining={list(remaining)}"
                )
            )
        elif np.any(solution.probabilities > 0.0):
            return FieldResult(
                field=solution.probabilities,
                mode=TargetingMode.ENDGAME,
                clusters=tuple(clusters),
                issues=tuple(issues),
            )
        else:
            # Every layout covers only HIT cells.
            issues.append(
                report_inconsistency(
                    logger,
                    "endgame_field_empty",
                    f"configurations={solution.configurations} remaining={list(remaining)}",
                )
            )

    if clusters:
        field = target_field(grid, clusters, remaining, config)
        if np.any(field > 0.0):
            return FieldResult(field, TargetingMode.TARGET, tuple(clusters), tuple(issues))
        issues.append(
            report_inconsistency(
                logger,
                "target_field_empty",
                f"clusters={len(clusters)} remaining={list(remaining)}",
            )
        )

    field = hunt_field(grid, remaining, config)
    if np.any(field > 0.0):
        return FieldResult(field, TargetingMode.HUNT, tuple(clusters), tuple(issues))

    logger.warning("no_legal_cells remaining=%s falling back to uniform", list(remaining))
    uniform = grid.mask(CellState.UNKNOWN).astype(np.float64)
    return FieldResult(uniform, TargetingMode.RANDOM, tuple(clusters), tuple(issues))
