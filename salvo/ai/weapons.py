"""Weapon selection against a probability field."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass

import numpy as np

from salvo.ai.utility import normalize_to_max, pick_best_cell
from salvo.core.grid import Grid
from salvo.core.models import CellState, Coord, WeaponInventory, WeaponKind
from salvo.infra.config import TargetingConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WeaponOption:
    """One weapon fired at one cell, scored against the field."""

    coord: Coord
    weapon: WeaponKind
    new_cells: tuple[Coord, ...]
    wasted: int
    hit_overlap: int
    efficiency: float
    yield_: float
    single_score: float

    @property
    def score(self) -> float:
        return self.yield_ * self.efficiency


@dataclass(frozen=True, slots=True)
class AttackChoice:
    """The attack chosen for this cycle."""

    coord: Coord
    weapon: WeaponKind
    expected_yield: float
    option: WeaponOption | None = None


def pattern_cells(coord: Coord, weapon: WeaponKind) -> list[Coord]:
    """Translate a weapon footprint to ``coord``; cells may fall off the board."""
    return [coord.offset(dr, dc) for dr, dc in weapon.pattern]


def evaluate_pattern(
    grid: Grid, relative: np.ndarray, coord: Coord, weapon: WeaponKind
) -> WeaponOption:
    """Split a footprint into new, wasted and hit-overlap cells and score it."""
    cells = pattern_cells(coord, weapon)
    new_cells: list[Coord] = []
    wasted = 0
    hit_overlap = 0
    for cell in cells:
        if not grid.in_bounds(cell):
            wasted += 1
        elif grid.is_state(cell, CellState.UNKNOWN):
            new_cells.append(cell)
        elif grid.is_state(cell, CellState.HIT):
            hit_overlap += 1
        else:
            wasted += 1
    yield_ = float(sum(relative[cell.row, cell.col] for cell in new_cells))
    return WeaponOption(
        coord=coord,
        weapon=weapon,
        new_cells=tuple(new_cells),
        wasted=wasted,
        hit_overlap=hit_overlap,
        efficiency=len(new_cells) / len(cells),
        yield_=yield_,
        single_score=float(relative[coord.row, coord.col]),
    )


def acceptance_bar(ammo: int, open_cells: int, config: TargetingConfig) -> tuple[float, float]:
    """Return ``(min_yield, margin)`` for spending one round of a weapon.

    Both relax as more ammunition remains and again once few open cells are left.
    """
    scarcity = 1.0 / (1.0 + config.ammo_relief * max(0, ammo - 1))
    if open_cells >= config.endgame_weapon_cells:
        urgency = 1.0
    else:
        urgency = max(config.endgame_weapon_floor, open_cells / config.endgame_weapon_cells)
    relief = scarcity * urgency
    min_yield = config.weapon_min_yield * relief
    margin = 1.0 + (config.weapon_margin - 1.0) * relief
    return min_yield, margin


def is_acceptable(option: WeaponOption, ammo: int, open_cells: int, config: TargetingConfig) -> bool:
    if option.efficiency < config.min_weapon_efficiency:
        return False
    min_yield, margin = acceptance_bar(ammo, open_cells, config)
    if option.yield_ < min_yield:
        return False
    return option.yield_ > option.single_score * margin


def choose_attack(
    grid: Grid,
    field: np.ndarray,
    inventory: WeaponInventory,
    rng: random.Random,
    config: TargetingConfig,
) -> AttackChoice | None:
    """Pick the best (cell, weapon) pair, falling back to a single shot."""
    relative = normalize_to_max(field)
    open_cells = grid.open_cell_count()
    armed = [
        (weapon, count)
        for weapon, count in sorted(inventory.items())
        if weapon is not WeaponKind.SINGLE and count > 0
    ]

    accepted: list[WeaponOption] = []
    if armed:
        for coord in grid.cells_with(CellState.UNKNOWN):
            for weapon, count in armed:
                option = evaluate_pattern(grid, relative, coord, weapon)
                if is_acceptable(option, count, open_cells, config):
                    accepted.append(option)

    if accepted:
        best_score = max(option.score for option in accepted)
        best = [
            option
            for option in accepted
            if math.isclose(option.score, best_score, rel_tol=1e-9, abs_tol=0.0)
        ]
        choice = rng.choice(best)
        logger.debug(
            "weapon_selected weapon=%s cell=(%d,%d) yield=%.3f efficiency=%.2f candidates=%d",
            choice.weapon,
            choice.coord.row,
            choice.coord.col,
            choice.yield_,
            choice.efficiency,
            len(accepted),
        )
        return AttackChoice(choice.coord, choice.weapon, choice.yield_, choice)

    coord = pick_best_cell(field, rng)
    if coord is None:
        return None
    return AttackChoice(coord, WeaponKind.SINGLE, float(relative[coord.row, coord.col]))
