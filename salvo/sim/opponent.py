"""In-memory opponent board implementing the sensor and executor ports."""

from __future__ import annotations

import logging
import random
from collections import Counter

import numpy as np

from salvo.core.grid import STATE_CODES, Grid
from salvo.core.models import (
    BOARD_SIZE,
    CellState,
    Coord,
    Placement,
    WeaponInventory,
    WeaponKind,
)
from salvo.infra.errors import AmmunitionExhaustedError, SalvoError

logger = logging.getLogger(__name__)


class SimulatedOpponent:
    """Hidden fleet that reveals cells the way the host game does."""

    def __init__(
        self,
        fleet: list[Placement],
        *,
        inventory: WeaponInventory | None = None,
        bonus_cells: tuple[Coord, ...] = (),
        size: int = BOARD_SIZE,
    ) -> None:
        self._size = size
        self._ships = np.zeros((size, size), dtype=np.int16)
        self._ship_cells: dict[int, tuple[Coord, ...]] = {}
        self._ship_remaining: dict[int, int] = {}
        for ship_id, placement in enumerate(fleet, start=1):
            cells = placement.cells
            for cell in cells:
                if self._ships[cell.row, cell.col] != 0:
                    raise ValueError(f"Ships overlap at ({cell.row}, {cell.col}).")
                self._ships[cell.row, cell.col] = ship_id
            self._ship_cells[ship_id] = cells
            self._ship_remaining[ship_id] = len(cells)

        self._states = np.zeros((size, size), dtype=np.int8)
        self._bonus = np.zeros((size, size), dtype=bool)
        for cell in bonus_cells:
            self._bonus[cell.row, cell.col] = True
        self._inventory: WeaponInventory = {
            kind: count for kind, count in (inventory or {}).items() if kind is not WeaponKind.SINGLE
        }
        self._armed = WeaponKind.SINGLE
        self.ready = True
        self.shots: Counter[WeaponKind] = Counter()
        self.bonuses_collected = 0

    @classmethod
    def with_random_bonus(
        cls,
        fleet: list[Placement],
        rng: random.Random,
        *,
        bonus_count: int = 0,
        inventory: WeaponInventory | None = None,
        size: int = BOARD_SIZE,
    ) -> SimulatedOpponent:
        cells = [Coord(r, c) for r in range(size) for c in range(size)]
        bonus = tuple(rng.sample(cells, k=min(bonus_count, len(cells))))
        return cls(fleet, inventory=inventory, bonus_cells=bonus, size=size)

    @property
    def inventory(self) -> WeaponInventory:
        return dict(self._inventory)

    def all_sunk(self) -> bool:
        return all(remaining == 0 for remaining in self._ship_remaining.values())

    def sense_board(self) -> tuple[Grid, WeaponInventory]:
        grid = Grid(size=self._size, states=self._states.copy(), bonus=self._bonus.copy())
        return grid, dict(self._inventory)

    def is_my_turn(self) -> bool:
        return self.ready

    def select_weapon(self, weapon: WeaponKind) -> None:
        if weapon is not WeaponKind.SINGLE and self._inventory.get(weapon, 0) <= 0:
            raise AmmunitionExhaustedError(weapon.value)
        self._armed = weapon

    def execute_attack(self, coord: Coord, weapon: WeaponKind) -> None:
        if weapon is not self._armed:
            raise SalvoError(f"{weapon.value} fired while {self._armed.value} is selected")
        if weapon is not WeaponKind.SINGLE:
            if self._inventory.get(weapon, 0) <= 0:
                raise AmmunitionExhaustedError(weapon.value)
            self._inventory[weapon] -= 1
        self._armed = WeaponKind.SINGLE
        self.shots[weapon] += 1

        for dr, dc in weapon.pattern:
            cell = coord.offset(dr, dc)
            if 0 <= cell.row < self._size and 0 <= cell.col < self._size:
                self._reveal(cell)
        logger.debug("sim_attack weapon=%s cell=(%d,%d)", weapon, coord.row, coord.col)

    def _reveal(self, cell: Coord) -> None:
        if self._states[cell.row, cell.col] != STATE_CODES[CellState.UNKNOWN]:
            return
        if self._bonus[cell.row, cell.col]:
            self._bonus[cell.row, cell.col] = False
            self.bonuses_collected += 1

        ship_id = int(self._ships[cell.row, cell.col])
        if ship_id == 0:
            self._states[cell.row, cell.col] = STATE_CODES[CellState.MISS]
            return

        self._states[cell.row, cell.col] = STATE_CODES[CellState.HIT]
        self._ship_remaining[ship_id] -= 1
        if self._ship_remaining[ship_id] == 0:
            for sunk in self._ship_cells[ship_id]:
                self._states[sunk.row, sunk.col] = STATE_CODES[CellState.SUNK]
