"""Host-facing boundary contracts for sensing and acting."""

from __future__ import annotations

from typing import Protocol

from salvo.core.grid import Grid
from salvo.core.models import Coord, WeaponInventory, WeaponKind


class BoardSensor(Protocol):
    """Pull-based view of the opponent board."""

    def sense_board(self) -> tuple[Grid, WeaponInventory]:
        """Return a fresh grid snapshot and the current ammunition counts."""

    def is_my_turn(self) -> bool:
        """Return whether an attack may be issued now."""


class ActionExecutor(Protocol):
    """Fire-and-forget attack dispatch.

    Outcomes only become visible on the next sensed grid.
    """

    def select_weapon(self, weapon: WeaponKind) -> None:
        """Arm ``weapon`` for the next attack."""

    def execute_attack(self, coord: Coord, weapon: WeaponKind) -> None:
        """Fire at ``coord``; raise AmmunitionExhaustedError if the host refuses the weapon."""
