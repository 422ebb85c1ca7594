"""Turn controller: one sense, decide, act cycle per invocation."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from salvo.ai.fleet_tracker import FleetState, track_fleet
from salvo.ai.targeting import FieldResult, compute_field
from salvo.ai.weapons import AttackChoice, choose_attack
from salvo.app.ports import ActionExecutor, BoardSensor
from salvo.core.grid import Grid
from salvo.core.models import (
    STANDARD_FLEET,
    Coord,
    TargetingMode,
    WeaponInventory,
    WeaponKind,
)
from salvo.infra.config import TargetingConfig
from salvo.infra.errors import (
    RECOVERABLE_RUNTIME_ERRORS,
    AmmunitionExhaustedError,
    Inconsistency,
    log_recoverable,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EngineState:
    """Everything carried from one decision cycle to the next."""

    fleet: FleetState = field(default_factory=FleetState.fresh)
    cycles: int = 0

    @classmethod
    def fresh(cls, fleet: tuple[int, ...] = STANDARD_FLEET) -> EngineState:
        return cls(fleet=FleetState.fresh(fleet))

    @property
    def last_hits(self) -> tuple[Coord, ...]:
        return self.fleet.hits


@dataclass(frozen=True, slots=True)
class Decision:
    """Result of scoring one sensed snapshot."""

    state: EngineState
    scoring: FieldResult
    attack: AttackChoice | None
    issues: tuple[Inconsistency, ...]


@dataclass(frozen=True, slots=True)
class CycleOutcome:
    """What happened during one controller invocation."""

    state: EngineState
    status: str
    coord: Coord | None = None
    weapon: WeaponKind | None = None
    mode: TargetingMode | None = None
    issues: tuple[Inconsistency, ...] = ()

    @property
    def acted(self) -> bool:
        return self.status == "attacked"


def decide(
    state: EngineState,
    grid: Grid,
    inventory: WeaponInventory,
    rng: random.Random,
    config: TargetingConfig,
) -> Decision:
    """Track the fleet, compute the field and choose an attack for one snapshot."""
    fleet, fleet_issues = track_fleet(state.fleet, grid)
    result = compute_field(grid, fleet.remaining, config)
    attack = choose_attack(grid, result.field, inventory, rng, config)
    next_state = EngineState(fleet=fleet, cycles=state.cycles + 1)
    return Decision(
        state=next_state,
        scoring=result,
        attack=attack,
        issues=(*fleet_issues, *result.issues),
    )


class TurnController:
    """Orchestrates sensing, scoring and dispatch against host adapters."""

    def __init__(
        self,
        sensor: BoardSensor,
        executor: ActionExecutor,
        rng: random.Random,
        config: TargetingConfig | None = None,
    ) -> None:
        self._sensor = sensor
        self._executor = executor
        self._rng = rng
        self._config = config or TargetingConfig()

    @property
    def config(self) -> TargetingConfig:
        return self._config

    def run_cycle(self, state: EngineState) -> CycleOutcome:
        """Run one decision cycle; never raises for recoverable host failures."""
        try:
            ready = self._sensor.is_my_turn()
        except RECOVERABLE_RUNTIME_ERRORS:
            log_recoverable(logger, "turn_check_failed")
            return CycleOutcome(state=state, status="sensor_failed")
        if not ready:
            return CycleOutcome(state=state, status="not_my_turn")

        try:
            grid, inventory = self._sensor.sense_board()
        except RECOVERABLE_RUNTIME_ERRORS:
            log_recoverable(logger, "sense_board_failed")
            return CycleOutcome(state=state, status="sensor_failed")

        decision = decide(state, grid, inventory, self._rng, self._config)
        attack = decision.attack
        if attack is None:
            logger.info("no_available_cells cycle=%d", decision.state.cycles)
            return CycleOutcome(
                state=decision.state,
                status="no_cells",
                mode=decision.scoring.mode,
                issues=decision.issues,
            )

        logger.info(
            "attack cycle=%d mode=%s weapon=%s cell=(%d,%d) remaining=%s",
            decision.state.cycles,
            decision.scoring.mode,
            attack.weapon,
            attack.coord.row,
            attack.coord.col,
            list(decision.state.fleet.remaining),
        )
        weapon = self._dispatch(attack.coord, attack.weapon)
        if weapon is None:
            return CycleOutcome(
                state=decision.state,
                status="executor_failed",
                coord=attack.coord,
                weapon=attack.weapon,
                mode=decision.scoring.mode,
                issues=decision.issues,
            )
        return CycleOutcome(
            state=decision.state,
            status="attacked",
            coord=attack.coord,
            weapon=weapon,
            mode=decision.scoring.mode,
            issues=decision.issues,
        )

    def _dispatch(self, coord: Coord, weapon: WeaponKind) -> WeaponKind | None:
        """Fire once, retrying the same cell with a single shot when ammo ran out."""
        try:
            try:
                if weapon is not WeaponKind.SINGLE:
                    self._executor.select_weapon(weapon)
                self._executor.execute_attack(coord, weapon)
                return weapon
            except AmmunitionExhaustedError as exc:
                logger.warning(
                    "ammunition_exhausted weapon=%s cell=(%d,%d) retrying with single",
                    exc.weapon,
                    coord.row,
                    coord.col,
                )
                self._executor.select_weapon(WeaponKind.SINGLE)
                self._executor.execute_attack(coord, WeaponKind.SINGLE)
                return WeaponKind.SINGLE
        except RECOVERABLE_RUNTIME_ERRORS:
            log_recoverable(logger, "execute_attack_failed")
            return None
