"""Play full simulated matches with the turn controller."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from salvo.app.controller import CycleOutcome, EngineState, TurnController
from salvo.app.loop import DecisionLoop
from salvo.core.models import STANDARD_FLEET, TargetingMode, WeaponInventory, WeaponKind
from salvo.infra.config import TargetingConfig
from salvo.sim.fleet import random_fleet
from salvo.sim.opponent import SimulatedOpponent

logger = logging.getLogger(__name__)

DEFAULT_INVENTORY: WeaponInventory = {
    WeaponKind.CROSS5: 1,
    WeaponKind.LINE4: 2,
    WeaponKind.BLOCK9: 1,
}


@dataclass(slots=True)
class MatchResult:
    """Summary of one simulated match."""

    won: bool
    turns: int
    shots: Counter[WeaponKind] = field(default_factory=Counter)
    modes: Counter[TargetingMode] = field(default_factory=Counter)
    inconsistencies: int = 0
    bonuses_collected: int = 0


def play_match(
    rng: random.Random,
    *,
    config: TargetingConfig | None = None,
    inventory: WeaponInventory | None = None,
    fleet: tuple[int, ...] = STANDARD_FLEET,
    bonus_count: int = 3,
    max_turns: int = 100,
) -> MatchResult:
    """Play one match against a random hidden fleet."""
    config = config or TargetingConfig()
    placements = random_fleet(rng, fleet, rule=config.adjacency_rule)
    opponent = SimulatedOpponent.with_random_bonus(
        placements,
        rng,
        bonus_count=bonus_count,
        inventory=dict(DEFAULT_INVENTORY if inventory is None else inventory),
    )
    controller = TurnController(opponent, opponent, rng, config)

    modes: Counter[TargetingMode] = Counter()
    issues = 0

    def _record(outcome: CycleOutcome) -> None:
        nonlocal issues
        if outcome.mode is not None:
            modes[outcome.mode] += 1
        issues += len(outcome.issues)

    def _finished(outcome: CycleOutcome) -> bool:
        return opponent.all_sunk() or outcome.status == "no_cells"

    loop = DecisionLoop(controller, interval_seconds=0.0, on_outcome=_record)
    loop.run(EngineState.fresh(fleet), max_cycles=max_turns, should_stop=_finished)

    result = MatchResult(
        won=opponent.all_sunk(),
        turns=sum(opponent.shots.values()),
        shots=Counter(opponent.shots),
        modes=modes,
        inconsistencies=issues,
        bonuses_collected=opponent.bonuses_collected,
    )
    logger.info(
        "match_finished won=%s turns=%d shots=%s inconsistencies=%d",
        result.won,
        result.turns,
        dict(result.shots),
        result.inconsistencies,
    )
    return result
