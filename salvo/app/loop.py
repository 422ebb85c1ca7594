"""Fixed-interval decision loop around the turn controller."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from salvo.app.controller import CycleOutcome, EngineState, TurnController

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[CycleOutcome], None]


class DecisionLoop:
    """Invoke the controller every ``interval_seconds`` until told to stop."""

    def __init__(
        self,
        controller: TurnController,
        *,
        interval_seconds: float | None = None,
        sleep: Callable[[float], None] | None = None,
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        if interval_seconds is None:
            interval_seconds = controller.config.cycle_interval_seconds
        if interval_seconds < 0.0:
            raise ValueError("interval_seconds must be >= 0")
        self._controller = controller
        self._interval_seconds = interval_seconds
        self._sleep = sleep or time.sleep
        self._on_outcome = on_outcome

    def run(
        self,
        state: EngineState | None = None,
        *,
        max_cycles: int | None = None,
        should_stop: Callable[[CycleOutcome], bool] | None = None,
    ) -> EngineState:
        """Run cycles and return the last engine state."""
        current = state or EngineState()
        invocations = 0
        while max_cycles is None or invocations < max_cycles:
            outcome = self._controller.run_cycle(current)
            current = outcome.state
            invocations += 1
            if self._on_outcome is not None:
                self._on_outcome(outcome)
            if should_stop is not None and should_stop(outcome):
                logger.info("decision_loop_stopped invocations=%d status=%s", invocations, outcome.status)
                break
            if self._interval_seconds > 0.0:
                self._sleep(self._interval_seconds)
        return current
