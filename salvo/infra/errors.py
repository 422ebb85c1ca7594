"""Shared error types and recoverable-failure policy helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeAlias

# Failures from host adapters that must never end the decision loop.
RecoverableRuntimeErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_RUNTIME_ERRORS: RecoverableRuntimeErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    LookupError,
)


class SalvoError(RuntimeError):
    """Base class for errors raised by salvo components and adapters."""


class AmmunitionExhaustedError(SalvoError):
    """Raised by an executor when the host refuses a weapon for lack of ammunition."""

    def __init__(self, weapon: str) -> None:
        super().__init__(f"no ammunition left for {weapon}")
        self.weapon = weapon


class SensorError(SalvoError):
    """Raised by a board sensor that cannot produce a snapshot."""


@dataclass(frozen=True, slots=True)
class Inconsistency:
    """A sensing or modelling inconsistency surfaced during a decision cycle."""

    kind: str
    detail: str


def report_inconsistency(logger: logging.Logger, kind: str, detail: str) -> Inconsistency:
    """Log an inconsistency as a warning and return its record."""
    logger.warning("inconsistency kind=%s detail=%s", kind, detail, extra={"inconsistency": kind})
    return Inconsistency(kind=kind, detail=detail)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.WARNING,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, exc_info=True)
