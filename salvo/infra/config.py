"""Application configuration and env loading."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from salvo.core.models import AdjacencyRule


@dataclass(frozen=True, slots=True)
class TargetingConfig:
    """Tunable policy parameters for scoring and weapon selection.

    Defaults reproduce the tuned behaviour; every value can be overridden with a
    ``SALVO_*`` environment variable (see ``load_targeting_config``).
    """

    adjacency_rule: AdjacencyRule = AdjacencyRule.ORTHOGONAL
    # Hunt mode
    parity_bonus: float = 3.0
    parity_penalty: float = 0.5
    bonus_marker_score: float = 5.0
    # Target mode
    target_overlap_base: float = 20.0
    # Endgame solver
    endgame_enabled: bool = True
    endgame_max_ships: int = 2
    endgame_open_cells: int = 30
    # Weapon evaluator
    min_weapon_efficiency: float = 0.5
    weapon_min_yield: float = 2.0
    weapon_margin: float = 2.5
    ammo_relief: float = 0.25
    endgame_weapon_cells: int = 30
    endgame_weapon_floor: float = 0.5
    # Turn loop
    cycle_interval_seconds: float = 3.0


def load_targeting_config() -> TargetingConfig:
    """Load immutable targeting configuration from env vars."""
    defaults = TargetingConfig()
    return TargetingConfig(
        adjacency_rule=_rule("SALVO_ADJACENCY_RULE", defaults.adjacency_rule),
        parity_bonus=_float("SALVO_PARITY_BONUS", defaults.parity_bonus, minimum=1.0),
        parity_penalty=_float("SALVO_PARITY_PENALTY", defaults.parity_penalty, minimum=0.0),
        bonus_marker_score=_float("SALVO_BONUS_MARKER_SCORE", defaults.bonus_marker_score, minimum=0.0),
        target_overlap_base=_float(
            "SALVO_TARGET_OVERLAP_BASE", defaults.target_overlap_base, minimum=1.0
        ),
        endgame_enabled=_flag("SALVO_ENDGAME_ENABLED", defaults.endgame_enabled),
        endgame_max_ships=max(1, _int("SALVO_ENDGAME_MAX_SHIPS", defaults.endgame_max_ships)),
        endgame_open_cells=max(0, _int("SALVO_ENDGAME_OPEN_CELLS", defaults.endgame_open_cells)),
        min_weapon_efficiency=_float(
            "SALVO_MIN_WEAPON_EFFICIENCY", defaults.min_weapon_efficiency, minimum=0.0
        ),
        weapon_min_yield=_float("SALVO_WEAPON_MIN_YIELD", defaults.weapon_min_yield, minimum=0.0),
        weapon_margin=_float("SALVO_WEAPON_MARGIN", defaults.weapon_margin, minimum=1.0),
        ammo_relief=_float("SALVO_AMMO_RELIEF", defaults.ammo_relief, minimum=0.0),
        endgame_weapon_cells=max(
            1, _int("SALVO_ENDGAME_WEAPON_CELLS", defaults.endgame_weapon_cells)
        ),
        endgame_weapon_floor=_float(
            "SALVO_ENDGAME_WEAPON_FLOOR", defaults.endgame_weapon_floor, minimum=0.0
        ),
        cycle_interval_seconds=_float(
            "SALVO_CYCLE_INTERVAL_SECONDS", defaults.cycle_interval_seconds, minimum=0.0
        ),
    )


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = Path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files with optional local overrides.

    Precedence is left-to-right because later loads may overwrite previous values.
    Default order: ``.env.salvo`` then ``.env.salvo.local``.
    """
    to_load = tuple(paths) if paths is not None else (".env.salvo", ".env.salvo.local")
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float(name: str, default: float, *, minimum: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _rule(name: str, default: AdjacencyRule) -> AdjacencyRule:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return AdjacencyRule(raw.strip().upper())
    except ValueError:
        return default
