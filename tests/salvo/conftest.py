from __future__ import annotations

import random

import pytest

from salvo.core.grid import Grid
from salvo.infra.config import TargetingConfig

EMPTY_ROW = ".........."


def blank_rows() -> list[str]:
    return [EMPTY_ROW] * 10


def grid_with(**rows: str) -> Grid:
    """Build a grid from overrides keyed ``r0`` .. ``r9``; other rows are empty."""
    lines = blank_rows()
    for key, value in rows.items():
        lines[int(key[1:])] = value
    return Grid.from_rows(lines)


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def config() -> TargetingConfig:
    return TargetingConfig()


@pytest.fixture
def empty_grid() -> Grid:
    return Grid.from_rows(blank_rows())


@pytest.fixture
def make_grid():
    return grid_with
