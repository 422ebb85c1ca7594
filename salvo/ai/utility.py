"""Probability field scoring helpers."""

from __future__ import annotations

import random

import numpy as np

from salvo.core.models import Coord


def empty_field(size: int) -> np.ndarray:
    return np.zeros((size, size), dtype=np.float64)


def normalize_to_max(field: np.ndarray) -> np.ndarray:
    """Scale a non-negative field so its best cell scores 1.0."""
    clamped = np.clip(field, 0.0, None)
    peak = float(clamped.max()) if clamped.size else 0.0
    if peak <= 0.0:
        return np.zeros_like(clamped, dtype=np.float64)
    return clamped / peak


def best_cells(field: np.ndarray) -> list[Coord]:
    """Return every cell sharing the highest positive score."""
    peak = float(field.max()) if field.size else 0.0
    if peak <= 0.0:
        return []
    rows, cols = np.nonzero(np.isclose(field, peak, rtol=1e-12, atol=0.0))
    return [Coord(int(r), int(c)) for r, c in zip(rows, cols)]


def pick_best_cell(field: np.ndarray, rng: random.Random) -> Coord | None:
    """Pick the highest-scoring cell, breaking ties uniformly at random."""
    candidates = best_cells(field)
    if not candidates:
        return None
    return rng.choice(candidates)
