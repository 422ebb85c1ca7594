"""Sensed opponent grid representation and query helpers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from salvo.core.models import BOARD_SIZE, CellState, Coord, all_coords

STATE_CODES: dict[CellState, int] = {
    CellState.UNKNOWN: 0,
    CellState.MISS: 1,
    CellState.HIT: 2,
    CellState.SUNK: 3,
}
_CODE_STATES: dict[int, CellState] = {code: state for state, code in STATE_CODES.items()}

_TEXT_STATES: dict[str, tuple[CellState, bool]] = {
    ".": (CellState.UNKNOWN, False),
    "*": (CellState.UNKNOWN, True),
    "o": (CellState.MISS, False),
    "x": (CellState.HIT, False),
    "#": (CellState.SUNK, False),
}


@dataclass(slots=True)
class Grid:
    """Numpy-backed snapshot of the opponent board."""

    size: int = BOARD_SIZE
    states: np.ndarray = field(
        default_factory=lambda: np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    )
    bonus: np.ndarray = field(
        default_factory=lambda: np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=bool)
    )

    def __post_init__(self) -> None:
        if self.states.shape != (self.size, self.size):
            raise ValueError(f"states must be {self.size}x{self.size}, got {self.states.shape}")
        if self.bonus.shape != (self.size, self.size):
            self.bonus = np.zeros((self.size, self.size), dtype=bool)
        # Bonus markers only exist on unrevealed cells.
        self.bonus = self.bonus & (self.states == STATE_CODES[CellState.UNKNOWN])

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> Grid:
        """Parse the compact text form (`.` `*` `o` `x` `#`), one string per row."""
        cleaned = [row.replace(" ", "") for row in rows]
        size = len(cleaned)
        states = np.zeros((size, size), dtype=np.int8)
        bonus = np.zeros((size, size), dtype=bool)
        for r, row in enumerate(cleaned):
            if len(row) != size:
                raise ValueError(f"row {r} has {len(row)} cells, expected {size}")
            for c, char in enumerate(row):
                try:
                    state, marked = _TEXT_STATES[char]
                except KeyError:
                    raise ValueError(f"unknown cell symbol {char!r} at ({r}, {c})") from None
                states[r, c] = STATE_CODES[state]
                bonus[r, c] = marked
        return cls(size=size, states=states, bonus=bonus)

    @classmethod
    def from_states(
        cls,
        cells: dict[Coord, CellState],
        *,
        size: int = BOARD_SIZE,
        bonus: Iterable[Coord] = (),
    ) -> Grid:
        """Build a grid from sparse cell states; unspecified cells are UNKNOWN."""
        states = np.zeros((size, size), dtype=np.int8)
        for coord, state in cells.items():
            states[coord.row, coord.col] = STATE_CODES[state]
        markers = np.zeros((size, size), dtype=bool)
        for coord in bonus:
            markers[coord.row, coord.col] = True
        return cls(size=size, states=states, bonus=markers)

    def in_bounds(self, coord: Coord) -> bool:
        return 0 <= coord.row < self.size and 0 <= coord.col < self.size

    def state_at(self, coord: Coord) -> CellState:
        return _CODE_STATES[int(self.states[coord.row, coord.col])]

    def is_state(self, coord: Coord, state: CellState) -> bool:
        return int(self.states[coord.row, coord.col]) == STATE_CODES[state]

    def cells_with(self, state: CellState) -> list[Coord]:
        rows, cols = np.nonzero(self.states == STATE_CODES[state])
        return [Coord(int(r), int(c)) for r, c in zip(rows, cols)]

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self.states == STATE_CODES[state]))

    def open_cell_count(self) -> int:
        """Cells still in play: UNKNOWN plus unsunk HIT."""
        return self.count(CellState.UNKNOWN) + self.count(CellState.HIT)

    def is_pristine(self) -> bool:
        """Return whether nothing has been revealed yet."""
        return self.count(CellState.UNKNOWN) == self.size * self.size

    def mask(self, state: CellState) -> np.ndarray:
        return self.states == STATE_CODES[state]

    def coords(self) -> list[Coord]:
        return all_coords(self.size)
