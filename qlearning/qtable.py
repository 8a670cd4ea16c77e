from __future__ import annotations
from typing import Dict, Iterator, Tuple

import numpy as np

from sokoban_core.state import DIRECTIONS, Direction

N_ACTIONS = len(DIRECTIONS)


def action_slot(action: int) -> int:
    """Column of a direction in a Q row; -1 for NONE or a combined mask."""
    try:
        return DIRECTIONS.index(action)
    except ValueError:
        return -1


class QTable:
    """Sparse Q-table: encoded state -> row of values for (Up, Left, Right, Down).

    Unseen states read as zeros. Rows are created on first write and never
    removed.
    """
    def __init__(self, dtype=np.float64) -> None:
        self.dtype = np.dtype(dtype)
        self._rows: Dict[int, np.ndarray] = {}

    def get(self, state: int, action: int) -> float:
        row = self._rows.get(state)
        slot = action_slot(action)
        if row is None or slot < 0:
            return 0.0
        return float(row[slot])

    def row(self, state: int) -> np.ndarray:
        """Copy of the row for state (zeros if unseen)."""
        row = self._rows.get(state)
        if row is None:
            return np.zeros(N_ACTIONS, dtype=self.dtype)
        return row.copy()

    def set(self, state: int, action: int, value: float) -> None:
        slot = action_slot(action)
        if slot < 0:
            return
        row = self._rows.get(state)
        if row is None:
            row = np.zeros(N_ACTIONS, dtype=self.dtype)
            self._rows[state] = row
        row[slot] = value

    def contains(self, state: int) -> bool:
        return state in self._rows

    def __contains__(self, state: int) -> bool:
        return self.contains(state)

    def __len__(self) -> int:
        return len(self._rows)

    def items(self) -> Iterator[Tuple[int, np.ndarray]]:
        """(state, row) pairs in insertion order."""
        for state, row in self._rows.items():
            yield state, row.copy()

    def best(self, state: int, actions: int) -> Tuple[Direction, float]:
        """Greedy pick among the directions in actions, first in order on ties.

        Returns (Direction.NONE, 0.0) when actions is empty.
        """
        choice = Direction.NONE
        best_q = 0.0
        for d in DIRECTIONS:
            if not actions & d:
                continue
            q = self.get(state, d)
            if choice == Direction.NONE or q > best_q:
                choice, best_q = d, q
        return choice, best_q
