from __future__ import annotations
from typing import Iterable, List

import numpy as np

from sokoban_core.codec import state_to_hex
from sokoban_core.state import DIRECTIONS
from .qtable import QTable
from .trainer import TrainResult

COLUMNS = [d.name.capitalize() for d in DIRECTIONS]


def _state_width(state_bits: int) -> int:
    return 2 + (state_bits + 3) // 4


def format_header(state_bits: int, column_width: int = 12, label: str = "State") -> str:
    head = label.rjust(_state_width(state_bits))
    return head + "".join(name.rjust(column_width) for name in COLUMNS)


def format_row(state: int, row: Iterable[float], state_bits: int,
               precision: int = 4, column_width: int = 12) -> str:
    head = ("0x" + state_to_hex(state, state_bits)).rjust(_state_width(state_bits))
    return head + "".join(f"{float(v):.{precision}f}".rjust(column_width) for v in row)


def format_qtable(q: QTable, state_bits: int, precision: int = 4, column_width: int = 12) -> str:
    """Whole table, one state per line, in the order states were first written."""
    lines: List[str] = [format_header(state_bits, column_width)]
    for state, row in q.items():
        lines.append(format_row(state, row, state_bits, precision, column_width))
    return "\n".join(lines)


def format_train_result(result: TrainResult, state_bits: int, precision: int = 4, column_width: int = 12) -> str:
    """Q row of the state just left, before and after the update."""
    action = "-" if result.is_noop else result.action.name.capitalize()
    lines = [
        f"Last state: 0x{state_to_hex(result.last_state, state_bits)}",
        f"Action: {action}",
        format_header(state_bits, column_width, label=""),
        format_row(result.last_state, np.asarray(result.last_row), state_bits, precision, column_width) + "  (before)",
        format_row(result.last_state, np.asarray(result.row), state_bits, precision, column_width) + "  (after)",
    ]
    return "\n".join(lines)
