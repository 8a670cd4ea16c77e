from dataclasses import dataclass
from enum import IntFlag
from typing import FrozenSet, Iterable, Tuple

__all__ = [
    "Board",
    "Direction",
    "DIRECTIONS",
    "Pos",
    "bit",
    "iter_directions",
    "movement",
]

Pos = Tuple[int, int]


# Bit helpers
def bit(idx: int) -> int:
    return 1 << idx


class Direction(IntFlag):
    """Player moves. Values are single bits so legal sets combine with | and &."""

    NONE = 0
    UP = 1
    LEFT = 2
    RIGHT = 4
    DOWN = 8


# enumeration (and tie-break) order
DIRECTIONS: Tuple[Direction, ...] = (Direction.UP, Direction.LEFT, Direction.RIGHT, Direction.DOWN)

_MOVEMENT = {
    Direction.UP: (-1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
}


def movement(direction: int) -> Pos:
    """Unit vector (d_row, d_col); (0, 0) for NONE or a combined mask."""
    return _MOVEMENT.get(direction, (0, 0))


def iter_directions(mask: int) -> Iterable[Direction]:
    """Iterates over the directions set in mask, lowest bit first."""
    for d in DIRECTIONS:
        if mask & d:
            yield d


@dataclass(frozen=True, slots=True)
class Board:
    """
    Immutable geometry of a parsed maze.

    floor_index[r][c] is the dense index of a floor cell in row-major scan
    order, or -1 for a wall. Goals and the initial player/box layout are kept
    here so an episode can always be restarted from the board alone.
    """

    height: int
    width: int
    floor_index: Tuple[Tuple[int, ...], ...]
    goals: FrozenSet[Pos]
    player0: Pos
    boxes0: FrozenSet[Pos]
    floor_count: int
    floor_bits: int # bits per floor index
    state_bits: int # width of an encoded state


    # ---- convenient checks/conversions
    def is_floor(self, r: int, c: int) -> bool:
        """Off-grid cells count as wall."""
        if r < 0 or r >= self.height or c < 0 or c >= self.width:
            return False
        return self.floor_index[r][c] >= 0


    def is_goal_cell(self, pos: Pos) -> bool:
        return pos in self.goals


    def index_of(self, pos: Pos) -> int:
        return self.floor_index[pos[0]][pos[1]]


    @property
    def box_count(self) -> int:
        return len(self.boxes0)
