from __future__ import annotations
from typing import AbstractSet, FrozenSet, Set

from .state import Board, Direction, DIRECTIONS, Pos, movement
from .parser import DEFAULT_STATE_BITS, parse_maze_str
from .codec import StateCodec
from .moves import legal_directions
from .deadlocks import has_deadlock
from .render import render_ascii


class Game:
    """Mutable progress of one Sokoban episode on a fixed Board.

    Derived fields (legal directions, finished boxes, encoded state,
    succeeded/failed) are recomputed after every change, so the getters are
    always consistent with the current layout.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.codec = StateCodec(board)
        self._player: Pos = board.player0
        self._boxes: Set[Pos] = set(board.boxes0)
        self._time_elapsed = 0
        self._history: Set[int] = set()
        self._state = 0
        self._directions = Direction.NONE
        self._finished = 0
        self._succeeded = False
        self._failed = False
        self.restart()

    @classmethod
    def from_string(cls, maze_str: str, state_bits: int = DEFAULT_STATE_BITS) -> "Game":
        return cls(parse_maze_str(maze_str, state_bits=state_bits))

    # ---- getters
    @property
    def height(self) -> int:
        return self.board.height

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def floor_bits(self) -> int:
        return self.board.floor_bits

    @property
    def succeeded(self) -> bool:
        return self._succeeded

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def directions(self) -> Direction:
        return self._directions

    @property
    def finished(self) -> int:
        """Number of boxes currently on goals."""
        return self._finished

    @property
    def state(self) -> int:
        return self._state

    @property
    def time_elapsed(self) -> int:
        return self._time_elapsed

    @property
    def player_pos(self) -> Pos:
        return self._player

    @property
    def player_pos0(self) -> Pos:
        return self.board.player0

    @property
    def box_pos(self) -> FrozenSet[Pos]:
        return frozenset(self._boxes)

    @property
    def box_pos0(self) -> FrozenSet[Pos]:
        return self.board.boxes0

    @property
    def goal_pos(self) -> FrozenSet[Pos]:
        return self.board.goals

    @property
    def box_count(self) -> int:
        return self.board.box_count

    @property
    def state_history(self) -> AbstractSet[int]:
        """Encoded states left during the current episode."""
        return frozenset(self._history)

    def seen(self, state: int) -> bool:
        return state in self._history

    def maze_string(self) -> str:
        return render_ascii(self)

    # ---- transitions
    def restart(self) -> None:
        self._time_elapsed = 0
        self._history.clear()
        self._player = self.board.player0
        self._boxes = set(self.board.boxes0)
        self._update()

    def move(self, direction: int) -> bool:
        """Moves the player one cell; returns True if a box was pushed.

        Directions outside the legal mask, NONE and combined masks are no-ops.
        """
        if not (self._directions & direction):
            return False
        if direction not in DIRECTIONS:
            return False
        dr, dc = movement(direction)

        self._time_elapsed += 1
        self._history.add(self._state)
        self._player = (self._player[0] + dr, self._player[1] + dc)
        pushed = False
        if self._player in self._boxes:
            self._boxes.remove(self._player)
            self._boxes.add((self._player[0] + dr, self._player[1] + dc))
            pushed = True
        self._update()
        return pushed

    def _update(self) -> None:
        board = self.board
        self._finished = sum(1 for b in self._boxes if board.is_goal_cell(b))
        self._state = self.codec.encode(self._player, self._boxes)
        self._directions = legal_directions(board, self._player, self._boxes)
        self._succeeded = self._finished == board.box_count
        self._failed = has_deadlock(board, self._player, self._boxes, self._directions)
