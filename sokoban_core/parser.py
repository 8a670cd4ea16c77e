from enum import Enum
from typing import List, Optional, Set

from .state import Board, Pos

TOK_WALL = "#"
TOK_FLOOR = "."
TOK_GOAL = "$"
TOK_BOX = "&"
TOK_BOX_ON_GOAL = "@"
TOK_PLAYER = "*"
TOK_PLAYER_ON_GOAL = "+"

MAX_SIDE = 125  # rows/columns must stay below this
DEFAULT_STATE_BITS = 64


class MazeErrorKind(Enum):
    TOO_LARGE = "Maze Too Large"
    TOO_MANY_PLAYERS = "Too Many Players"
    NO_PLAYER = "No Player"
    NO_BOX = "No Box"
    TOO_FEW_GOALS = "Too Few Goals"


class MazeError(ValueError):
    """Raised when maze text cannot be turned into a Board."""

    def __init__(self, kind: MazeErrorKind, detail: str = "") -> None:
        self.kind = kind
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)


def parse_maze_str(maze_str: str, state_bits: int = DEFAULT_STATE_BITS) -> Board:
    """Parses ASCII maze into Board.

    Supported characters:
      '#': wall
      '.': floor
      '$': goal
      '&': box
      '@': box on goal
      '*': player
      '+': player on goal
    '\\r' is skipped; any other character is treated as wall.
    Leading and trailing line breaks are stripped.
    """
    text = maze_str.strip("\r\n")

    floor: List[Pos] = []
    goals: Set[Pos] = set()
    boxes: Set[Pos] = set()
    player: Optional[Pos] = None
    line = 0
    col = -1
    height = 1
    width = 0

    for ch in text:
        if ch == "\r":
            continue
        if ch == "\n":
            line += 1
            col = -1
            if line >= MAX_SIDE - 1:
                raise MazeError(MazeErrorKind.TOO_LARGE, f"more than {MAX_SIDE - 1} rows")
            height = max(height, line + 1)
            continue

        col += 1
        if col >= MAX_SIDE - 1:
            raise MazeError(MazeErrorKind.TOO_LARGE, f"more than {MAX_SIDE - 1} columns")
        width = max(width, col + 1)

        pos = (line, col)
        if ch in (TOK_PLAYER, TOK_PLAYER_ON_GOAL):
            if player is not None:
                raise MazeError(MazeErrorKind.TOO_MANY_PLAYERS, f"second player at {pos}")
            player = pos
        if ch in (TOK_GOAL, TOK_BOX_ON_GOAL, TOK_PLAYER_ON_GOAL):
            goals.add(pos)
        if ch in (TOK_BOX, TOK_BOX_ON_GOAL):
            boxes.add(pos)
        if ch in (TOK_FLOOR, TOK_GOAL, TOK_BOX, TOK_BOX_ON_GOAL, TOK_PLAYER, TOK_PLAYER_ON_GOAL):
            floor.append(pos)

    if player is None:
        raise MazeError(MazeErrorKind.NO_PLAYER)
    if not boxes:
        raise MazeError(MazeErrorKind.NO_BOX)
    if len(boxes) > len(goals):
        raise MazeError(MazeErrorKind.TOO_FEW_GOALS, f"{len(boxes)} boxes, {len(goals)} goals")

    floor_bits = (len(floor) - 1).bit_length()
    if floor_bits * (len(boxes) + 1) > state_bits:
        raise MazeError(
            MazeErrorKind.TOO_LARGE,
            f"{floor_bits} bits x {len(boxes) + 1} fields exceed a {state_bits}-bit state",
        )

    index = [[-1] * width for _ in range(height)]
    for i, (r, c) in enumerate(floor):
        index[r][c] = i

    return Board(
        height=height,
        width=width,
        floor_index=tuple(tuple(row) for row in index),
        goals=frozenset(goals),
        player0=player,
        boxes0=frozenset(boxes),
        floor_count=len(floor),
        floor_bits=floor_bits,
        state_bits=state_bits,
    )


def parse_maze_file(path: str, state_bits: int = DEFAULT_STATE_BITS) -> Board:
    with open(path, "r", encoding="utf-8") as f:
        return parse_maze_str(f.read(), state_bits=state_bits)
