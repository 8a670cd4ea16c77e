from collections import deque
from typing import AbstractSet, Set

from .state import Board, DIRECTIONS, Direction, Pos, movement


def can_step(board: Board, boxes: AbstractSet[Pos], pos: Pos, direction: Direction, can_push: bool) -> bool:
    """True if a player standing on pos may move in direction.

    The target must be floor. If it holds a box, the move is a push: it is
    allowed only when can_push is set and the cell behind the box is floor
    without another box (one box at a time, never into a wall).
    """
    dr, dc = movement(direction)
    nxt = (pos[0] + dr, pos[1] + dc)
    if not board.is_floor(*nxt):
        return False
    if nxt in boxes:
        if not can_push:
            return False
        return can_step(board, boxes, nxt, direction, False)
    return True


def legal_directions(board: Board, player: Pos, boxes: AbstractSet[Pos]) -> Direction:
    """Bitmask of directions the player can take right now (pushes included)."""
    mask = Direction.NONE
    for d in DIRECTIONS:
        if can_step(board, boxes, player, d, True):
            mask |= d
    return mask


def player_reachable(board: Board, player: Pos, boxes: AbstractSet[Pos]) -> Set[Pos]:
    """Returns the cells reachable by the player without pushing boxes."""
    visited = {player}
    q = deque([player])

    while q:
        cur = q.popleft()
        for d in DIRECTIONS:
            if not can_step(board, boxes, cur, d, False):
                continue
            dr, dc = movement(d)
            nb = (cur[0] + dr, cur[1] + dc)
            if nb not in visited:
                visited.add(nb)
                q.append(nb)
    return visited


def can_push_any(board: Board, player: Pos, boxes: AbstractSet[Pos]) -> bool:
    """True if some box can still be pushed from a cell the player can walk to.

    Algorithm:
      1) find cells reachable by the player without pushing boxes (BFS),
      2) from each of them check 4 directions: a direction that is not a plain
         step but is legal with pushing means a box can be moved.
    """
    for cell in player_reachable(board, player, boxes):
        for d in DIRECTIONS:
            if not can_step(board, boxes, cell, d, False) and can_step(board, boxes, cell, d, True):
                return True
    return False
