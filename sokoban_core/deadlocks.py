from __future__ import annotations
from typing import AbstractSet, Optional, Set, Tuple

from .state import Board, Pos
from .moves import can_push_any, legal_directions

HORIZONTAL = True
VERTICAL = False

# --- low-level helpers -------------------------------------------------------

def _axis_neighbors(pos: Pos, horizontal: bool) -> Tuple[Pos, Pos]:
    r, c = pos
    if horizontal:
        return (r, c - 1), (r, c + 1)
    return (r - 1, c), (r + 1, c)


def all_on_goals(board: Board, boxes: AbstractSet[Pos]) -> bool:
    """All boxes are on goals: boxes ⊆ goals."""
    return all(b in board.goals for b in boxes)

# --- individual deadlock rules ----------------------------------------------

def is_box_frozen(board: Board, boxes: AbstractSet[Pos], pos: Pos, horizontal: bool,
                  path: Optional[Set[Tuple[Pos, bool]]] = None) -> bool:
    """Box at pos cannot move along the given axis.

    Frozen along an axis if a wall/outside the level is on either side, or if
    a neighbouring box on that axis is itself frozen along the other axis.
    path holds the (cell, axis) pairs on the current recursion path; coming
    back to one of them closes a cycle of boxes holding each other, which
    counts as frozen.
    """
    if path is None:
        path = set()
    key = (pos, horizontal)
    if key in path:
        path.discard(key)
        return True
    path.add(key)

    frozen = False
    sides = _axis_neighbors(pos, horizontal)
    if any(not board.is_floor(*s) for s in sides):
        frozen = True
    else:
        for s in sides:
            if s in boxes and is_box_frozen(board, boxes, s, not horizontal, path):
                frozen = True
                break

    path.discard(key)
    return frozen


def is_wall_channel_deadlock(board: Board, boxes: AbstractSet[Pos], pos: Pos, wall_side: Pos) -> bool:
    """Box rests against a wall and the line along that wall has no way out.

    wall_side is the unit vector from the box towards the wall. Scan the
    floor line through the box parallel to the wall in both directions. If a
    cell on the line has floor on the wall side, the box can leave the wall
    there → not a deadlock. Otherwise every box on the line is stuck on it,
    and more boxes than goals on the line is a deadlock.
    """
    wr, wc = wall_side
    sr, sc = (0, 1) if wr else (1, 0)
    box_count = int(pos in boxes)
    goal_count = int(board.is_goal_cell(pos))

    for sign in (-1, 1):
        r, c = pos[0] + sign * sr, pos[1] + sign * sc
        while board.is_floor(r, c):
            if board.is_floor(r + wr, c + wc):
                return False
            if (r, c) in boxes:
                box_count += 1
            if (r, c) in board.goals:
                goal_count += 1
            r += sign * sr
            c += sign * sc

    return box_count > goal_count


def is_frozen_deadlock(board: Board, boxes: AbstractSet[Pos], box: Pos) -> bool:
    """Box (not on goal) frozen on both axes, or frozen against a dead wall line."""
    if board.is_goal_cell(box):
        return False
    stuck_vertical = is_box_frozen(board, boxes, box, VERTICAL)
    stuck_horizontal = is_box_frozen(board, boxes, box, HORIZONTAL)
    if stuck_vertical and stuck_horizontal:
        return True

    r, c = box
    walls = []
    if stuck_vertical:
        if not board.is_floor(r - 1, c):
            walls.append((-1, 0))
        if not board.is_floor(r + 1, c):
            walls.append((1, 0))
    if stuck_horizontal:
        if not board.is_floor(r, c - 1):
            walls.append((0, -1))
        if not board.is_floor(r, c + 1):
            walls.append((0, 1))
    return any(is_wall_channel_deadlock(board, boxes, box, w) for w in walls)

# --- combined API ------------------------------------------------------------

def has_deadlock(board: Board, player: Pos, boxes: AbstractSet[Pos], directions: Optional[int] = None) -> bool:
    """Combines the deadlock rules; True means the layout can no longer be solved.

    Rules, in order:
      1) solved layouts are never deadlocked,
      2) a player with no legal direction is deadlocked,
      3) any box off goal that is frozen (see is_frozen_deadlock),
      4) no box can be pushed from anywhere the player can walk to.
    directions may be passed when the caller already has the legal mask.
    """
    if all_on_goals(board, boxes):
        return False
    if directions is None:
        directions = legal_directions(board, player, boxes)
    if not directions:
        return True

    for b in sorted(boxes):
        if is_frozen_deadlock(board, boxes, b):
            return True

    return not can_push_any(board, player, boxes)
