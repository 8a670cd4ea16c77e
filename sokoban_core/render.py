from __future__ import annotations
from typing import TYPE_CHECKING

from .parser import (
    TOK_WALL, TOK_FLOOR, TOK_GOAL, TOK_BOX, TOK_BOX_ON_GOAL, TOK_PLAYER, TOK_PLAYER_ON_GOAL,
)

if TYPE_CHECKING:
    from .game import Game

EMOJI = {
    TOK_PLAYER: "\U0001f643",
    TOK_PLAYER_ON_GOAL: "\U0001f643",
    TOK_BOX: "\U0001f4e6",
    TOK_BOX_ON_GOAL: "\U0001f4e6",
    TOK_GOAL: "⭕",
    TOK_FLOOR: "⬛",
    TOK_WALL: "⬜",
}


def render_ascii(game: "Game") -> str:
    """ASCII visualization of the current layout, in the maze input alphabet."""
    board = game.board
    player = game.player_pos
    boxes = game.box_pos
    out_lines = []
    for r in range(board.height):
        row_chars = []
        for c in range(board.width):
            if not board.is_floor(r, c):
                row_chars.append(TOK_WALL)
                continue
            pos = (r, c)
            has_goal = board.is_goal_cell(pos)
            if pos == player:
                row_chars.append(TOK_PLAYER_ON_GOAL if has_goal else TOK_PLAYER)
            elif pos in boxes:
                row_chars.append(TOK_BOX_ON_GOAL if has_goal else TOK_BOX)
            else:
                row_chars.append(TOK_GOAL if has_goal else TOK_FLOOR)
        out_lines.append(''.join(row_chars))
    return "\n".join(out_lines)


def render_emoji(maze_str: str) -> str:
    """Swap maze characters for emoji; other characters pass through."""
    return ''.join(EMOJI.get(ch, ch) for ch in maze_str)
