"""Tests for the render module."""

from sokoban_core.game import Game
from sokoban_core.render import render_ascii, render_emoji
from sokoban_core.state import Direction

LVL = "#####\n#.$.#\n#.&.#\n#.*.#\n#####"


def test_render_initial_matches_input():
    g = Game.from_string(LVL)
    assert render_ascii(g) == LVL
    assert g.maze_string() == LVL


def test_render_after_push():
    g = Game.from_string(LVL)
    g.move(Direction.UP)
    assert g.maze_string() == "#####\n#.@.#\n#.*.#\n#...#\n#####"


def test_render_player_on_goal_and_padding():
    g = Game.from_string("+&$\n.")
    assert g.maze_string() == "+&$\n.##"


def test_render_emoji():
    out = render_emoji("#.*\n&$")
    assert out == "⬜⬛\U0001f643\n\U0001f4e6⭕"
