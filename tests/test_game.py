import pytest
from sokoban_core.game import Game
from sokoban_core.parser import MazeError
from sokoban_core.state import Direction

LVL = "#####\n#.$.#\n#.&.#\n#.*.#\n#####"

OPEN = """
#######
#.....#
#..&..#
#..*..#
#....$#
#######
"""


def _snapshot(g: Game):
    return (g.state, g.directions, g.succeeded, g.failed, g.finished, g.time_elapsed,
            g.player_pos, g.box_pos, g.state_history)


def test_push_onto_goal_succeeds():
    g = Game.from_string(LVL)
    assert not g.succeeded and not g.failed
    assert g.directions == Direction.UP | Direction.LEFT | Direction.RIGHT
    assert g.move(Direction.UP) is True
    assert g.succeeded is True
    assert g.failed is False
    assert g.finished == 1
    assert g.time_elapsed == 1
    assert g.box_pos == frozenset({(1, 2)})
    assert g.player_pos == (2, 2)


def test_plain_step_does_not_push():
    g = Game.from_string(LVL)
    assert g.move(Direction.LEFT) is False
    assert g.player_pos == (3, 1)
    assert g.box_pos == frozenset({(2, 2)})
    assert g.time_elapsed == 1


def test_illegal_moves_are_noops():
    g = Game.from_string(LVL)
    before = _snapshot(g)
    assert g.move(Direction.DOWN) is False
    assert g.move(Direction.NONE) is False
    # UP is legal, but a combined mask is not a single direction
    assert g.move(Direction.UP | Direction.LEFT) is False
    assert _snapshot(g) == before


def test_history_records_left_states():
    g = Game.from_string(OPEN)
    s0 = g.state
    g.move(Direction.LEFT)
    s1 = g.state
    assert g.seen(s0) and not g.seen(s1)
    g.move(Direction.RIGHT)
    assert g.state == s0
    assert g.seen(s0) and g.seen(s1)
    assert g.state_history == frozenset({s0, s1})


def test_restart_matches_construction():
    g = Game.from_string(OPEN)
    fresh = _snapshot(g)
    for d in (Direction.LEFT, Direction.UP, Direction.UP, Direction.RIGHT, Direction.DOWN):
        g.move(d)
    assert g.time_elapsed > 0
    g.restart()
    assert _snapshot(g) == fresh
    assert g.state_history == frozenset()


def test_restart_after_success():
    g = Game.from_string(LVL)
    fresh = _snapshot(g)
    g.move(Direction.UP)
    g.restart()
    assert _snapshot(g) == fresh


def test_push_into_dead_line_fails():
    g = Game.from_string(OPEN)
    assert not g.failed
    # box ends against the top wall, no goal on that row
    assert g.move(Direction.UP) is True
    assert g.failed
    assert not g.succeeded
    # failed games still accept moves until restarted
    assert g.move(Direction.LEFT) is False
    assert g.player_pos == (2, 2)
    assert g.failed


def test_initial_layout_can_be_failed():
    g = Game.from_string("#####\n#&..#\n#.*.#\n#..$#\n#####")
    assert g.failed
    g.restart()
    assert g.failed


def test_same_layout_same_state_across_games():
    a = Game.from_string(OPEN)
    b = Game.from_string(OPEN)
    a.move(Direction.LEFT); a.move(Direction.UP)
    b.move(Direction.UP); b.move(Direction.LEFT)
    # different paths: box pushed in b only
    assert a.state != b.state
    a.restart(); b.restart()
    assert a.state == b.state


def test_getters():
    g = Game.from_string(LVL)
    assert (g.height, g.width) == (5, 5)
    assert g.floor_bits == 4
    assert g.player_pos0 == (3, 2)
    assert g.box_pos0 == frozenset({(2, 2)})
    assert g.goal_pos == frozenset({(1, 2)})
    assert g.box_count == 1


def test_bad_maze_raises():
    with pytest.raises(MazeError):
        Game.from_string("#####")
