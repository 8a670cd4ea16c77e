from __future__ import annotations
import random

from sokoban_core.game import Game
from sokoban_core.state import Direction, iter_directions
from .qtable import QTable


def choose_action(rng: random.Random, epsilon: float, game: Game, q: QTable) -> Direction:
    """Epsilon-greedy choice among the currently legal directions.

    - no legal direction → Direction.NONE
    - one legal direction → that direction, no randomness consumed
    - all legal values equal, or a uniform draw below epsilon → uniform pick
    - otherwise the greatest value, ties to the first of Up, Left, Right, Down
    """
    actions = game.directions
    legal = list(iter_directions(actions))
    if not legal:
        return Direction.NONE
    if len(legal) == 1:
        return legal[0]

    state = game.state
    values = [q.get(state, d) for d in legal]
    all_same = all(v == values[0] for v in values)
    # drawn for every multi-way choice so a seed fixes the whole trajectory
    explore = rng.random() < epsilon
    if all_same or explore:
        return legal[rng.randrange(len(legal))]
    choice, _ = q.best(state, actions)
    return choice
