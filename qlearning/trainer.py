from __future__ import annotations
import random
from dataclasses import dataclass, fields

import numpy as np

from sokoban_core.game import Game
from sokoban_core.state import Direction
from .policy import choose_action
from .qtable import QTable


@dataclass(frozen=True)
class TrainParams:
    epsilon: float = 0.05 # exploration rate
    alpha: float = 0.5 # learning rate
    gamma: float = 1.0 # discount
    retrace_penalty: float = 1.0
    push_reward: float = 0.5
    goal_reward: float = 50.0
    failure_penalty: float = 1000.0
    success_reward: float = 1000.0

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]


@dataclass
class TrainResult:
    """What one training step changed: Q row of last_state before and after."""
    last_state: int
    last_row: np.ndarray
    action: Direction
    row: np.ndarray

    @property
    def is_noop(self) -> bool:
        return self.action == Direction.NONE


def shaped_reward(game: Game, params: TrainParams, finished_before: int, pushed: bool) -> float:
    reward = params.goal_reward * (game.finished - finished_before)
    if game.seen(game.state):
        reward -= params.retrace_penalty
    if pushed:
        reward += params.push_reward
    if game.succeeded:
        reward += params.success_reward
    if game.failed:
        reward -= params.failure_penalty
    return reward


def dead_end_value(game: Game, params: TrainParams) -> float:
    """Value assumed for a state with no legal direction."""
    return -(params.retrace_penalty + params.failure_penalty + params.goal_reward * game.box_count)


def train_step(rng: random.Random, game: Game, q: QTable, params: TrainParams) -> TrainResult:
    """One Q-learning step on game.

    A finished episode (succeeded or failed) is restarted instead and the
    returned record carries Direction.NONE, so callers can loop without
    special-casing episode ends.
    """
    last_state = game.state
    last_row = q.row(last_state)
    if game.succeeded or game.failed:
        game.restart()
        return TrainResult(last_state, last_row, Direction.NONE, last_row.copy())

    action = choose_action(rng, params.epsilon, game, q)
    finished_before = game.finished
    pushed = game.move(action)
    reward = shaped_reward(game, params, finished_before, pushed)

    best_action, max_q = q.best(game.state, game.directions)
    if best_action == Direction.NONE:
        max_q = dead_end_value(game, params)

    old = q.get(last_state, action)
    q.set(last_state, action, (1 - params.alpha) * old + params.alpha * (reward + params.gamma * max_q))
    return TrainResult(last_state, last_row, action, q.row(last_state))
