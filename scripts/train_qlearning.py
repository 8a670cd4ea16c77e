"""
Train a Q-learning agent on one maze and watch it play.

The maze is read from --maze (path, or path#N for the N-th maze of a file)
or from stdin. Ctrl-C stops after the current step.

  python -m scripts.train_qlearning --maze mazes/small.txt --quiet 20000 --sleep 50
  cat maze.txt | python -m scripts.train_qlearning --config configs/qlearning.yaml --print-q-exit
"""
from __future__ import annotations
import argparse, os, random, signal, sys, time
from typing import Optional, TextIO

from tqdm import tqdm

from sokoban_core.parser import parse_maze_str
from sokoban_core.game import Game
from sokoban_core.codec import state_to_hex
from sokoban_core.levels.resolve import load_maze_text_by_id
from sokoban_core.render import render_emoji
from sokoban_core.state import Direction
from qlearning.qtable import QTable
from qlearning.trainer import TrainParams, TrainResult, train_step
from qlearning.config import RunConfig, load_config, with_overrides
from qlearning.report import format_header, format_qtable, format_row, format_train_result

CLEAR = "\x1b[H\x1b[2J"


class Interrupt:
    """SIGINT flag polled between steps; no step is ever cut in half."""
    def __init__(self) -> None:
        self.raised = False
        self._previous = None

    def _handler(self, signum, frame) -> None:
        self.raised = True

    def __enter__(self) -> "Interrupt":
        self._previous = signal.signal(signal.SIGINT, self._handler)
        return self

    def __exit__(self, *exc) -> None:
        signal.signal(signal.SIGINT, self._previous)


def make_rng(cfg: RunConfig) -> tuple[random.Random, int]:
    if cfg.seed is not None:
        seed = cfg.seed
    elif cfg.random_device:
        seed = int.from_bytes(os.urandom(8), "little")
    else:
        seed = time.time_ns()
    return random.Random(seed), seed


def print_board(game: Game, q: QTable, result: TrainResult, cfg: RunConfig, out: TextIO) -> None:
    bits = game.board.state_bits
    maze = game.maze_string()
    if cfg.emoji:
        maze = render_emoji(maze)
    print(file=out)
    print(maze, file=out)
    print(file=out)
    print(f"Time: {game.time_elapsed}", file=out)
    print(f"State: 0x{state_to_hex(game.state, bits)}", file=out)
    print(file=out)
    print(format_header(bits), file=out)
    print(format_row(game.state, q.row(game.state), bits), file=out)
    print(file=out)
    print(format_train_result(result, bits), file=out)


def run(game: Game, cfg: RunConfig, steps: int = 0, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> QTable:
    """Trains cfg.quiet steps silently, then shows every step until interrupted.

    steps > 0 stops after that many displayed steps.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    cfg = cfg.normalized()
    params: TrainParams = cfg.train
    bits = game.board.state_bits
    q = QTable(dtype=cfg.dtype)
    rng, seed = make_rng(cfg)
    print(f"[INFO] Maze {game.height}x{game.width}, {game.box_count} boxes, {game.floor_bits} bits per cell", file=out)
    print(f"[INFO] Seed: {seed}", file=out)

    with Interrupt() as interrupt:
        for _ in tqdm(range(cfg.quiet - 1), desc="Training", unit="step", disable=cfg.quiet <= 1, file=err):
            if interrupt.raised:
                break
            train_step(rng, game, q, params)

        if interrupt.raised:
            print(file=out)
            if cfg.print_q_exit:
                print(format_qtable(q, bits), file=err)
            return q

        if cfg.quiet > 0:
            result = train_step(rng, game, q, params)
            tqdm.write(f"[INFO] Trained {cfg.quiet} steps, Q-table has {len(q)} states", file=err)
        else:
            row = q.row(game.state)
            result = TrainResult(game.state, row, Direction.NONE, row.copy())

        shown = 0
        while not interrupt.raised:
            out.write(CLEAR)
            print_board(game, q, result, cfg, out)
            if game.succeeded:
                print(("⭕" if cfg.emoji else "") + "Succeeded", file=out)
                if cfg.print_q_success:
                    print(file=err)
                    print(format_qtable(q, bits), file=err)
            elif game.failed:
                print(("❌" if cfg.emoji else "") + "Failed", file=out)
                if cfg.print_q_failure:
                    print(file=err)
                    print(format_qtable(q, bits), file=err)
            out.flush()

            shown += 1
            if steps and shown >= steps:
                break
            if cfg.sleep_ms:
                time.sleep(cfg.sleep_ms / 1000.0)
            result = train_step(rng, game, q, params)

    if cfg.print_q_exit:
        print(file=err)
        print(format_qtable(q, bits), file=err)
    return q


def read_maze(maze: Optional[str]) -> str:
    if maze is None or maze == "-":
        return sys.stdin.read()
    return load_maze_text_by_id(maze)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Q-learning on a Sokoban maze (maze text on stdin or --maze)")
    p.add_argument("--maze", type=str, default=None, help="maze file, file.txt#N for the N-th maze, '-' or omitted for stdin")
    p.add_argument("--config", type=str, default=None, help="YAML with 'train' and 'run' sections, e.g. configs/qlearning.yaml")
    p.add_argument("--print-q", action="store_true", help="print the Q table on success, failure and exit")
    p.add_argument("--print-q-success", action="store_true", default=None, help="print the Q table on success")
    p.add_argument("--print-q-failure", action="store_true", default=None, help="print the Q table on failure")
    p.add_argument("--print-q-exit", action="store_true", default=None, help="print the Q table on exit")
    p.add_argument("--sleep", type=int, default=None, help="milliseconds between two displayed steps (default 100)")
    p.add_argument("--quiet", type=int, default=None, help="train this many steps before displaying anything (default 0)")
    p.add_argument("--steps", type=int, default=0, help="stop after this many displayed steps (0 → until Ctrl-C)")
    p.add_argument("--seed", type=int, default=None, help="random seed (default: system time)")
    p.add_argument("--random-device", action="store_true", default=None, help="seed from os.urandom instead of the system time")
    p.add_argument("--emoji", action="store_true", default=None, help="draw the maze with emoji")
    p.add_argument("--state-bits", type=int, default=None, help="width of an encoded state (default 64)")
    for name in TrainParams.field_names():
        p.add_argument(f"--{name.replace('_', '-')}", dest=name, type=float, default=None)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.print_q:
        args.print_q_success = args.print_q_failure = args.print_q_exit = True
    cfg = with_overrides(
        cfg,
        train={name: getattr(args, name) for name in TrainParams.field_names()},
        sleep_ms=args.sleep,
        quiet=args.quiet,
        seed=args.seed,
        random_device=args.random_device,
        print_q_success=args.print_q_success,
        print_q_failure=args.print_q_failure,
        print_q_exit=args.print_q_exit,
        emoji=args.emoji,
        state_bits=args.state_bits,
    )

    try:
        game = Game(parse_maze_str(read_maze(args.maze), state_bits=cfg.state_bits))
    except (ValueError, OSError, IndexError) as e:  # MazeError is a ValueError
        print(f"Error: {e}", file=sys.stderr)
        return 1

    run(game, cfg, steps=args.steps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
