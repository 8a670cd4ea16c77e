from typing import Iterable

from .state import Board, Pos, bit


class StateCodec:
    """Packs a layout into one fixed-width integer.

    Low floor_bits bits hold the player's floor index; each following
    floor_bits-wide field holds one box's floor index, boxes taken in
    (row, col) order. Walls/goals are not encoded (they are fixed for the maze).
    The parser rejects mazes whose layout does not fit into state_bits, so
    encode never truncates.
    """
    def __init__(self, board: Board) -> None:
        self.board = board
        self.floor_bits = board.floor_bits
        self.state_bits = board.state_bits
        self.mask = bit(board.state_bits) - 1

    def encode(self, player: Pos, boxes: Iterable[Pos]) -> int:
        index = self.board.floor_index
        state = index[player[0]][player[1]]
        shift = 0
        for r, c in sorted(boxes):
            shift += self.floor_bits
            state |= index[r][c] << shift
        return state


def state_to_hex(state: int, state_bits: int) -> str:
    """Zero-padded hex digits, one per 4 bits of the state width."""
    digits = (state_bits + 3) // 4
    return f"{state:0{digits}x}"
