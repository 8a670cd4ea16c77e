# --- file: sokoban_core/levels/resolve.py
from __future__ import annotations
import re
from itertools import groupby
from typing import List, Tuple

from ..parser import DEFAULT_STATE_BITS, parse_maze_str
from ..state import Board

# only a trailing "#<digits>" selects a block; '#' alone is the wall character
_LEVEL_ID = re.compile(r"(?P<path>.+)#(?P<index>\d+)")


def parse_level_id(level_id: str) -> Tuple[str, int]:
    """Parses "path/to/mazes.txt#3" into (path, 3); a bare path means block 0."""
    m = _LEVEL_ID.fullmatch(level_id)
    if m is None:
        return level_id, 0
    return m.group("path"), int(m.group("index"))


def split_mazes(text: str) -> List[str]:
    """Blocks of non-empty lines, in file order. Spaces are wall, not separators."""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    return [
        "\n".join(block)
        for blank, block in groupby(lines, key=lambda line: line == "")
        if not blank
    ]


def load_maze_text_by_id(level_id: str) -> str:
    """Reads one maze out of a file that may hold several, separated by blank lines."""
    path, wanted = parse_level_id(level_id)
    with open(path, "r", encoding="utf-8") as f:
        blocks = split_mazes(f.read())
    if not blocks:
        raise ValueError(f"No mazes found in {path}")
    if wanted >= len(blocks):
        raise IndexError(f"Index {wanted} out of range for {path} (total {len(blocks)})")
    return blocks[wanted]


def load_maze_by_id(level_id: str, state_bits: int = DEFAULT_STATE_BITS) -> Board:
    return parse_maze_str(load_maze_text_by_id(level_id), state_bits=state_bits)
