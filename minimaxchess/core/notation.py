"""Text codec for squares, moves and comma-separated move histories.

A square is written as a column letter followed by a rank number, e.g. ``E2``.
A move is ``<start>-<target>`` (``E2-E4``) and a history is a comma-separated
list of moves. Only syntax is checked here, never the rules.
"""

import re
from typing import List

from minimaxchess.core.board import SIZE, Coordinate, Move, is_on_board

MOVE_STR_LENGTH = 5
SEPARATOR = "-"

# Anything outside this set is dropped from a history string before splitting.
_HISTORY_NOISE = re.compile(r"[^-,0-9A-Z]")


class NotationError(ValueError):
    """Raised for move or history text that is not well formed."""


def coordinate_to_str(pos: Coordinate) -> str:
    return f"{chr(ord('A') + pos.col)}{SIZE - pos.row}"


def str_to_coordinate(text: str) -> Coordinate:
    if len(text) != 2 or text[1] not in "0123456789":
        raise NotationError(f"Invalid square: {text!r}")
    pos = Coordinate(SIZE - int(text[1]), ord(text[0]) - ord("A"))
    if not is_on_board(pos):
        raise NotationError(f"Square off the board: {text!r}")
    return pos


def is_valid_square_str(text: str) -> bool:
    try:
        str_to_coordinate(text)
    except NotationError:
        return False
    return True


def move_to_str(move: Move) -> str:
    return f"{coordinate_to_str(move.start)}{SEPARATOR}{coordinate_to_str(move.target)}"


def is_valid_move_str(text: str) -> bool:
    """True if ``text`` looks like ``E2-E4`` and both squares are on the board."""
    return (
        len(text) == MOVE_STR_LENGTH
        and text[2] == SEPARATOR
        and is_valid_square_str(text[:2])
        and is_valid_square_str(text[3:])
    )


def str_to_move(text: str) -> Move:
    if not is_valid_move_str(text):
        raise NotationError(f"Invalid move: {text!r}")
    return Move(str_to_coordinate(text[:2]), str_to_coordinate(text[3:]))


def split_history(text: str) -> List[str]:
    """Sanitize a history string and split it into move strings.

    A history with nothing left after sanitizing holds no moves.
    """
    minified = _HISTORY_NOISE.sub("", text)
    if not minified:
        return []
    return minified.split(",")


def is_valid_history_str(text: str) -> bool:
    return all(is_valid_move_str(move_str) for move_str in split_history(text))


def parse_history(text: str) -> List[Move]:
    if not is_valid_history_str(text):
        raise NotationError(f"Invalid move history: {text!r}")
    return [str_to_move(move_str) for move_str in split_history(text)]


def history_to_str(moves: List[Move]) -> str:
    return ",".join(move_to_str(move) for move in moves)
