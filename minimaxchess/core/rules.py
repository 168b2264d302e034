"""Check detection, legal-move filtering and game-end classification."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from minimaxchess.core.board import POSITIONS, Board, Coordinate, Move, PieceKind, Side
from minimaxchess.core.movegen import (
    generate_pseudo_legal_moves,
    generate_pseudo_legal_moves_from_pos,
)
from minimaxchess.core.notation import move_to_str, parse_history

logger = logging.getLogger(__name__)


class MissingKingError(LookupError):
    """A check test was requested for a side with no king on the board."""


class IllegalMoveError(ValueError):
    """A well-formed move that the rules do not allow."""

    NOT_PSEUDO_LEGAL = "invalid"
    SELF_CHECK = "self_check"

    def __init__(self, move: Move, reason: str):
        self.move = move
        self.reason = reason
        if reason == self.SELF_CHECK:
            msg = f"Move {move_to_str(move)} leaves its own king in check"
        else:
            msg = f"Move {move_to_str(move)} is not valid"
        super().__init__(msg)


class GameStatus(Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a validated move.

    ``check`` and ``status`` describe the side that has to reply.
    """

    board: Board
    move: Move
    side: Side
    check: bool
    status: GameStatus

    @property
    def game_over(self) -> bool:
        return self.status is not GameStatus.ONGOING


def king_position(side: Side, board: Board) -> Coordinate:
    """Square of ``side``'s king.

    Boards without a king for ``side`` are outside the engine's contract and
    raise ``MissingKingError``.
    """
    for pos in POSITIONS:
        piece = board.tile_at(pos)
        if piece.side is side and piece.kind is PieceKind.KING:
            return pos
    raise MissingKingError(f"No {side.value} king on the board")


def is_checked(side: Side, board: Board) -> bool:
    king_pos = king_position(side, board)
    return any(
        move.target == king_pos
        for move in generate_pseudo_legal_moves(side.opponent, board)
    )


def filter_checked_moves(board: Board, moves: Iterable[Move]) -> List[Move]:
    """Drop moves that leave the mover's own king attacked."""
    return [
        move
        for move in moves
        if not is_checked(board.tile_at(move.start).side, board.apply_move(move))
    ]


def generate_legal_moves(side: Side, board: Board) -> List[Move]:
    return filter_checked_moves(board, generate_pseudo_legal_moves(side, board))


def generate_legal_moves_from_pos(board: Board, pos: Coordinate) -> List[Move]:
    return filter_checked_moves(board, generate_pseudo_legal_moves_from_pos(board, pos))


def is_valid_pseudo_legal_move(side: Side, board: Board, move: Move) -> bool:
    return move in generate_pseudo_legal_moves(side, board)


def can_move(side: Side, board: Board) -> bool:
    pseudo = generate_pseudo_legal_moves(side, board)
    return any(
        not is_checked(side, board.apply_move(move)) for move in pseudo
    )


def game_status(side: Side, board: Board) -> GameStatus:
    """Classify the position for ``side``, the side that has to move."""
    if can_move(side, board):
        return GameStatus.ONGOING
    if is_checked(side, board):
        return GameStatus.CHECKMATE
    return GameStatus.STALEMATE


def apply_input_move(side: Side, board: Board, move: Move) -> MoveResult:
    """Validate and apply a requested move for ``side``.

    Raises ``IllegalMoveError`` without touching anything if the move is not
    pseudo-legal or would leave ``side`` in check.
    """
    if not is_valid_pseudo_legal_move(side, board, move):
        raise IllegalMoveError(move, IllegalMoveError.NOT_PSEUDO_LEGAL)
    next_board = board.apply_move(move)
    if is_checked(side, next_board):
        raise IllegalMoveError(move, IllegalMoveError.SELF_CHECK)

    opponent = side.opponent
    status = game_status(opponent, next_board)
    check = status is GameStatus.CHECKMATE or (
        status is GameStatus.ONGOING and is_checked(opponent, next_board)
    )
    logger.debug("%s played %s (%s)", side.value, move_to_str(move), status.value)
    return MoveResult(next_board, move, side, check, status)


def side_to_move_after(move_count: int) -> Side:
    """White moves first, so an even number of moves means White to play."""
    return Side.WHITE if move_count % 2 == 0 else Side.BLACK


def replay_moves(moves: Iterable[Move]) -> Tuple[Board, Side]:
    """Apply ``moves`` in order from the initial setup. No rule checks are made."""
    board = Board.initial()
    count = 0
    for move in moves:
        board = board.apply_move(move)
        count += 1
    return board, side_to_move_after(count)


def replay_history(text: str) -> Tuple[Board, Side]:
    """Rebuild a board from a move-history string (raises ``NotationError``)."""
    return replay_moves(parse_history(text))
