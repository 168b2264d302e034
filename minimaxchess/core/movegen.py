"""Pseudo-legal move generation.

Moves produced here follow each piece's movement rules, path clearance and
destination rules, but may still leave the mover's own king in check. The
``rules`` module filters those out.
"""

from dataclasses import dataclass
from typing import List

from minimaxchess.core.board import (
    POSITIONS,
    SIZE,
    Board,
    Coordinate,
    Move,
    PieceKind,
    Side,
    is_on_board,
)
from minimaxchess.core.utils import step

ROOK_DIRECTIONS = ((-1, 0), (1, 0), (0, 1), (0, -1))
BISHOP_DIRECTIONS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
KNIGHT_OFFSETS = (
    (-2, -1), (-1, -2), (-1, 2), (-2, 1),
    (1, -2), (2, -1), (1, 2), (2, 1),
)
KING_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1), (0, -1),
    (0, 1), (1, -1), (1, 1), (1, 0),
)


@dataclass(frozen=True)
class PawnInfo:
    """Facts about a pawn's surroundings needed to list its moves."""

    piece_in_front: bool
    piece_two_in_front: bool
    can_take_left: bool
    can_take_right: bool
    direction: int

    @classmethod
    def from_board(cls, board: Board, pos: Coordinate, side: Side) -> "PawnInfo":
        d = side.direction
        enemy = side.opponent
        return cls(
            piece_in_front=not board.is_tile_clear(pos.offset(d, 0)),
            piece_two_in_front=not board.is_tile_clear(pos.offset(2 * d, 0)),
            can_take_left=board.is_tile_occupied_by(enemy, pos.offset(d, -1)),
            can_take_right=board.is_tile_occupied_by(enemy, pos.offset(d, 1)),
            direction=d,
        )


def _add(moves: List[Move], start: Coordinate, target: Coordinate):
    if is_on_board(target):
        moves.append(Move(start, target))


def _sliding_moves(start: Coordinate, directions) -> List[Move]:
    moves: List[Move] = []
    for jump in range(SIZE):
        for drow, dcol in directions:
            _add(moves, start, start.offset(drow * jump, dcol * jump))
    return moves


def rook_moves(start: Coordinate) -> List[Move]:
    return _sliding_moves(start, ROOK_DIRECTIONS)


def bishop_moves(start: Coordinate) -> List[Move]:
    return _sliding_moves(start, BISHOP_DIRECTIONS)


def queen_moves(start: Coordinate) -> List[Move]:
    return rook_moves(start) + bishop_moves(start)


def knight_moves(start: Coordinate) -> List[Move]:
    moves: List[Move] = []
    for drow, dcol in KNIGHT_OFFSETS:
        _add(moves, start, start.offset(drow, dcol))
    return moves


def king_moves(start: Coordinate) -> List[Move]:
    moves: List[Move] = []
    for drow, dcol in KING_OFFSETS:
        _add(moves, start, start.offset(drow, dcol))
    return moves


def pawn_moves(start: Coordinate, info: PawnInfo) -> List[Move]:
    moves: List[Move] = []
    d = info.direction
    starting_row = 1 if d == 1 else SIZE - 2

    if info.can_take_left:
        _add(moves, start, start.offset(d, -1))
    if info.can_take_right:
        _add(moves, start, start.offset(d, 1))
    if not info.piece_in_front:
        _add(moves, start, start.offset(d, 0))
        if not info.piece_two_in_front and start.row == starting_row:
            _add(moves, start, start.offset(2 * d, 0))
    return moves


def candidate_moves(board: Board, pos: Coordinate) -> List[Move]:
    """On-board targets for the piece on ``pos`` before occupancy checks."""
    piece = board.tile_at(pos)
    kind = piece.kind
    if kind is PieceKind.ROOK:
        return rook_moves(pos)
    if kind is PieceKind.BISHOP:
        return bishop_moves(pos)
    if kind is PieceKind.QUEEN:
        return queen_moves(pos)
    if kind is PieceKind.KNIGHT:
        return knight_moves(pos)
    if kind is PieceKind.KING:
        return king_moves(pos)
    if kind is PieceKind.PAWN:
        return pawn_moves(pos, PawnInfo.from_board(board, pos, piece.side))
    raise ValueError(f"No piece on {pos}")


def path_between(board: Board, move: Move) -> List[Coordinate]:
    """Squares strictly between start and target. Knights jump, so theirs is empty."""
    if board.tile_at(move.start).kind is PieceKind.KNIGHT:
        return []
    drow = step(move.target.row - move.start.row)
    dcol = step(move.target.col - move.start.col)
    path = []
    pos = move.start.offset(drow, dcol)
    while pos != move.target:
        path.append(pos)
        pos = pos.offset(drow, dcol)
    return path


def is_clear_path(board: Board, move: Move) -> bool:
    return all(board.is_tile_clear(pos) for pos in path_between(board, move))


def is_valid_destination(board: Board, move: Move) -> bool:
    """Target is empty or holds a piece of the other side."""
    target = board.tile_at(move.target)
    return target.is_empty or board.tile_at(move.start).side is not target.side


def generate_pseudo_legal_moves_from_pos(board: Board, pos: Coordinate) -> List[Move]:
    return [
        move
        for move in candidate_moves(board, pos)
        if is_valid_destination(board, move) and is_clear_path(board, move)
    ]


def generate_pseudo_legal_moves(side: Side, board: Board) -> List[Move]:
    """All pseudo-legal moves for ``side`` in board-scan order."""
    moves: List[Move] = []
    for pos in POSITIONS:
        if board.is_tile_occupied_by(side, pos):
            moves.extend(generate_pseudo_legal_moves_from_pos(board, pos))
    return moves
