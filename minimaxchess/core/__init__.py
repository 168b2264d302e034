"""Core engine components: position model, notation, move generation, rules, evaluation and search."""

from .board import EMPTY, SIZE, Board, Coordinate, Move, Piece, PieceKind, Side
from .evaluator import Evaluation, get_evaluation
from .notation import NotationError, move_to_str, parse_history, str_to_move
from .rules import GameStatus, IllegalMoveError, MissingKingError, MoveResult, apply_input_move
from .search import NoMovesError, SearchEngine, minimax_move
