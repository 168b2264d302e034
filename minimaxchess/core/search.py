import logging
import time
from typing import List, Optional, Tuple, Union

from minimaxchess.config import CONFIG, validate_search_settings
from minimaxchess.core.board import Board, Move, Side
from minimaxchess.core.evaluator import Evaluation, get_evaluation
from minimaxchess.core.movegen import generate_pseudo_legal_moves
from minimaxchess.core.notation import move_to_str
from minimaxchess.core.utils import log_search_info

logger = logging.getLogger(__name__)

INF = float("inf")


class NoMovesError(RuntimeError):
    """Search was asked for a move for a side that has none."""


class SearchEngine:
    """Fixed-depth minimax with alpha-beta pruning.

    Below the root the search walks pseudo-legal moves, not legal ones, so a
    line may pass through a position where the mover left its own king
    attacked. Leaves are always scored for the side that started the search.
    """

    def __init__(self, evaluation: Union[str, Evaluation, None] = None, depth: Optional[int] = None,
                 aggression: Optional[float] = None, prune: bool = True):
        cfg = CONFIG.search
        evaluation = Evaluation(evaluation if evaluation is not None else cfg.evaluation)
        self.max_depth = cfg.depth if depth is None else depth
        self.aggression = cfg.aggression if aggression is None else aggression
        validate_search_settings(self.max_depth, self.aggression, evaluation.value)
        self.evaluation = evaluation
        self.evaluate = get_evaluation(evaluation)
        self.prune = prune
        self.nodes = 0
        self.cutoffs = 0

    def search(self, side: Side, board: Board, moves: Optional[List[Move]] = None) -> Tuple[Move, float]:
        """Return (best move, its value) for ``side``.

        Root candidates default to every pseudo-legal move; ``moves`` narrows
        them. The first move with the strictly highest value wins ties. Raises
        ``NoMovesError`` if there is nothing to choose from.
        """
        if moves is None:
            moves = generate_pseudo_legal_moves(side, board)
        if not moves:
            raise NoMovesError(f"{side.value} has no moves to search")

        self.nodes = 0
        self.cutoffs = 0
        start_time = time.perf_counter()

        best_move = None
        best_value = -INF
        for move in moves:
            next_board = board.apply_move(move)
            if self.prune:
                value = self._min(side.opponent, next_board, best_value, INF, 1, side)
            else:
                value = self._minimax(side.opponent, next_board, 1, side, maximizing=False)
            if best_move is None or value > best_value:
                best_value = value
                best_move = move

        elapsed = time.perf_counter() - start_time
        log_search_info(logger, side, move_to_str(best_move), best_value, self.nodes, elapsed, self.max_depth)
        return best_move, best_value

    def search_best_move(self, side: Side, board: Board, moves: Optional[List[Move]] = None) -> Move:
        move, _value = self.search(side, board, moves)
        return move

    def _leaf(self, board: Board, root: Side) -> float:
        self.nodes += 1
        return self.evaluate(root, board, self.aggression)

    def _max(self, side: Side, board: Board, alpha: float, beta: float, depth: int, root: Side) -> float:
        if depth == self.max_depth:
            return self._leaf(board, root)
        for move in generate_pseudo_legal_moves(side, board):
            alpha = max(alpha, self._min(side.opponent, board.apply_move(move), alpha, beta, depth + 1, root))
            if alpha >= beta:
                self.cutoffs += 1
                break
        return alpha

    def _min(self, side: Side, board: Board, alpha: float, beta: float, depth: int, root: Side) -> float:
        if depth == self.max_depth:
            return self._leaf(board, root)
        for move in generate_pseudo_legal_moves(side, board):
            beta = min(beta, self._max(side.opponent, board.apply_move(move), alpha, beta, depth + 1, root))
            if alpha >= beta:
                self.cutoffs += 1
                break
        return beta

    def _minimax(self, side: Side, board: Board, depth: int, root: Side, maximizing: bool) -> float:
        # Plain minimax over the same tree, used to measure what pruning saves.
        if depth == self.max_depth:
            return self._leaf(board, root)
        best = -INF if maximizing else INF
        for move in generate_pseudo_legal_moves(side, board):
            value = self._minimax(side.opponent, board.apply_move(move), depth + 1, root, not maximizing)
            best = max(best, value) if maximizing else min(best, value)
        return best


def minimax_move(side: Side, board: Board, aggression: float, max_depth: int,
                 evaluation: Union[str, Evaluation]) -> Move:
    """Compute the AI's move for ``side``."""
    engine = SearchEngine(evaluation=evaluation, depth=max_depth, aggression=aggression)
    return engine.search_best_move(side, board)
