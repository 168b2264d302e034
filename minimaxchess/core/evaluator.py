"""Static evaluation strategies.

Every strategy scores a board for one side: that side's pieces add their
score, the opponent's pieces subtract theirs scaled by ``aggression / 100``.
An aggression above 100 values taking the opponent's material more than
keeping one's own.
"""

from enum import Enum
from typing import Callable, Dict, Optional, Union

from minimaxchess.config import CONFIG, EvalConfig
from minimaxchess.core.board import SIZE, Board, Coordinate, Piece, Side

DEFAULT_AGGRESSION = 100

EvaluationFunction = Callable[[Side, Board, float], float]


class Evaluation(Enum):
    PIECE_COUNT = "piece_count"
    WEIGHTED_PIECE_COUNT = "weighted_piece_count"
    WEIGHTED_POSITIONAL = "weighted_positional"


def _accumulate(side: Side, board: Board, aggression: float,
                score: Callable[[Coordinate, Piece], float]) -> float:
    scale = aggression / 100
    total = 0.0
    for pos, piece in board.pieces():
        if piece.side is side:
            total += score(pos, piece)
        else:
            total -= score(pos, piece) * scale
    return total


def piece_count_evaluation(side: Side, board: Board, aggression: float = DEFAULT_AGGRESSION) -> float:
    return _accumulate(side, board, aggression, lambda pos, piece: 1)


def weighted_piece_count_evaluation(side: Side, board: Board, aggression: float = DEFAULT_AGGRESSION,
                                    cfg: Optional[EvalConfig] = None) -> float:
    values = (cfg or CONFIG.eval).piece_values
    return _accumulate(side, board, aggression, lambda pos, piece: values[piece.kind.name])


def positional_bonus(piece: Piece, pos: Coordinate, cfg: Optional[EvalConfig] = None) -> int:
    """Table bonus for ``piece`` on ``pos``; Black reads the table mirrored."""
    table = (cfg or CONFIG.eval).positional_tables.get(piece.kind.name)
    if table is None:
        return 0
    row = pos.row if piece.side is Side.WHITE else SIZE - 1 - pos.row
    return table[row][pos.col]


def weighted_positional_evaluation(side: Side, board: Board, aggression: float = DEFAULT_AGGRESSION,
                                   cfg: Optional[EvalConfig] = None) -> float:
    cfg = cfg or CONFIG.eval
    values = cfg.piece_values

    def score(pos: Coordinate, piece: Piece) -> float:
        return values[piece.kind.name] + positional_bonus(piece, pos, cfg)

    return _accumulate(side, board, aggression, score)


EVALUATIONS: Dict[Evaluation, EvaluationFunction] = {
    Evaluation.PIECE_COUNT: piece_count_evaluation,
    Evaluation.WEIGHTED_PIECE_COUNT: weighted_piece_count_evaluation,
    Evaluation.WEIGHTED_POSITIONAL: weighted_positional_evaluation,
}


def get_evaluation(selector: Union[str, Evaluation]) -> EvaluationFunction:
    """Resolve an ``Evaluation`` or its name to the strategy function."""
    try:
        return EVALUATIONS[Evaluation(selector)]
    except ValueError:
        raise ValueError(f"Unknown evaluation: {selector!r}") from None
