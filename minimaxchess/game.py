"""Game session: board, turn, move history and AI settings for one game."""

import logging
from typing import List, Optional

from minimaxchess.config import CONFIG, validate_search_settings
from minimaxchess.core.board import Board, Move, Side
from minimaxchess.core.notation import history_to_str, move_to_str, parse_history, str_to_move
from minimaxchess.core.rules import (
    GameStatus,
    MoveResult,
    apply_input_move,
    game_status,
    generate_legal_moves,
    is_checked,
    king_position,
    replay_moves,
)
from minimaxchess.core.search import SearchEngine

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to Chess! Enter a move such as E2-E4"


class GameOverError(RuntimeError):
    """A move was requested after the game ended."""


class Game:
    def __init__(self, aggression: Optional[float] = None, depth: Optional[int] = None,
                 evaluation: Optional[str] = None):
        cfg = CONFIG.search
        self.aggression = cfg.aggression if aggression is None else aggression
        self.depth = cfg.depth if depth is None else depth
        self.evaluation = cfg.evaluation if evaluation is None else evaluation
        validate_search_settings(self.depth, self.aggression, self.evaluation)
        self.reset()
        self.message = WELCOME_MESSAGE

    def reset(self):
        """Start over from the initial position with White to move."""
        self.board = Board.initial()
        self.side_to_move = Side.WHITE
        self.move_history: List[Move] = []
        self.status = GameStatus.ONGOING
        self.running = True
        self.message = "Game Reset!"

    def configure(self, aggression: Optional[float] = None, depth: Optional[int] = None,
                  evaluation: Optional[str] = None):
        aggression = self.aggression if aggression is None else aggression
        depth = self.depth if depth is None else depth
        evaluation = self.evaluation if evaluation is None else evaluation
        validate_search_settings(depth, aggression, evaluation)
        self.aggression, self.depth, self.evaluation = aggression, depth, evaluation

    @property
    def in_check(self) -> bool:
        return is_checked(self.side_to_move, self.board)

    def play(self, move: Move) -> MoveResult:
        """Play ``move`` for the side to move.

        Raises ``GameOverError`` or ``IllegalMoveError``; the session is left
        untouched in both cases.
        """
        if not self.running:
            raise GameOverError("The game has already ended")
        try:
            result = apply_input_move(self.side_to_move, self.board, move)
        except ValueError as e:
            self.message = str(e)
            logger.debug("Rejected %s: %s", move_to_str(move), e)
            raise

        self.board = result.board
        self.move_history.append(move)
        self.side_to_move = result.side.opponent
        self._update_status(result.status, result.check, result.side, move)
        return result

    def play_text(self, move_str: str) -> MoveResult:
        return self.play(str_to_move(move_str))

    def best_move(self) -> Move:
        """Return the engine's legal choice for the side to move without playing it."""
        if not self.running:
            raise GameOverError("The game has already ended")
        engine = SearchEngine(evaluation=self.evaluation, depth=self.depth, aggression=self.aggression)
        move = engine.search_best_move(self.side_to_move, self.board)
        if is_checked(self.side_to_move, self.board.apply_move(move)):
            # The search roots on pseudo-legal moves; retry among legal ones only.
            logger.warning("Search chose self-checking move %s, searching legal moves", move_to_str(move))
            legal = generate_legal_moves(self.side_to_move, self.board)
            move = engine.search_best_move(self.side_to_move, self.board, legal)
        return move

    def ai_move(self) -> MoveResult:
        """Let the engine choose and play a move for the side to move."""
        return self.play(self.best_move())

    def load_history(self, history_str: str):
        """Replace the session with the game described by ``history_str``."""
        moves = parse_history(history_str)
        board, side = replay_moves(moves)
        # both kings must survive the replay
        for s in Side:
            king_position(s, board)
        status = game_status(side, board)
        self.board, self.side_to_move = board, side
        self.move_history = list(moves)
        self.running = True
        self.status = GameStatus.ONGOING
        self.message = "Game successfully uploaded!"
        if status is not GameStatus.ONGOING:
            self._update_status(status, status is GameStatus.CHECKMATE, self.side_to_move.opponent, None)
        logger.info("Loaded history with %d moves, %s to move", len(moves), self.side_to_move.value)

    def history_text(self) -> str:
        return history_to_str(self.move_history)

    def _update_status(self, status: GameStatus, check: bool, mover: Side, move: Optional[Move]):
        self.status = status
        if status is GameStatus.CHECKMATE:
            self.running = False
            self.message = f"Checkmate! {mover.value.capitalize()} wins!"
            logger.info("Checkmate, %s wins", mover.value)
        elif status is GameStatus.STALEMATE:
            self.running = False
            self.message = "Game has ended in stalemate!"
            logger.info("Stalemate")
        elif check:
            self.message = f"{mover.opponent.value.capitalize()} has been checked!"
        elif move is not None:
            self.message = move_to_str(move)
