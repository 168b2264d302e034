from minimaxchess.core.notation import NotationError, move_to_str
from minimaxchess.core.rules import IllegalMoveError
from minimaxchess.game import Game, GameOverError


class Engine:
    def __init__(self, depth=None, aggression=None, evaluation=None):
        self.game = Game(aggression=aggression, depth=depth, evaluation=evaluation)

    def get_best_move(self):
        """Play the AI's move for the side to move and return it as text."""
        result = self.game.ai_move()
        return move_to_str(result.move)

    def make_move(self, move_str: str) -> bool:
        """Play a move such as 'E2-E4'. Returns True if it was accepted."""
        try:
            self.game.play_text(move_str)
            return True
        except (NotationError, IllegalMoveError, GameOverError):
            return False

    def print_board(self):
        print(self.game.board)
