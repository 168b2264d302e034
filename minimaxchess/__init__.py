"""Chess rules and a minimax opponent."""

from minimaxchess.game import Game, GameOverError
from minimaxchess.main import Engine
