import argparse
import logging

from minimaxchess.config import CONFIG, EVALUATION_NAMES
from minimaxchess.core.board import Side
from minimaxchess.core.notation import NotationError, move_to_str
from minimaxchess.core.rules import IllegalMoveError, MissingKingError
from minimaxchess.game import Game


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play chess against the minimax AI.")
    parser.add_argument("--depth", type=int, default=CONFIG.search.depth)
    parser.add_argument("--aggression", type=int, default=CONFIG.search.aggression)
    parser.add_argument("--evaluation", choices=EVALUATION_NAMES, default=CONFIG.search.evaluation)
    parser.add_argument("--history", help="comma-separated moves to continue from, e.g. E2-E4,E7-E5")
    args = parser.parse_args(argv)

    logging.basicConfig(level=CONFIG.log_level)
    game = Game(aggression=args.aggression, depth=args.depth, evaluation=args.evaluation)
    human = Side(CONFIG.ui.human_side)
    if args.history:
        try:
            game.load_history(args.history)
        except (NotationError, MissingKingError) as e:
            parser.exit(2, f"Cannot load history: {e}\n")

    print(game.message)
    while game.running:
        print(game.board)
        print("----------------------------")

        if game.side_to_move is human:
            user_move = input("Enter your move (e.g. E2-E4): ").strip()
            if user_move == "quit":
                break
            try:
                game.play_text(user_move)
            except (NotationError, IllegalMoveError) as e:
                print(e)
                continue
        else:
            result = game.ai_move()
            print(f"AI plays: {move_to_str(result.move)}")
        print(game.message)

    print(game.board)
    print(f"Moves: {game.history_text()}")


if __name__ == "__main__":
    main()
