"""
Integration test suite for the minimaxchess engine.

Tests components working together end-to-end:
- Scripted game scenarios (checkmate, check, quiet positions)
- Game session (history, turn order, game end, uploads)
- Engine facade
- FastAPI REST API
- Legal-move generation cross-checked against python-chess
- Pruned search against full minimax
"""

import random

import chess
import pytest
from fastapi.testclient import TestClient

from interface.api import app
from interface.cli import main as cli_main
from minimaxchess.core.board import Board, Coordinate, Side
from minimaxchess.core.evaluator import Evaluation
from minimaxchess.core.movegen import generate_pseudo_legal_moves
from minimaxchess.core.notation import NotationError, str_to_move
from minimaxchess.core.rules import (
    GameStatus,
    IllegalMoveError,
    MissingKingError,
    can_move,
    generate_legal_moves,
    is_checked,
    replay_history,
)
from minimaxchess.core.search import SearchEngine
from minimaxchess.game import Game, GameOverError
from minimaxchess.main import Engine

CHECKMATE_HISTORY = "E2-E4,F7-F5,E4-F5,G7-G6,F5-G6,B8-C6,G6-H7,C6-B8,D1-H5"
CHECK_HISTORY = (
    "E2-E4,D7-D5,D1-H5,D5-E4,F2-F3,G7-G6,H5-G6,E7-E6,G6-F7,E8-F7,E1-F2,G8-H6,"
    "G1-H3,H6-F5,H3-F4,F5-H4,F4-H5,F7-E7,H5-G7,E7-D6,G7-F5,D6-D5,B1-C3"
)
QUIET_HISTORY = CHECK_HISTORY + ",D5-C5"


# ════════════════════════════════════════════════════════════════════════════
#  SCRIPTED SCENARIOS
# ════════════════════════════════════════════════════════════════════════════


class TestScenarios:
    def test_checkmate(self):
        board, side = replay_history(CHECKMATE_HISTORY)
        assert side is Side.BLACK
        assert not can_move(Side.BLACK, board)
        assert is_checked(Side.BLACK, board)

    def test_check_without_mate(self):
        board, side = replay_history(CHECK_HISTORY)
        assert side is Side.BLACK
        assert can_move(Side.BLACK, board)
        assert is_checked(Side.BLACK, board)

    def test_no_check(self):
        board, side = replay_history(QUIET_HISTORY)
        assert side is Side.WHITE
        for s in (Side.WHITE, Side.BLACK):
            assert can_move(s, board)
            assert not is_checked(s, board)

    def test_empty_history_is_initial_position(self):
        board, side = replay_history("")
        assert board == Board.initial()
        assert side is Side.WHITE


# ════════════════════════════════════════════════════════════════════════════
#  GAME SESSION
# ════════════════════════════════════════════════════════════════════════════


class TestGame:
    def test_new_game(self):
        g = Game(depth=1)
        assert g.board == Board.initial()
        assert g.side_to_move is Side.WHITE
        assert g.running
        assert g.history_text() == ""

    def test_turns_alternate(self):
        g = Game(depth=1)
        g.play_text("E2-E4")
        assert g.side_to_move is Side.BLACK
        g.play_text("E7-E5")
        assert g.side_to_move is Side.WHITE
        assert g.history_text() == "E2-E4,E7-E5"
        assert g.message == "E7-E5"

    def test_illegal_move_leaves_state(self):
        g = Game(depth=1)
        with pytest.raises(IllegalMoveError):
            g.play_text("E7-E5")  # Black piece on White's turn
        assert g.board == Board.initial()
        assert g.side_to_move is Side.WHITE
        assert g.move_history == []
        assert "not valid" in g.message

    def test_bad_text(self):
        g = Game(depth=1)
        with pytest.raises(NotationError):
            g.play_text("E2E4")
        assert g.move_history == []

    def test_play_to_checkmate(self):
        g = Game(depth=1)
        for move_str in CHECKMATE_HISTORY.split(","):
            g.play_text(move_str)
        assert g.status is GameStatus.CHECKMATE
        assert not g.running
        assert g.message == "Checkmate! White wins!"
        with pytest.raises(GameOverError):
            g.play_text("A7-A6")
        with pytest.raises(GameOverError):
            g.ai_move()

    def test_check_message(self):
        g = Game(depth=1)
        moves = CHECK_HISTORY.split(",")
        for move_str in moves:
            g.play_text(move_str)
        assert g.in_check
        assert g.running
        assert g.message == "Black has been checked!"

    def test_load_history(self):
        g = Game(depth=1)
        g.load_history(CHECK_HISTORY)
        assert g.side_to_move is Side.BLACK
        assert g.running
        assert g.history_text() == CHECK_HISTORY
        assert g.message == "Game successfully uploaded!"

    def test_load_finished_game(self):
        g = Game(depth=1)
        g.load_history(CHECKMATE_HISTORY)
        assert g.status is GameStatus.CHECKMATE
        assert not g.running

    def test_load_bad_history_keeps_state(self):
        g = Game(depth=1)
        g.play_text("E2-E4")
        with pytest.raises(NotationError):
            g.load_history("E7-E5,oops-")
        assert g.history_text() == "E2-E4"

    def test_reset(self):
        g = Game(depth=1)
        g.play_text("E2-E4")
        g.reset()
        assert g.board == Board.initial()
        assert g.side_to_move is Side.WHITE
        assert g.move_history == []

    def test_ai_plays_legal_move(self):
        g = Game(depth=2, evaluation="weighted_piece_count")
        g.play_text("E2-E4")
        legal = generate_legal_moves(Side.BLACK, g.board)
        result = g.ai_move()
        assert result.move in legal
        assert g.side_to_move is Side.WHITE
        assert len(g.move_history) == 2

    def test_ai_escapes_check(self):
        g = Game(depth=1, evaluation="weighted_positional")
        g.load_history(CHECK_HISTORY)
        result = g.ai_move()
        assert not is_checked(Side.BLACK, result.board)

    def test_configure_validates(self):
        g = Game(depth=1)
        with pytest.raises(ValueError):
            g.configure(aggression=500)
        assert g.aggression == 100
        g.configure(depth=2, evaluation="piece_count")
        assert g.depth == 2
        assert g.evaluation == "piece_count"

    def test_best_move_is_legal_and_not_played(self):
        g = Game(depth=1, evaluation="weighted_positional")
        g.load_history(CHECK_HISTORY)
        move = g.best_move()
        assert move in generate_legal_moves(Side.BLACK, g.board)
        assert g.history_text() == CHECK_HISTORY
        assert g.side_to_move is Side.BLACK

    def test_history_losing_a_king_is_rejected(self):
        g = Game(depth=1)
        g.play_text("E2-E4")
        with pytest.raises(MissingKingError):
            g.load_history("E7-E1")  # captures the White king off turn
        assert g.history_text() == "E2-E4"
        assert g.side_to_move is Side.BLACK


class TestEngineFacade:
    def test_make_move(self):
        e = Engine(depth=1)
        assert e.make_move("E2-E4") is True
        assert e.make_move("E2-E5") is False
        assert e.make_move("zzzz") is False

    def test_get_best_move(self):
        e = Engine(depth=1)
        e.make_move("E2-E4")
        move_str = e.get_best_move()
        assert len(move_str) == 5
        assert e.game.history_text().endswith(move_str)

    def test_print_board(self, capsys):
        Engine(depth=1).print_board()
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "r n b q k b n r"


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPI:
    def setup_method(self):
        self.client = TestClient(app)
        self.client.post("/reset")

    def test_board(self):
        data = self.client.get("/board").json()
        assert data["turn"] == "white"
        assert len(data["legal_moves"]) == 20
        assert data["status"] == "ongoing"
        assert data["board"][7] == "R N B Q K B N R"

    def test_move(self):
        resp = self.client.post("/move", json={"move": "E2-E4"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["turn"] == "black"
        assert data["move"] == "E2-E4"
        assert data["history"] == "E2-E4"

    def test_bad_move_text(self):
        resp = self.client.post("/move", json={"move": "e2e4"})
        assert resp.status_code == 400

    def test_illegal_move(self):
        resp = self.client.post("/move", json={"move": "E2-E5"})
        assert resp.status_code == 400
        assert "not valid" in resp.json()["detail"]

    def test_search_plays_move(self):
        self.client.post("/move", json={"move": "E2-E4"})
        resp = self.client.post("/search", json={"depth": 1, "evaluation": "weighted_piece_count"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["turn"] == "white"
        assert data["history"].split(",")[-1] == data["best_move"]

    def test_search_without_playing(self):
        resp = self.client.post("/search", json={"depth": 1, "play": False})
        assert resp.status_code == 200
        data = resp.json()
        assert data["turn"] == "white"
        assert data["history"] == ""
        assert len(data["best_move"]) == 5

    def test_search_without_playing_returns_legal_move(self):
        self.client.post("/history", json={"history": CHECK_HISTORY})
        resp = self.client.post(
            "/search", json={"depth": 1, "evaluation": "weighted_positional", "play": False}
        )
        assert resp.status_code == 200
        data = resp.json()
        legal = generate_legal_moves(Side.BLACK, replay_history(CHECK_HISTORY)[0])
        assert str_to_move(data["best_move"]) in legal
        assert data["best_move"] in data["legal_moves"]
        assert self.client.post("/move", json={"move": data["best_move"]}).status_code == 200

    def test_search_rejects_bad_settings(self):
        assert self.client.post("/search", json={"aggression": 300}).status_code == 422
        assert self.client.post("/search", json={"depth": 0}).status_code == 422
        assert self.client.post("/search", json={"evaluation": "material"}).status_code == 400

    def test_search_after_game_over(self):
        self.client.post("/history", json={"history": CHECKMATE_HISTORY})
        resp = self.client.post("/search", json={"depth": 1})
        assert resp.status_code == 400

    def test_history_round_trip(self):
        resp = self.client.post("/history", json={"history": CHECK_HISTORY})
        assert resp.status_code == 200
        assert resp.json()["in_check"] is True
        data = self.client.get("/history").json()
        assert data["history"] == CHECK_HISTORY
        assert data["moves"] == 23

    def test_bad_history(self):
        resp = self.client.post("/history", json={"history": "E2-E4,E7"})
        assert resp.status_code == 400

    def test_history_losing_a_king(self):
        resp = self.client.post("/history", json={"history": "E7-E1"})
        assert resp.status_code == 400
        assert "king" in resp.json()["detail"]
        data = self.client.get("/board").json()
        assert data["history"] == ""
        assert self.client.post("/move", json={"move": "E2-E4"}).status_code == 200

    def test_reset(self):
        self.client.post("/move", json={"move": "E2-E4"})
        data = self.client.post("/reset").json()
        assert data["history"] == ""
        assert data["turn"] == "white"


class TestCLI:
    @pytest.mark.parametrize("history", ["E2-E4,E7", "E7-E1"])
    def test_unloadable_history_exits(self, history, capsys):
        with pytest.raises(SystemExit) as exc:
            cli_main(["--depth", "1", "--history", history])
        assert exc.value.code == 2
        assert "Cannot load history" in capsys.readouterr().err

    def test_quit(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda prompt: "quit")
        cli_main(["--depth", "1"])
        assert "Moves: " in capsys.readouterr().out


# ════════════════════════════════════════════════════════════════════════════
#  CROSS-CHECK AGAINST PYTHON-CHESS
# ════════════════════════════════════════════════════════════════════════════


def to_fen(board: Board, side: Side) -> str:
    ranks = []
    for row in board.rows:
        rank, empty = "", 0
        for piece in row:
            if piece.is_empty:
                empty += 1
                continue
            if empty:
                rank += str(empty)
                empty = 0
            rank += piece.symbol
        if empty:
            rank += str(empty)
        ranks.append(rank)
    turn = "w" if side is Side.WHITE else "b"
    return "/".join(ranks) + f" {turn} - - 0 1"


def to_coordinate(square: int) -> Coordinate:
    return Coordinate(7 - chess.square_rank(square), chess.square_file(square))


class TestAgainstPythonChess:
    """Without castling rights or en passant the two rule sets must agree."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_random_playout(self, seed):
        rng = random.Random(seed)
        board, side = Board.initial(), Side.WHITE

        for _ in range(60):
            reference = chess.Board(to_fen(board, side))
            ours = generate_legal_moves(side, board)

            assert {(m.start, m.target) for m in ours} == {
                (to_coordinate(m.from_square), to_coordinate(m.to_square))
                for m in reference.legal_moves
            }
            assert is_checked(side, board) == reference.is_check()

            if not ours:
                assert reference.is_checkmate() == is_checked(side, board)
                break
            board = board.apply_move(rng.choice(ours))
            side = side.opponent

    def test_scenarios_agree(self):
        for history in (CHECKMATE_HISTORY, CHECK_HISTORY, QUIET_HISTORY):
            board, side = replay_history(history)
            reference = chess.Board(to_fen(board, side))
            assert reference.is_check() == is_checked(side, board)
            assert reference.is_checkmate() == (not can_move(side, board) and is_checked(side, board))


# ════════════════════════════════════════════════════════════════════════════
#  PRUNING EQUIVALENCE
# ════════════════════════════════════════════════════════════════════════════


class TestPruningEquivalence:
    @pytest.mark.parametrize("evaluation", list(Evaluation))
    @pytest.mark.parametrize("aggression", [50, 100, 180])
    def test_opening(self, evaluation, aggression):
        board = Board.initial().apply_move(str_to_move("E2-E4"))
        pruned = SearchEngine(evaluation, depth=2, aggression=aggression)
        full = SearchEngine(evaluation, depth=2, aggression=aggression, prune=False)
        assert pruned.search(Side.BLACK, board) == full.search(Side.BLACK, board)
        assert pruned.nodes <= full.nodes

    def test_middlegame(self):
        board, side = replay_history(QUIET_HISTORY)
        pruned = SearchEngine("weighted_positional", depth=2, aggression=100)
        full = SearchEngine("weighted_positional", depth=2, aggression=100, prune=False)
        move, value = pruned.search(side, board)
        assert (move, value) == full.search(side, board)
        assert move in generate_pseudo_legal_moves(side, board)
