"""FastAPI REST interface for the engine."""

import logging
import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from minimaxchess.config import CONFIG, EVALUATION_NAMES, MAX_AGGRESSION, MIN_AGGRESSION
from minimaxchess.core.notation import NotationError, move_to_str
from minimaxchess.core.rules import IllegalMoveError, MissingKingError, generate_legal_moves
from minimaxchess.game import Game, GameOverError

logging.basicConfig(level=CONFIG.log_level)
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game session.
game = Game()
_game_lock = threading.Lock()


class MoveRequest(BaseModel):
    move: str  # e.g. "E2-E4"


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1)
    aggression: Optional[int] = Field(default=None, ge=MIN_AGGRESSION, le=MAX_AGGRESSION)
    evaluation: Optional[str] = None
    play: bool = True


class HistoryRequest(BaseModel):
    history: str  # e.g. "E2-E4,E7-E5"


def _state():
    return {
        "board": str(game.board).splitlines(),
        "turn": game.side_to_move.value,
        "in_check": game.in_check,
        "status": game.status.value,
        "running": game.running,
        "message": game.message,
        "legal_moves": [move_to_str(m) for m in generate_legal_moves(game.side_to_move, game.board)]
        if game.running else [],
        "history": game.history_text(),
    }


@app.get("/board")
def get_board():
    with _game_lock:
        return _state()


@app.post("/move")
def make_move(req: MoveRequest):
    with _game_lock:
        try:
            result = game.play_text(req.move)
        except NotationError as e:
            raise HTTPException(status_code=400, detail=f"Invalid move text: {e}")
        except (IllegalMoveError, GameOverError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        state = _state()
        state["move"] = move_to_str(result.move)
        return state


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _game_lock:
        if not game.running:
            raise HTTPException(status_code=400, detail="Game is already over")
        evaluation = req.evaluation or game.evaluation
        if evaluation not in EVALUATION_NAMES:
            raise HTTPException(status_code=400, detail=f"Unknown evaluation: {evaluation}")
        try:
            game.configure(aggression=req.aggression, depth=req.depth, evaluation=evaluation)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if req.play:
            result = game.ai_move()
            move = result.move
        else:
            move = game.best_move()
        _log.info("AI move %s (depth=%d aggression=%s eval=%s)",
                  move_to_str(move), game.depth, game.aggression, game.evaluation)
        state = _state()
        state["best_move"] = move_to_str(move)
        return state


@app.get("/history")
def get_history():
    with _game_lock:
        return {"history": game.history_text(), "moves": len(game.move_history)}


@app.post("/history")
def upload_history(req: HistoryRequest):
    with _game_lock:
        try:
            game.load_history(req.history)
        except NotationError as e:
            raise HTTPException(status_code=400, detail=f"Invalid move history: {e}")
        except MissingKingError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state()


@app.post("/reset")
def reset_board():
    with _game_lock:
        game.reset()
        return _state()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=CONFIG.ui.api_port)
