"""FastAPI REST interface for the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from boxbot.core.board import GameBoard, IllegalMove, Move
from boxbot.core.search import SearchEngine
from boxbot.core.evaluator import Evaluator
from boxbot.config import CONFIG

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared board and engine instance.
engine = SearchEngine(Evaluator(), depth=CONFIG.search.depth)
board = GameBoard(CONFIG.server.board_size, CONFIG.server.board_size)
_board_lock = threading.Lock()


class MoveRequest(BaseModel):
    orientation: int  # 0 horizontal, 1 vertical
    row: int
    col: int


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1)


class ResetRequest(BaseModel):
    rows: Optional[int] = Field(default=None, ge=1)
    cols: Optional[int] = Field(default=None, ge=1)


def _move_json(move: Optional[Move]):
    if move is None:
        return None
    return {"orientation": int(move.orientation), "row": move.row, "col": move.col}


def _board_json():
    state = board.state
    p1, p2 = board.scores()
    return {
        "rows": state.rows,
        "cols": state.cols,
        "diagram": state.render(),
        "to_move": board.to_move,
        "scores": {"1": p1, "2": p2},
        "edges_placed": state.edge_count,
        "legal_moves": [_move_json(m) for m in board.get_legal_moves()],
        "history": [str(m) for m in board.move_history],
        "is_game_over": board.is_game_over(),
        "winner": board.winner(),
    }


@app.get("/board")
def get_board():
    with _board_lock:
        return _board_json()


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        try:
            move = Move.from_wire(req.orientation, req.row, req.col)
        except IllegalMove as e:
            raise HTTPException(status_code=400, detail=str(e))
        player = board.to_move
        if not board.make_move(move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {move}")
        return {"move": str(move), "player": player, "to_move": board.to_move, "scores": board.scores()}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        if board.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        state, player = board.state, board.to_move
    searcher = engine if req.depth is None else SearchEngine(engine.evaluator, depth=req.depth)
    best, score = searcher.search_best_move(state, player)
    return {
        "best_move": _move_json(best),
        "score": score,
        "nodes": searcher.nodes,
        "player": player,
    }


@app.post("/undo")
def undo_move():
    with _board_lock:
        board.undo_move()
        return _board_json()


@app.post("/reset")
def reset_board(req: ResetRequest = ResetRequest()):
    with _board_lock:
        board.reset(req.rows, req.cols)
        return _board_json()
