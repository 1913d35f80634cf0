import logging
import time
from typing import Optional, Tuple

from boxbot.core.board import BoardState, Move, legal_moves
from boxbot.core.evaluator import Evaluator
from boxbot.core.utils import format_info

INF = 1000000

logger = logging.getLogger(__name__)


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, depth: int = 4):
        """
        Fixed-depth minimax with alpha-beta pruning.
        depth = plies searched from the root; a capture grants the mover an
        extra ply, so the side does not flip after a move that completes a box.
        """
        if depth < 1:
            raise ValueError(f"search depth must be >= 1, got {depth}")
        self.evaluator = evaluator or Evaluator()
        self.max_depth = depth
        self.nodes = 0

    # Public API
    def search_best_move(self, state: BoardState, player: int) -> Tuple[Optional[Move], int]:
        """
        Returns (best_move, score) for `player` to move in `state`.
        Moves are tried in catalog order and ties keep the first one found.
        best_move is None when the board is full.
        """
        self.nodes = 0
        start_time = time.time()

        alpha = -INF
        beta = INF
        best_move = None
        best_score = -INF

        for move in legal_moves(state):
            child, captured = state.place(move, player)
            # a capture keeps the turn, so the root side is still maximizing
            score = self._minimax(child, self.max_depth - 1, captured > 0, player, alpha, beta)
            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, best_score)
            if alpha >= beta:
                break

        if best_move is None:
            best_score = self.evaluator.evaluate(state, player)

        elapsed = time.time() - start_time
        logger.debug(format_info(self.max_depth, best_score, self.nodes, elapsed, best_move))
        return best_move, best_score

    # -------------------------
    # Core minimax (alpha-beta)
    # -------------------------
    def _minimax(self, state: BoardState, depth: int, maximizing: bool, player: int,
                 alpha: int, beta: int) -> int:
        """
        maximizing: True when `player` (the searching side) is to move.
        Always returns the evaluation from `player`'s point of view.
        """
        self.nodes += 1
        if depth <= 0 or state.is_terminal():
            return self.evaluator.evaluate(state, player)

        mover = player if maximizing else 3 - player

        if maximizing:
            value = -INF
            for move in legal_moves(state):
                child, captured = state.place(move, mover)
                # captured > 0: same side moves again
                score = self._minimax(child, depth - 1, captured > 0, player, alpha, beta)
                value = max(value, score)
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
            return value

        value = INF
        for move in legal_moves(state):
            child, captured = state.place(move, mover)
            score = self._minimax(child, depth - 1, captured == 0, player, alpha, beta)
            value = min(value, score)
            beta = min(beta, value)
            if alpha >= beta:
                break
        return value
