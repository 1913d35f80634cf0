import random
from typing import Optional, Tuple

from boxbot.config import CONFIG
from boxbot.core.board import BoardState, Move, legal_moves
from boxbot.core.evaluator import Evaluator
from boxbot.core.search import SearchEngine


class Engine:
    """One bot's view of a game: the board, its seat, and the search."""

    def __init__(self, rows: int = 4, cols: Optional[int] = None, player: int = 1,
                 depth: Optional[int] = None, rng: Optional[random.Random] = None):
        if player not in (1, 2):
            raise ValueError(f"player must be 1 or 2, got {player!r}")
        self.state = BoardState.empty(rows, cols or rows)
        self.player = player
        self.search = SearchEngine(Evaluator(), depth=depth or CONFIG.search.depth)
        self.rng = rng or random.Random(CONFIG.search.fallback_seed)

    def apply(self, move: Move, player: int) -> int:
        """Place a move for `player`; returns boxes captured. Raises IllegalMove."""
        self.state, captured = self.state.place(move, player)
        return captured

    def get_best_move(self) -> Tuple[Optional[Move], Optional[int]]:
        move, score = self.search.search_best_move(self.state, self.player)
        if move is None:
            moves = legal_moves(self.state)
            if not moves:
                return None, None
            # search came back empty-handed on a playable board
            return self.rng.choice(moves), None
        return move, score
