"""Core engine components: board, evaluator, and search."""

from .board import BoardState, GameBoard, IllegalMove, Move, Orientation, legal_moves
from .evaluator import Evaluator
from .search import SearchEngine
