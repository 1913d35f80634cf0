"""Dots-and-boxes board: immutable snapshots plus a mutable game record.

Edges live in one flat bitmap: the (rows+1) x cols horizontal block first,
then the rows x (cols+1) vertical block, both row-major. That is also the
order in which legal moves are enumerated, so index order is move order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

UNCLAIMED = 0
PLAYERS = (1, 2)


class IllegalMove(ValueError):
    """Edge out of range, not between adjacent dots, or already placed."""


class Orientation(IntEnum):
    HORIZONTAL = 0
    VERTICAL = 1


_MOVE_RE = re.compile(r"^\s*([hv])[\s,]+(\d+)[\s,]+(\d+)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Move:
    orientation: Orientation
    row: int
    col: int

    @classmethod
    def from_dots(cls, r1: int, c1: int, r2: int, c2: int) -> "Move":
        """Normalize an edge given by its two end dots, in either direction."""
        if r1 == r2 and abs(c1 - c2) == 1:
            return cls(Orientation.HORIZONTAL, r1, min(c1, c2))
        if c1 == c2 and abs(r1 - r2) == 1:
            return cls(Orientation.VERTICAL, min(r1, r2), c1)
        raise IllegalMove(f"dots ({r1},{c1}) and ({r2},{c2}) are not adjacent")

    @classmethod
    def from_wire(cls, orientation: int, row: int, col: int) -> "Move":
        try:
            return cls(Orientation(orientation), row, col)
        except ValueError:
            raise IllegalMove(f"unknown orientation {orientation}") from None

    @classmethod
    def parse(cls, text: str) -> "Move":
        """Parse 'H r c' / 'V r c'."""
        m = _MOVE_RE.match(text)
        if not m:
            raise IllegalMove(f"cannot parse move {text!r}")
        kind, row, col = m.groups()
        orientation = Orientation.HORIZONTAL if kind.lower() == "h" else Orientation.VERTICAL
        return cls(orientation, int(row), int(col))

    def to_dots(self) -> Tuple[int, int, int, int]:
        if self.orientation == Orientation.HORIZONTAL:
            return self.row, self.col, self.row, self.col + 1
        return self.row, self.col, self.row + 1, self.col

    def __str__(self) -> str:
        return f"{'H' if self.orientation == Orientation.HORIZONTAL else 'V'} {self.row} {self.col}"


def _check_player(player: int):
    if player not in PLAYERS:
        raise ValueError(f"player must be 1 or 2, got {player!r}")


class BoardState:
    """Immutable snapshot of placed edges and box owners.

    Every mutation returns a new state built from fresh copies, so a state
    handed to the search can never be changed underneath its holder.
    """

    __slots__ = ("rows", "cols", "_edges", "_owners", "_placed")

    def __init__(self, rows: int, cols: int, edges: bytes, owners: bytes, placed: Optional[int] = None):
        self.rows = rows
        self.cols = cols
        self._edges = edges
        self._owners = owners
        self._placed = sum(edges) if placed is None else placed

    @classmethod
    def empty(cls, rows: int, cols: int) -> "BoardState":
        if rows < 1 or cols < 1:
            raise ValueError(f"board must have at least one box, got {rows}x{cols}")
        total = (rows + 1) * cols + rows * (cols + 1)
        return cls(rows, cols, bytes(total), bytes(rows * cols), 0)

    # ── Geometry ───────────────────────────────────────────────────────────

    @property
    def total_edges(self) -> int:
        return len(self._edges)

    @property
    def edge_count(self) -> int:
        return self._placed

    def _h(self, r: int, c: int) -> int:
        return r * self.cols + c

    def _v(self, r: int, c: int) -> int:
        return (self.rows + 1) * self.cols + r * (self.cols + 1) + c

    def edge_index(self, move: Move) -> int:
        """Flat bitmap index of a move; raises IllegalMove when off the board."""
        r, c = move.row, move.col
        if move.orientation == Orientation.HORIZONTAL:
            if 0 <= r <= self.rows and 0 <= c < self.cols:
                return self._h(r, c)
        elif move.orientation == Orientation.VERTICAL:
            if 0 <= r < self.rows and 0 <= c <= self.cols:
                return self._v(r, c)
        raise IllegalMove(f"edge {move} is outside a {self.rows}x{self.cols} board")

    def move_at(self, index: int) -> Move:
        h_count = (self.rows + 1) * self.cols
        if index < h_count:
            r, c = divmod(index, self.cols)
            return Move(Orientation.HORIZONTAL, r, c)
        r, c = divmod(index - h_count, self.cols + 1)
        return Move(Orientation.VERTICAL, r, c)

    def _adjacent_boxes(self, move: Move) -> List[Tuple[int, int]]:
        r, c = move.row, move.col
        boxes = []
        if move.orientation == Orientation.HORIZONTAL:
            if r > 0:
                boxes.append((r - 1, c))
            if r < self.rows:
                boxes.append((r, c))
        else:
            if c > 0:
                boxes.append((r, c - 1))
            if c < self.cols:
                boxes.append((r, c))
        return boxes

    # ── Queries ────────────────────────────────────────────────────────────

    def has_edge(self, move: Move) -> bool:
        return bool(self._edges[self.edge_index(move)])

    def owner(self, row: int, col: int) -> int:
        return self._owners[row * self.cols + col]

    def box_sides(self, row: int, col: int) -> int:
        e = self._edges
        return (e[self._h(row, col)] + e[self._h(row + 1, col)]
                + e[self._v(row, col)] + e[self._v(row, col + 1)])

    def is_terminal(self) -> bool:
        return self._placed == len(self._edges)

    def score_of(self, player: int) -> int:
        return self._owners.count(player)

    def scores(self) -> Tuple[int, int]:
        return self.score_of(1), self.score_of(2)

    def unclaimed_boxes(self) -> int:
        return self._owners.count(UNCLAIMED)

    def dangerous_boxes(self) -> int:
        """Unclaimed boxes with exactly three sides, claimable by whoever moves next."""
        count = 0
        for r in range(self.rows):
            for c in range(self.cols):
                if self._owners[r * self.cols + c] == UNCLAIMED and self.box_sides(r, c) == 3:
                    count += 1
        return count

    def legal_moves(self) -> List[Move]:
        return legal_moves(self)

    # ── Mutation ───────────────────────────────────────────────────────────

    def place(self, move: Move, player: int) -> Tuple["BoardState", int]:
        """Place an edge for `player`; returns (new_state, boxes_completed).

        Raises IllegalMove and leaves this state untouched on a bad edge.
        """
        _check_player(player)
        idx = self.edge_index(move)
        if self._edges[idx]:
            raise IllegalMove(f"edge {move} is already placed")

        edges = bytearray(self._edges)
        edges[idx] = 1
        owners = bytearray(self._owners)
        child = BoardState(self.rows, self.cols, bytes(edges), self._owners, self._placed + 1)

        captured = 0
        for r, c in self._adjacent_boxes(move):
            if owners[r * self.cols + c] == UNCLAIMED and child.box_sides(r, c) == 4:
                owners[r * self.cols + c] = player
                captured += 1
        if captured:
            child._owners = bytes(owners)
        return child, captured

    def apply_move(self, move: Move, player: int) -> Tuple["BoardState", int, Optional[IllegalMove]]:
        """Result-value form of place(): (state, captured, error)."""
        try:
            child, captured = self.place(move, player)
        except IllegalMove as e:
            return self, 0, e
        return child, captured, None

    # ── Misc ───────────────────────────────────────────────────────────────

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return (self.rows, self.cols, self._edges, self._owners) == (
            other.rows, other.cols, other._edges, other._owners)

    def __hash__(self) -> int:
        return hash((self.rows, self.cols, self._edges, self._owners))

    def __repr__(self) -> str:
        return f"BoardState({self.rows}x{self.cols}, edges={self._placed}/{len(self._edges)})"

    def render(self) -> str:
        """ASCII diagram: '+' dots, '--' and '|' edges, owner digits in boxes."""
        lines = []
        for r in range(self.rows + 1):
            lines.append("".join("+" + ("--" if self._edges[self._h(r, c)] else "  ")
                                 for c in range(self.cols)) + "+")
            if r < self.rows:
                row = []
                for c in range(self.cols + 1):
                    row.append("|" if self._edges[self._v(r, c)] else " ")
                    if c < self.cols:
                        o = self.owner(r, c)
                        row.append(f"{o} " if o else "  ")
                lines.append("".join(row))
        return "\n".join(lines)


def legal_moves(state: BoardState) -> List[Move]:
    """Unplaced edges: horizontals row-major, then verticals row-major."""
    return [state.move_at(i) for i, placed in enumerate(state._edges) if not placed]


class GameBoard:
    """Mutable game record: current state, whose turn, and undo history."""

    def __init__(self, rows: int = 4, cols: int = 4):
        self.state = BoardState.empty(rows, cols)
        self.to_move = 1
        self.move_history: List[Move] = []
        self._undo: List[Tuple[BoardState, int]] = []

    def reset(self, rows: Optional[int] = None, cols: Optional[int] = None):
        """Start a fresh game, optionally on a different grid."""
        self.state = BoardState.empty(rows or self.state.rows, cols or self.state.cols)
        self.to_move = 1
        self.move_history.clear()
        self._undo.clear()

    def make_move(self, move: Move) -> bool:
        """Play `move` for the side to move. Returns True if legal."""
        child, captured, error = self.state.apply_move(move, self.to_move)
        if error is not None:
            return False
        self._undo.append((self.state, self.to_move))
        self.move_history.append(move)
        self.state = child
        if captured == 0:
            self.to_move = 3 - self.to_move
        return True

    def undo_move(self):
        """Take back the last move."""
        if self._undo:
            self.state, self.to_move = self._undo.pop()
            self.move_history.pop()

    def get_legal_moves(self) -> List[Move]:
        return legal_moves(self.state)

    def is_game_over(self) -> bool:
        return self.state.is_terminal()

    def scores(self) -> Tuple[int, int]:
        return self.state.scores()

    def winner(self) -> Optional[int]:
        """1 or 2, 0 for a draw, None while the game is running."""
        if not self.is_game_over():
            return None
        p1, p2 = self.scores()
        if p1 == p2:
            return 0
        return 1 if p1 > p2 else 2

    def print_board(self):
        """Print ASCII representation."""
        print(self.state.render())
