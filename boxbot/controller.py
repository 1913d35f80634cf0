"""Turn controller: drives one networked game from seat to final score."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from boxbot.core.board import BoardState, IllegalMove, Move
from boxbot.main import Engine
from boxbot.protocol import (
    Closing, GameOver, OppResult, PleasePlay, ProtocolDesync, ServerMessage, YourResult,
)

logger = logging.getLogger(__name__)


class TurnState(Enum):
    AWAITING_OPPONENT = "awaiting_opponent"
    MUST_PLAY = "must_play"
    AWAITING_RESULT = "awaiting_result"
    GAME_OVER = "game_over"
    CLOSED = "closed"


@dataclass
class GameResult:
    board: BoardState
    final_scores: Optional[Tuple[int, int]] = None  # as reported by the server
    moves_played: int = 0
    closed: bool = False
    server_points: Dict[int, int] = field(default_factory=lambda: {1: 0, 2: 0})  # summed from result messages


class TurnController:
    """
    Owns the local board for one game and reacts to server messages.

    transport needs read_message() and send_move(move); see
    interface.transport.GameTransport.
    """

    def __init__(self, engine: Engine, transport):
        self.engine = engine
        self.transport = transport
        self.state = TurnState.AWAITING_OPPONENT
        self.to_move = 1
        self.pending: Optional[Tuple[Move, int]] = None  # (move, local captures) awaiting YOUR_RESULT
        self.moves_played = 0
        self.final_scores: Optional[Tuple[int, int]] = None
        self.server_points = {1: 0, 2: 0}

    @property
    def player(self) -> int:
        return self.engine.player

    @property
    def opponent(self) -> int:
        return 3 - self.engine.player

    @property
    def board(self) -> BoardState:
        return self.engine.state

    @property
    def finished(self) -> bool:
        return self.state in (TurnState.GAME_OVER, TurnState.CLOSED)

    def run(self) -> GameResult:
        """Read and handle messages until the game ends or the server closes."""
        while not self.finished:
            self.handle(self.transport.read_message())
        return GameResult(self.board, self.final_scores, self.moves_played,
                          closed=self.state == TurnState.CLOSED,
                          server_points=dict(self.server_points))

    def handle(self, msg: ServerMessage):
        if self.finished:
            raise ProtocolDesync(f"{type(msg).__name__} received after the game ended")
        if isinstance(msg, PleasePlay):
            self._on_please_play()
        elif isinstance(msg, YourResult):
            self._on_your_result(msg)
        elif isinstance(msg, OppResult):
            self._on_opp_result(msg)
        elif isinstance(msg, GameOver):
            self._on_game_over(msg)
        elif isinstance(msg, Closing):
            logger.info("Server closed the game")
            self.state = TurnState.CLOSED
        else:
            raise ProtocolDesync(f"Unexpected message {msg!r}")

    # ── Handlers ───────────────────────────────────────────────────────────

    def _on_please_play(self):
        if self.state == TurnState.AWAITING_RESULT:
            raise ProtocolDesync(f"PLEASE_PLAY received before the result of {self.pending[0]}")
        if self.state != TurnState.AWAITING_OPPONENT:
            raise ProtocolDesync("PLEASE_PLAY received while a move is already owed")
        if self.to_move != self.player:
            logger.warning("Server asks player %d to play; local model expected player %d",
                           self.player, self.to_move)
            self.to_move = self.player
        self.state = TurnState.MUST_PLAY
        self._play()

    def _play(self):
        move, score = self.engine.get_best_move()
        if move is None:
            raise ProtocolDesync("Asked to play on a full board")
        captured = self.engine.apply(move, self.player)
        self.transport.send_move(move)
        logger.info("Played %s (score %s, captured %d)", move, score, captured)
        self.pending = (move, captured)
        self.moves_played += 1
        self.to_move = self.player if captured else self.opponent
        self.state = TurnState.AWAITING_RESULT

    def _on_your_result(self, msg: YourResult):
        if self.pending is None:
            raise ProtocolDesync("YOUR_RESULT received with no move outstanding")
        move, captured = self.pending
        self.pending = None
        self.state = TurnState.AWAITING_OPPONENT
        if msg.invalid:
            raise ProtocolDesync(f"Server rejected our move {move}")
        self._check_points(self.player, move, captured, msg.points)

    def _on_opp_result(self, msg: OppResult):
        if self.state == TurnState.MUST_PLAY:
            raise ProtocolDesync("Opponent move received while we must play")
        if self.state == TurnState.AWAITING_RESULT:
            raise ProtocolDesync(f"Opponent move received before the result of {self.pending[0]}")
        if self.to_move != self.opponent:
            logger.warning("Server reports a move by player %d; local model expected player %d",
                           self.opponent, self.to_move)
        try:
            move = msg.move()
            captured = self.engine.apply(move, self.opponent)
        except IllegalMove as e:
            raise ProtocolDesync(f"Server reported an illegal opponent move: {e}") from e
        logger.debug("Opponent played %s (captured %d)", move, captured)
        self._check_points(self.opponent, move, captured, msg.points)
        self.to_move = self.opponent if captured else self.player

    def _on_game_over(self, msg: GameOver):
        self.final_scores = (msg.score1, msg.score2)
        self.state = TurnState.GAME_OVER
        local = self.board.scores()
        if local != self.final_scores:
            logger.warning("Final score %s differs from local tally %s", self.final_scores, local)
        logger.info("Game over: %d -- %d", msg.score1, msg.score2)

    def _check_points(self, player: int, move: Move, captured: int, points: int):
        self.server_points[player] += points
        if points != captured:
            logger.warning("Server credited player %d with %d for %s; local board counted %d",
                           player, points, move, captured)
