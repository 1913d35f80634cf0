"""Wire-level vocabulary shared by the transport and the turn controller.

All integers on the wire are big-endian signed 32-bit. The handshake sends
five of them (bot id, table, password, opponent type, board size) and reads
one seat code back; a negative seat code is followed by a 2-byte length and
that many UTF-8 bytes of explanation.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

from boxbot.core.board import Move

DEFAULT_PORT = 80
INVALID_MOVE = -1


class SeatCode(IntEnum):
    COMFAIL = -3
    INVALID = -2
    NOSIT = -1
    SIT_FIRST = 1
    SIT_SECOND = 2


class MessageCode(IntEnum):
    CLOSING = -1
    PLEASE_PLAY = 0
    YOUR_RESULT = 1
    OPP_RESULT = 2
    GAME_OVER = 3


class OpponentType(IntEnum):
    ANY = 0
    RANDOM_BOT_FIRST = -1
    RANDOM_BOT_SECOND = -2
    RIVEST_BOT_SECOND = -3


class TransportError(ConnectionError):
    """The connection failed or was cut while a game was in progress."""


class ProtocolDesync(RuntimeError):
    """Client and server disagree about the game; the session cannot go on."""


@dataclass(frozen=True)
class HandshakeResult:
    code: int
    message: Optional[str] = None  # server-supplied rejection text
    detail: Optional[str] = None  # local diagnostic for transport failures

    @property
    def ok(self) -> bool:
        return self.code in (SeatCode.SIT_FIRST, SeatCode.SIT_SECOND)

    @property
    def player(self) -> Optional[int]:
        return int(self.code) if self.ok else None


@dataclass(frozen=True)
class Closing:
    code = MessageCode.CLOSING


@dataclass(frozen=True)
class PleasePlay:
    code = MessageCode.PLEASE_PLAY


@dataclass(frozen=True)
class YourResult:
    points: int
    code = MessageCode.YOUR_RESULT

    @property
    def invalid(self) -> bool:
        return self.points == INVALID_MOVE


@dataclass(frozen=True)
class OppResult:
    orientation: int
    row: int
    col: int
    points: int
    code = MessageCode.OPP_RESULT

    def move(self) -> Move:
        return Move.from_wire(self.orientation, self.row, self.col)


@dataclass(frozen=True)
class GameOver:
    score1: int
    score2: int
    code = MessageCode.GAME_OVER


ServerMessage = Union[Closing, PleasePlay, YourResult, OppResult, GameOver]
