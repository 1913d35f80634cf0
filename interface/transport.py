"""Blocking socket transport for the game server.

The transport only frames integers and remembers the last message code so
that moves are sent exactly when the server asked for one. Turn tracking
proper lives in boxbot.controller.TurnController.
"""

import logging
import socket
import struct
from typing import Callable, Optional

from boxbot.core.board import Move
from boxbot.protocol import (
    DEFAULT_PORT, Closing, GameOver, HandshakeResult, MessageCode, OppResult,
    PleasePlay, ProtocolDesync, SeatCode, ServerMessage, TransportError, YourResult,
)

logger = logging.getLogger(__name__)

_INT = struct.Struct(">i")
_USHORT = struct.Struct(">H")


class GameTransport:
    def __init__(self, host: str = "localhost", port: int = DEFAULT_PORT,
                 timeout: Optional[float] = None,
                 socket_factory: Callable[..., socket.socket] = socket.create_connection):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._socket_factory = socket_factory
        self._sock: Optional[socket.socket] = None
        self._last_code: Optional[int] = None

    # ── Handshake ──────────────────────────────────────────────────────────

    def connect(self, bot_id: int, table: int, password: int, opponent: int, size: int) -> HandshakeResult:
        """Seat the bot at a table. Never raises; failures come back as codes."""
        self._last_code = None
        try:
            self._sock = self._socket_factory((self.host, self.port), self.timeout)
            # the timeout bounds connecting only; game reads wait on the opponent
            self._sock.settimeout(None)
            self._write_ints(bot_id, table, password, opponent, size)
            code = self._read_int()
            if code in (SeatCode.SIT_FIRST, SeatCode.SIT_SECOND):
                logger.info("Seated as player %d at table %d", code, table)
                return HandshakeResult(code)
            if code < 0:
                message = self._read_utf()
                logger.error("Server refused seat (%d): %s", code, message)
                self.close()
                return HandshakeResult(code, message=message)
            raise TransportError(f"Unexpected answer {code}")
        except (OSError, struct.error) as e:
            logger.error("Handshake failed: %s", e)
            self.close()
            return HandshakeResult(SeatCode.COMFAIL, detail=str(e))

    # ── In-game messages ───────────────────────────────────────────────────

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def must_send_move(self) -> bool:
        return self._last_code == MessageCode.PLEASE_PLAY

    def read_message(self) -> ServerMessage:
        if self.must_send_move:
            raise ProtocolDesync("A move is owed to the server before reading")
        code = self._read_int()
        if code == MessageCode.CLOSING:
            msg = Closing()
        elif code == MessageCode.PLEASE_PLAY:
            msg = PleasePlay()
        elif code == MessageCode.YOUR_RESULT:
            msg = YourResult(self._read_int())
        elif code == MessageCode.OPP_RESULT:
            msg = OppResult(*(self._read_int() for _ in range(4)))
        elif code == MessageCode.GAME_OVER:
            msg = GameOver(self._read_int(), self._read_int())
        else:
            raise ProtocolDesync(f"Unknown message code {code}")
        self._last_code = code
        logger.debug("recv %s", msg)
        return msg

    def send_move(self, move: Move):
        if not self.must_send_move:
            raise ProtocolDesync("Not our turn to play")
        logger.debug("send %s", move)
        self._write_ints(int(move.orientation), move.row, move.col)
        self._last_code = None

    def close(self):
        """Close the socket connection and therefore end the game."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError as e:
                logger.debug("Ignoring error on close: %s", e)
        self._sock = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ── Framing ────────────────────────────────────────────────────────────

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("Not connected")
        return self._sock

    def _recv_exact(self, n: int) -> bytes:
        sock = self._require_socket()
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = sock.recv(n - len(buf))
            except OSError as e:
                raise TransportError(f"Read failed: {e}") from e
            if not chunk:
                raise TransportError("Connection closed by server")
            buf.extend(chunk)
        return bytes(buf)

    def _read_int(self) -> int:
        return _INT.unpack(self._recv_exact(4))[0]

    def _read_utf(self) -> str:
        (length,) = _USHORT.unpack(self._recv_exact(2))
        return self._recv_exact(length).decode("utf-8", errors="replace")

    def _write_ints(self, *values: int):
        sock = self._require_socket()
        try:
            sock.sendall(b"".join(_INT.pack(v) for v in values))
        except OSError as e:
            raise TransportError(f"Write failed: {e}") from e
