"""Network bot runner: seat at a table and play one game.

    python -m interface.client --host 10.0.0.5 --table 17 --depth 5
"""

import argparse
import logging
import sys

from boxbot.config import CONFIG
from boxbot.controller import TurnController
from boxbot.main import Engine
from boxbot.protocol import ProtocolDesync, TransportError
from interface.transport import GameTransport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    srv = CONFIG.server
    parser = argparse.ArgumentParser(description="Play one game of dots and boxes against a game server.")
    parser.add_argument("--host", default=srv.host)
    parser.add_argument("--port", type=int, default=srv.port)
    parser.add_argument("--id", dest="bot_id", type=int, default=srv.bot_id, help="Bot identifier.")
    parser.add_argument("--table", type=int, default=srv.table)
    parser.add_argument("--password", type=int, default=srv.password)
    parser.add_argument("--opponent", type=int, default=srv.opponent,
                        help="0 any, -1 random bot first, -2 random bot second, -3 Rivest bot second.")
    parser.add_argument("--size", type=int, default=srv.board_size, help="Boxes per side.")
    parser.add_argument("--depth", type=int, default=CONFIG.search.depth, help="Search depth in plies.")
    return parser


def play(args, transport=None) -> int:
    """Returns the process exit status."""
    transport = transport or GameTransport(args.host, args.port, timeout=CONFIG.server.connect_timeout)
    with transport:
        seat = transport.connect(args.bot_id, args.table, args.password, args.opponent, args.size)
        if not seat.ok:
            print(seat.message or seat.detail or f"connection failed ({seat.code})", file=sys.stderr)
            return 1

        engine = Engine(args.size, player=seat.player, depth=args.depth)
        controller = TurnController(engine, transport)
        try:
            result = controller.run()
        except (ProtocolDesync, TransportError) as e:
            logger.error("Game aborted: %s", e)
            return 2

    if result.final_scores:
        print(f"Game over: {result.final_scores[0]} -- {result.final_scores[1]}")
    else:
        print("Server closed the game")
    print(result.board.render())
    return 0


def main(argv=None) -> int:
    logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    return play(args)


if __name__ == "__main__":
    sys.exit(main())
