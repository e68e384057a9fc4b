"""Command that serves the shop's account routes over TCP."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import List, Optional

from .controllers import DEFAULT_DATABASE, ControllerFactory, open_database
from .protocol import SERVER_HOST, SERVER_PORT
from .transport import TcpServer

logger = logging.getLogger(__name__)


def build_server(
    database: str = DEFAULT_DATABASE, host: str = SERVER_HOST, port: int = SERVER_PORT
) -> TcpServer:
    """Create a server, not yet listening, that answers requests from the database."""
    factory = ControllerFactory(open_database(database))
    return TcpServer(factory.handle, host, port)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="microtrade-server", description="Serve the shop's account routes."
    )
    parser.add_argument("--database", default=DEFAULT_DATABASE, help="SQLite file")
    parser.add_argument("--host", default=SERVER_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="port to listen on")
    parser.add_argument("-v", "--verbose", action="store_true", help="log each request")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Listen until interrupted; returns 1 if the address cannot be bound."""
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    server = build_server(args.database, args.host, args.port)
    try:
        server.listen()
    except OSError as exc:
        print(f"cannot listen: {exc}", file=sys.stderr)
        return 1
    host, port = server.address
    print(f"listening on {host}:{port}")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())