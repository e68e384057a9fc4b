"""TCP transport carrying JSON requests and responses between client and server."""

from __future__ import annotations

import codecs
import json
import logging
import socket
import socketserver
import threading
import time
from collections import deque
from typing import Callable, Deque, List, Optional, Set, Tuple

from .protocol import SERVER_HOST, SERVER_PORT, Body, Headers, Request, Response

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Response]

_DECODER = json.JSONDecoder()


class _MessageReader:
    """Splits a byte stream into JSON objects; malformed input yields {}."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._text = ""

    def feed(self, data: bytes) -> List[dict]:
        self._text += self._decoder.decode(data)
        messages: List[dict] = []
        while True:
            text = self._text.lstrip()
            if not text:
                self._text = ""
                return messages
            try:
                obj, end = _DECODER.raw_decode(text)
            except json.JSONDecodeError as exc:
                if exc.pos >= len(text) or exc.msg.startswith("Unterminated string"):
                    self._text = text
                else:
                    messages.append({})
                    self._text = ""
                return messages
            messages.append(obj if isinstance(obj, dict) else {})
            self._text = text[end:]


class TcpClient:
    """Sends requests to the server over one reusable connection."""

    def __init__(
        self, host: str = SERVER_HOST, port: int = SERVER_PORT, timeout: float = 0.1
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock: Optional[socket.socket] = None
        self._reader = _MessageReader()
        self._pending: Deque[dict] = deque()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def post(self, route: str, headers: Optional[Headers] = None, body: Body = None) -> Response:
        """Send a "post" request to a route and wait for the reply."""
        return self.send(Request("post", route, dict(headers or {}), body))

    def send(self, request: Request) -> Response:
        """Send a request; connection failures and timeouts come back as status 1."""
        payload = request.encode()
        for _ in range(2):
            if self._sock is None and not self._connect():
                logger.debug("connect to host failed")
                return Response(1, {}, None, "connect to host failed")
            try:
                self._sock.sendall(payload)
                break
            except OSError:
                self.close()
        else:
            return Response(1, {}, None, "connect to host failed")
        return self._receive()

    def close(self) -> None:
        """Drop the connection and anything still buffered from it."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
        self._sock = None
        self._reader = _MessageReader()
        self._pending.clear()

    def _connect(self) -> bool:
        try:
            self._sock = socket.create_connection((self.host, self.port), self.timeout)
        except OSError:
            self._sock = None
            return False
        return True

    def _receive(self) -> Response:
        deadline = time.monotonic() + self.timeout
        while not self._pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return self._abort()
            try:
                self._sock.settimeout(remaining)
                chunk = self._sock.recv(65536)
            except OSError:
                return self._abort()
            if not chunk:
                return self._abort()
            self._pending.extend(self._reader.feed(chunk))
        logger.debug("gained data")
        return Response.from_json(self._pending.popleft())

    def _abort(self) -> Response:
        logger.debug("request timeout")
        self.close()
        return Response(1, {}, None, "timeout")

    def __enter__(self) -> "TcpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class _ConnectionHandler(socketserver.BaseRequestHandler):
    def handle(self) -> None:
        self.server.owner._serve_connection(self.request)


class _ThreadingServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address: Tuple[str, int], owner: "TcpServer") -> None:
        self.owner = owner
        super().__init__(address, _ConnectionHandler)


class TcpServer:
    """Accepts connections and answers each request with the handler's response."""

    def __init__(
        self, handler: Handler, host: str = SERVER_HOST, port: int = SERVER_PORT
    ) -> None:
        self.handler = handler
        self.host = host
        self.port = port
        self._server: Optional[_ThreadingServer] = None
        self._thread: Optional[threading.Thread] = None
        self._connections: Set[socket.socket] = set()
        self._lock = threading.Lock()

    @property
    def listening(self) -> bool:
        return self._server is not None

    @property
    def address(self) -> Tuple[str, int]:
        """The bound address while listening, otherwise the configured one."""
        if self._server is not None:
            host, port = self._server.server_address[:2]
            return host, port
        return self.host, self.port

    def listen(self) -> None:
        """Start serving in the background; raises OSError if binding fails."""
        if self._server is not None:
            return
        self._server = _ThreadingServer((self.host, self.port), self)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.debug("listening on %s:%s", *self.address)

    def close(self) -> None:
        """Stop accepting and drop every open connection."""
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join()
        self._server = None
        self._thread = None
        with self._lock:
            connections = list(self._connections)
        for conn in connections:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        logger.debug("closed")

    def _serve_connection(self, conn: socket.socket) -> None:
        logger.debug("new connection")
        with self._lock:
            self._connections.add(conn)
        reader = _MessageReader()
        try:
            while True:
                try:
                    chunk = conn.recv(65536)
                except OSError:
                    break
                if not chunk:
                    break
                for message in reader.feed(chunk):
                    request = Request.from_json(message)
                    logger.debug("%s %s", request.method, request.route)
                    try:
                        response = self.handler(request)
                    except Exception:
                        logger.exception("handler failed for %s", request.route)
                        return
                    conn.sendall(response.encode())
        except OSError:
            pass
        finally:
            with self._lock:
                self._connections.discard(conn)
            logger.debug("disconnected")

    def __enter__(self) -> "TcpServer":
        self.listen()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()