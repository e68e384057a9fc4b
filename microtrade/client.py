"""Account session against the shop server, with an interactive command line."""

from __future__ import annotations

import argparse
import shlex
import sys
from typing import List, Optional

from .models import User
from .protocol import SERVER_HOST, SERVER_PORT, Response, ResponseError
from .transport import TcpClient


class Session:
    """The signed-in state of one client and the account calls that change it."""

    def __init__(
        self,
        client: Optional[TcpClient] = None,
        *,
        host: str = SERVER_HOST,
        port: int = SERVER_PORT,
        timeout: float = 0.1,
    ) -> None:
        self.client = client if client is not None else TcpClient(host, port, timeout)
        self.user_id = 0
        self.user: Optional[User] = None

    @property
    def logged_in(self) -> bool:
        return self.user_id != 0

    def _set_user_id(self, user_id: int) -> None:
        self.user_id = user_id
        self.refresh()

    def login(self, username: str, password: str) -> Optional[User]:
        """Sign in; raises ResponseError if the server refuses."""
        if self.logged_in:
            raise RuntimeError("already logged in")
        res = self.client.post("/login", {}, {"username": username, "password": password})
        if not res.ok:
            raise ResponseError(res.status, res.error)
        self._set_user_id(User.from_json(res.body).id)
        return self.user

    def register(self, username: str, password: str) -> Response:
        """Create an account without signing in; raises ResponseError on refusal."""
        res = self.client.post("/register", {}, {"username": username, "password": password})
        if not res.ok:
            raise ResponseError(res.status, res.error)
        return res

    def logout(self) -> None:
        """Forget the signed-in user."""
        self._set_user_id(0)

    def unregister(self) -> Response:
        """Deactivate the signed-in account and sign out, whatever the server replies."""
        if not self.logged_in:
            raise RuntimeError("not logged in")
        res = self.client.post("/unregister", {}, self.user_id)
        self._set_user_id(0)
        return res

    def refresh(self) -> Optional[User]:
        """Fetch the current user's record; None when it cannot be found."""
        res = self.client.post("/user", {}, {"id": self.user_id})
        self.user = User.from_json(res.body) if res.ok else None
        return self.user

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


_HELP = (
    "commands: login USER PASSWORD, register USER PASSWORD, "
    "logout, unregister, whoami, help, quit"
)


def _describe(session: Session) -> str:
    if session.user is None:
        return "not logged in"
    return f"{session.user.username} (id {session.user.id})"


def _run_command(session: Session, words: List[str]) -> bool:
    """Run one command; returns False when the session should end."""
    command, args = words[0].lower(), words[1:]
    if command in ("quit", "exit"):
        return False
    if command in ("login", "register"):
        if len(args) != 2:
            print(f"usage: {command} USER PASSWORD")
            return True
        if command == "login":
            session.login(args[0], args[1])
            print(f"logged in as {_describe(session)}")
        else:
            session.register(args[0], args[1])
            print("registered; log in to continue")
    elif command == "logout":
        session.logout()
        print("logged out")
    elif command == "unregister":
        res = session.unregister()
        print(f"unregistered ({res.status} {res.error})".rstrip())
    elif command == "whoami":
        session.refresh()
        print(_describe(session))
    elif command == "help":
        print(_HELP)
    else:
        print(f"unknown command: {command}")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Read account commands from standard input, one per line."""
    parser = argparse.ArgumentParser(
        prog="microtrade-client", description="Manage a shop account."
    )
    parser.add_argument("--host", default=SERVER_HOST)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    parser.add_argument("--timeout", type=float, default=0.1, help="seconds per request")
    args = parser.parse_args(argv)

    interactive = sys.stdin.isatty()
    with Session(host=args.host, port=args.port, timeout=args.timeout) as session:
        if interactive:
            print(_HELP)
        while True:
            if interactive:
                print("> ", end="", flush=True)
            line = sys.stdin.readline()
            if not line:
                break
            words = shlex.split(line)
            if not words:
                continue
            try:
                if not _run_command(session, words):
                    break
            except (ResponseError, RuntimeError) as exc:
                print(f"error: {exc}")
    return 0


if __name__ == "__main__":
    sys.exit(main())