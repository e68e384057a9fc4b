"""Route handlers that serve account requests from an SQLite users table."""

from __future__ import annotations

import abc
import logging
import sqlite3
import threading
from typing import Any, Dict, Optional, Type

from .models import User
from .protocol import Body, Headers, Request, Response

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "my.db"

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS users ("
    "username TEXT NOT NULL, "
    "password TEXT NOT NULL, "
    "active INTEGER NOT NULL DEFAULT 1)"
)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def open_database(path: str = DEFAULT_DATABASE) -> sqlite3.Connection:
    """Open the shop database, creating the users table if it is missing."""
    db = sqlite3.connect(path, check_same_thread=False)
    db.row_factory = sqlite3.Row
    db.execute(_SCHEMA)
    db.commit()
    return db


class Controller(abc.ABC):
    """Handles the requests sent to one route."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def send(self, method: str, headers: Headers, body: Body) -> Response:
        """Dispatch on the request method; only "post" is understood."""
        if method == "post":
            return self.post(headers, body)
        return Response(0, {}, None, "undefined method")

    @abc.abstractmethod
    def post(self, headers: Headers, body: Body) -> Response:
        """Serve a post request."""


class LoginController(Controller):
    """Checks a username and password against the active users."""

    def post(self, headers: Headers, body: Body) -> Response:
        user = User.from_json(body)
        if not user.username or not user.password:
            return Response(400, {}, None, "username and password cannot be empty")
        try:
            row = self.db.execute(
                "SELECT rowid AS id, username, password FROM users "
                "WHERE username = ? AND password = ? AND active = 1",
                (user.username, user.password),
            ).fetchone()
        except sqlite3.Error:
            logger.exception("login query failed")
            return Response(500, {}, None, "error occurred when quering user")
        if row is None:
            return Response(404, {}, None, "user not found")
        found = User(row["id"], row["username"], row["password"], True)
        return Response(200, {}, found.to_json(), "")


class RegisterController(Controller):
    """Adds a new active user unless the name is already taken."""

    def post(self, headers: Headers, body: Body) -> Response:
        user = User.from_json(body)
        if not user.username or not user.password:
            return Response(400, {}, None, "username and password cannot be empty")
        try:
            row = self.db.execute(
                "SELECT rowid FROM users WHERE username = ? AND active = 1",
                (user.username,),
            ).fetchone()
        except sqlite3.Error:
            logger.exception("register lookup failed")
            return Response(500, {}, None, "error occurred when quering user")
        if row is not None:
            return Response(403, {}, None, "user already exists")
        try:
            self.db.execute(
                "INSERT INTO users (username, password, active) VALUES (?, ?, 1)",
                (user.username, user.password),
            )
            self.db.commit()
        except sqlite3.Error:
            logger.exception("register insert failed")
            return Response(500, {}, None, "error occurred when adding user")
        return Response(200, {}, None, "success")


class UnregisterController(Controller):
    """Deactivates the user whose id is the request body."""

    def post(self, headers: Headers, body: Body) -> Response:
        user_id = _to_int(body)
        try:
            row = self.db.execute(
                "SELECT rowid FROM users WHERE rowid = ? AND active = 1", (user_id,)
            ).fetchone()
        except sqlite3.Error:
            logger.exception("unregister lookup failed")
            return Response(500, {}, None, "error occurred when quering user")
        if row is None:
            return Response(404, {}, None, "user not found")
        try:
            self.db.execute("UPDATE users SET active = 0 WHERE rowid = ?", (user_id,))
            self.db.commit()
        except sqlite3.Error:
            logger.exception("unregister update failed")
            return Response(500, {}, None, "error occurred when adding user")
        return Response(200, {}, None, "success")


class UserController(Controller):
    """Returns the active user named by the "id" field of the body."""

    def post(self, headers: Headers, body: Body) -> Response:
        user_id = _to_int(body.get("id")) if isinstance(body, dict) else 0
        try:
            row = self.db.execute(
                "SELECT username, password FROM users WHERE rowid = ? AND active = 1",
                (user_id,),
            ).fetchone()
        except sqlite3.Error:
            logger.exception("user query failed")
            return Response(
                500, {}, None, "UserController.post: error occurred when quering user"
            )
        if row is None:
            return Response(404, {}, None, "UserController.post: user not found")
        found = User(user_id, row["username"], row["password"], True)
        return Response(200, {}, found.to_json(), "success")


class ControllerFactory:
    """Picks the controller for a request's route and runs it."""

    routes: Dict[str, Type[Controller]] = {
        "/login": LoginController,
        "/register": RegisterController,
        "/unregister": UnregisterController,
        "/user": UserController,
    }

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db
        self._lock = threading.Lock()

    def produce(self, request: Request) -> Optional[Controller]:
        """Return a controller for the route, or None if the route is unknown."""
        controller_class = self.routes.get(request.route)
        return controller_class(self.db) if controller_class is not None else None

    def handle(self, request: Request) -> Response:
        """Serve a request; unknown routes get status 1 and "invalid route"."""
        controller = self.produce(request)
        if controller is None:
            return Response(1, {}, None, "invalid route")
        logger.debug("controller for %s returns data", request.route)
        with self._lock:
            return controller.send(request.method, request.headers, request.body)