"""Request and response envelopes exchanged between client and server."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 8888

Headers = Dict[str, Any]
Body = Any


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _as_object(value: Any) -> dict:
    return dict(value) if isinstance(value, dict) else {}


def _dump(obj: dict) -> bytes:
    return json.dumps(
        obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False
    ).encode("utf-8")


def _load(data: bytes | str) -> dict:
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ValueError(f"malformed message: {exc}") from exc
    if not isinstance(obj, dict):
        raise ValueError("message is not a JSON object")
    return obj


@dataclass
class Request:
    """A call on a server route, carrying headers and a JSON body."""

    method: str
    route: str
    headers: Headers = field(default_factory=dict)
    body: Body = None

    @classmethod
    def from_json(cls, obj: dict) -> "Request":
        """Build a request from a decoded JSON object, tolerating bad fields."""
        return cls(
            method=_as_str(obj.get("method")),
            route=_as_str(obj.get("route")),
            headers=_as_object(obj.get("headers")),
            body=obj.get("body"),
        )

    def to_json(self) -> dict:
        return {
            "method": self.method,
            "route": self.route,
            "headers": dict(self.headers),
            "body": self.body,
        }

    def encode(self) -> bytes:
        """Serialise to compact UTF-8 JSON."""
        return _dump(self.to_json())

    @classmethod
    def decode(cls, data: bytes | str) -> "Request":
        """Parse compact JSON; raises ValueError if it is not a JSON object."""
        return cls.from_json(_load(data))


@dataclass
class Response:
    """A server reply: status code, headers, JSON body and error text."""

    status: int
    headers: Headers = field(default_factory=dict)
    body: Body = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 200

    @classmethod
    def from_json(cls, obj: dict) -> "Response":
        """Build a response from a decoded JSON object, tolerating bad fields."""
        return cls(
            status=_as_int(obj.get("status")),
            headers=_as_object(obj.get("headers")),
            body=obj.get("body"),
            error=_as_str(obj.get("error")),
        )

    def to_json(self) -> dict:
        return {
            "status": self.status,
            "headers": dict(self.headers),
            "body": self.body,
            "error": self.error,
        }

    def encode(self) -> bytes:
        """Serialise to compact UTF-8 JSON."""
        return _dump(self.to_json())

    @classmethod
    def decode(cls, data: bytes | str) -> "Response":
        """Parse compact JSON; raises ValueError if it is not a JSON object."""
        return cls.from_json(_load(data))


class ResponseError(Exception):
    """Raised when a server reply reports failure."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{status}: {message}" if message else str(status))
        self.status = status
        self.message = message