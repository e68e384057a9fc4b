"""Domain records of the shop: users, goods, carts and orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Any, List, Optional


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class User:
    """A registered account."""

    id: int = 0
    username: str = ""
    password: str = ""
    active: bool = False

    @classmethod
    def from_json(cls, obj: Any) -> "User":
        """Read id, username and password; anything missing takes its default."""
        if not isinstance(obj, dict):
            obj = {}
        return cls(
            id=_as_int(obj.get("id")),
            username=_as_str(obj.get("username")),
            password=_as_str(obj.get("password")),
        )

    def to_json(self) -> dict:
        return {"id": self.id, "username": self.username, "password": self.password}


@dataclass
class Goods:
    """An item for sale."""

    id: int = 0
    name: str = ""
    description: str = ""
    price: float = 0.0
    stock: int = 0
    category: str = ""


@dataclass
class CartItem:
    """A quantity of goods held in a cart."""

    id: int = 0
    cart_id: int = 0
    goods_id: int = 0
    quantity: int = 0


@dataclass
class Cart:
    """A user's shopping cart."""

    id: int = 0
    user_id: int = 0
    cart_item_ids: List[int] = field(default_factory=list)


@dataclass
class OrderItem:
    """A line of an order, with the price paid."""

    id: int = 0
    order_id: int = 0
    goods_id: int = 0
    quantity: int = 0
    price: float = 0.0


@dataclass
class Order:
    """A placed order."""

    id: int = 0
    user_id: int = 0
    cost: float = 0.0
    create_time: Optional[time] = None
    status: str = ""
    order_item_ids: List[int] = field(default_factory=list)