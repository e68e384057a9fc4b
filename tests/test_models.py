from microtrade.models import Cart, CartItem, Goods, Order, OrderItem, User


def test_user_to_json_fields():
    user = User(3, "alice", "password", True)
    assert user.to_json() == {"id": 3, "username": "alice", "password": "password"}


def test_user_round_trip_keeps_identity_fields():
    user = User(9, "bob", "secret", False)
    assert User.from_json(user.to_json()) == user


def test_user_from_json_missing_fields():
    user = User.from_json({})
    assert (user.id, user.username, user.password) == (0, "", "")


def test_user_from_json_wrong_types():
    user = User.from_json({"id": "5", "username": 1, "password": None})
    assert (user.id, user.username, user.password) == (0, "", "")


def test_user_from_json_float_id():
    assert User.from_json({"id": 12.0}).id == 12


def test_user_from_json_non_object():
    assert User.from_json(17) == User()


def test_user_from_json_ignores_active():
    assert User.from_json({"id": 1, "active": True}).active is False


def test_cart_lists_are_independent():
    first, second = Cart(), Cart()
    first.cart_item_ids.append(4)
    assert second.cart_item_ids == []


def test_order_lists_are_independent():
    first, second = Order(), Order()
    first.order_item_ids.append(2)
    assert second.order_item_ids == []


def test_records_hold_values():
    item = CartItem(1, 2, 3, 4)
    assert (item.cart_id, item.goods_id, item.quantity) == (2, 3, 4)
    line = OrderItem(1, 2, 3, 5, 9.5)
    assert line.quantity * line.price == 47.5
    goods = Goods(name="pen", price=1.25, stock=10)
    assert goods.stock == 10 and goods.name == "pen"