import socket

import pytest

from microtrade.protocol import Request
from microtrade.server import build_server, main
from microtrade.transport import TcpClient

PASSWORD = "password"


@pytest.fixture
def running(tmp_path):
    server = build_server(str(tmp_path / "shop.db"), "127.0.0.1", 0)
    server.listen()
    yield server
    server.close()


@pytest.fixture
def client(running):
    host, port = running.address
    with TcpClient(host, port, timeout=2.0) as tcp:
        yield tcp


def test_build_server_is_not_listening(tmp_path):
    server = build_server(str(tmp_path / "shop.db"), "127.0.0.1", 4321)
    assert server.listening is False
    assert server.address == ("127.0.0.1", 4321)


def test_register_then_login_over_network(client):
    registered = client.post("/register", {}, {"username": "alice", "password": PASSWORD})
    assert registered.status == 200
    assert registered.error == "success"
    logged = client.post("/login", {}, {"username": "alice", "password": PASSWORD})
    assert logged.status == 200
    assert logged.body["username"] == "alice"
    assert logged.body["id"] >= 1


def test_unknown_route_is_rejected(client):
    res = client.send(Request("post", "/nowhere", {}, None))
    assert res.status == 1
    assert res.error == "invalid route"


def test_undefined_method(client):
    res = client.send(Request("get", "/login", {}, None))
    assert res.status == 0
    assert res.error == "undefined method"


def test_user_lookup_after_register(client):
    client.post("/register", {}, {"username": "bob", "password": PASSWORD})
    user_id = client.post("/login", {}, {"username": "bob", "password": PASSWORD}).body["id"]
    res = client.post("/user", {}, {"id": user_id})
    assert res.status == 200
    assert res.body == {"id": user_id, "username": "bob", "password": PASSWORD}


def test_main_reports_busy_port(tmp_path, capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen()
        port = busy.getsockname()[1]
        rc = main(
            ["--database", str(tmp_path / "shop.db"), "--host", "127.0.0.1", "--port", str(port)]
        )
    assert rc == 1
    assert "cannot listen" in capsys.readouterr().err