import pytest

from microtrade.protocol import Request, Response, ResponseError


def test_request_encode_is_compact_and_sorted():
    req = Request("post", "/login", {}, {"username": "alice", "password": "password"})
    assert req.encode() == (
        b'{"body":{"password":"password","username":"alice"},'
        b'"headers":{},"method":"post","route":"/login"}'
    )


def test_request_round_trip():
    req = Request("post", "/user", {"x": 1}, {"id": 7})
    assert Request.decode(req.encode()) == req


def test_request_round_trip_scalar_body():
    req = Request("post", "/unregister", {}, 42)
    assert Request.decode(req.encode()).body == 42


def test_request_from_json_defaults():
    req = Request.from_json({})
    assert (req.method, req.route, req.headers, req.body) == ("", "", {}, None)


def test_request_from_json_coerces_wrong_types():
    req = Request.from_json({"method": 5, "route": None, "headers": [1, 2]})
    assert req.method == ""
    assert req.route == ""
    assert req.headers == {}


def test_request_to_json_keys():
    req = Request("post", "/register", {}, None)
    assert set(req.to_json()) == {"method", "route", "headers", "body"}


def test_response_round_trip_unicode():
    res = Response(403, {}, None, "用户已存在")
    decoded = Response.decode(res.encode())
    assert decoded == res
    assert "用户已存在".encode("utf-8") in res.encode()


def test_response_from_str():
    res = Response.decode('{"status":200,"body":{"id":3},"error":"success"}')
    assert res.status == 200
    assert res.body == {"id": 3}
    assert res.error == "success"
    assert res.headers == {}
    assert res.ok


def test_response_status_coercion():
    assert Response.from_json({"status": 404.0}).status == 404
    assert Response.from_json({"status": 1.5}).status == 0
    assert Response.from_json({"status": "200"}).status == 0
    assert Response.from_json({"status": True}).status == 0


def test_response_defaults():
    res = Response.from_json({})
    assert (res.status, res.headers, res.body, res.error) == (0, {}, None, "")
    assert not res.ok


@pytest.mark.parametrize("data", [b"not json", b"[1, 2]", "42"])
def test_decode_rejects_non_objects(data):
    with pytest.raises(ValueError):
        Response.decode(data)
    with pytest.raises(ValueError):
        Request.decode(data)


def test_response_error_fields():
    err = ResponseError(404, "user not found")
    assert err.status == 404
    assert err.message == "user not found"
    assert "user not found" in str(err)