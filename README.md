# microtrade

A shop server and a client that talk to each other over TCP. Every
message is one compact JSON object. The server keeps user accounts in an
SQLite database; the client lets you register, log in, look at your
account, log out and unregister.

The package needs nothing outside the Python standard library.

## Installing

```
pip install .
```

## Running the server

```
microtrade-server
```

Options:

- `--database FILE`: SQLite file holding the accounts (default `my.db` in
  the current directory). The `users` table is created if it is missing.
- `--host ADDRESS`: address to listen on (default `127.0.0.1`).
- `--port PORT`: port to listen on (default `8888`).
- `-v`, `--verbose`: log each connection and request.

The server prints the address it is bound to and serves until you press
Ctrl-C. If the address cannot be bound it prints `cannot listen: ...` and
exits with status 1.

## Running the client

```
microtrade-client
```

Options: `--host`, `--port` (the same defaults as the server) and
`--timeout SECONDS`, how long to wait for each reply (default `0.1`).

The client reads one command per line from standard input:

| Command                  | What it does                                          |
|--------------------------|-------------------------------------------------------|
| `register USER PASSWORD` | creates an account; you log in separately afterwards  |
| `login USER PASSWORD`    | signs in and shows the account                        |
| `whoami`                 | fetches and shows the signed-in account               |
| `logout`                 | signs out                                             |
| `unregister`             | deactivates the signed-in account and signs out       |
| `help`                   | lists the commands                                    |
| `quit`, `exit`           | ends the session                                      |

A refused request is printed as `error: STATUS: MESSAGE`. Because commands
come from standard input, a script of them can be piped in:

```
printf 'register alice password\nlogin alice password\nwhoami\n' | microtrade-client
```

## Routes

Only the `post` method is understood.

| Route         | Body                                  | Reply on success                      |
|---------------|---------------------------------------|---------------------------------------|
| `/register`   | `{"username": ..., "password": ...}`  | status 200, error `success`           |
| `/login`      | `{"username": ..., "password": ...}`  | status 200, the user as the body      |
| `/user`       | `{"id": ...}`                         | status 200, the user as the body      |
| `/unregister` | the user id as a number               | status 200, error `success`           |

A user body is `{"id": ..., "username": ..., "password": ...}`.

Failures: an unknown route gets status `1` and `invalid route`; an unknown
method gets status `0` and `undefined method`. Otherwise `400` when the
username or password is empty, `403` when an active user of that name
already exists, `404` when no active user matches, and `500` when the
database query fails. Unregistering only marks the account inactive, so the
name can be registered again.

## Using it from Python

`microtrade.client.Session` performs the same steps as the command line:

```python
from microtrade.client import Session
from microtrade.protocol import ResponseError

with Session(host="127.0.0.1", port=8888, timeout=1.0) as session:
    session.register("alice", "password")
    user = session.login("alice", "password")   # a microtrade.models.User
    print(user.id, user.username)
    session.refresh()                            # re-reads session.user
    session.logout()
```

`login` and `register` raise `ResponseError` (with `status` and `message`)
when the server refuses. `login` raises `RuntimeError` if already signed in,
and `unregister` raises it if not signed in; `unregister` signs out whatever
the server replies and returns the `Response`.

Lower down, `microtrade.transport.TcpClient.post(route, headers, body)`
returns a `Response`; if the server cannot be reached or does not answer
in time it returns status `1` with the error `connect to host failed` or
`timeout` rather than raising. `microtrade.transport.TcpServer` takes any
callable from `Request` to `Response`; `microtrade.server.build_server`
wires it to `microtrade.controllers.ControllerFactory` over a database
opened with `microtrade.controllers.open_database`.

## The wire format

`microtrade.protocol` turns messages into Python objects and back:

```python
from microtrade.protocol import Request, Response

request = Request("post", "/user", {}, {"id": 1})
data = request.encode()   # compact UTF-8 JSON bytes

reply = Response.decode(b'{"status": 404, "headers": {}, "body": null, "error": "user not found"}')
print(reply.status, reply.error, reply.ok)
```

A request carries `method`, `route`, `headers` and `body`; a response
carries `status`, `headers`, `body` and `error`. `decode` raises
`ValueError` when the data is not a JSON object; fields of the wrong type
take empty defaults. Several messages may follow one another on a
connection; the server answers each in turn.

## What it does not do

Only accounts are served. `microtrade.models` defines `Goods`, `Cart`,
`CartItem`, `Order` and `OrderItem` records, but no route, table or
client command uses them: there is no catalogue, cart or ordering yet.
Passwords are stored and sent as plain text, and there is no graphical
interface, only the command-line client.

## Running the tests

```
pip install .[test]
pytest
```