# mcpd

`mcpd` is a small TCP server. It speaks a plain line-based protocol and
keeps a set of key/value context entries for each connected client.

## Installation

```
pip install .
```

## Running the server

```
mcpd --port 8080
```

The server listens on the given port on all interfaces. The default port
is 8080. `-port` is accepted as another spelling of `--port`. The server
runs until it receives SIGINT or SIGTERM. It then stops accepting clients,
closes every open connection and exits with status 0. It exits with
status 1 if it cannot listen on the port.

Log lines go to standard output in this form:

```
2024-01-01 12:00:00.000 INFO [server] MCP server listening on port 8080
```

## Protocol

Each message sits on its own line and looks like this:

```
TYPE:key=value;key2=value2
```

Whitespace around the type, the keys and the values is trimmed. The part
after the colon may be empty, but the colon itself is required.

| Client sends      | Server replies             |
|-------------------|----------------------------|
| `PING:`           | `PONG:time=<unix seconds>` |
| `CONTEXT:k=v;...` | `ACK:status=ok`            |

A `CONTEXT` message stores each of its pairs under the sending
connection's identifier. The identifier has the form
`<host>:<port>-<nanosecond timestamp>`. The server logs lines it cannot
parse, and it logs messages of an unknown type. It sends no reply to
either and keeps the connection open. A connection is closed when the
client disconnects, or when nothing arrives for 60 seconds.

## Using it as a library

```python
from mcpd.protocol import Message, parse, validate_message_type
from mcpd.context_store import ContextStore
from mcpd.logger import Logger, LogLevel
from mcpd.server import Server

msg = parse("CONTEXT:user=alice")
print(msg.type, msg.params)                        # CONTEXT {'user': 'alice'}
print(Message("ACK", {"status": "ok"}).format())   # ACK:status=ok
print(validate_message_type("PING"))               # True

store = ContextStore()
store.set("client-1", "user", "alice")
print(store.get("client-1", "user"))               # alice
print(store.query_clients("user", "alice"))        # ['client-1']

logger = Logger("server")
logger.set_level(LogLevel.DEBUG)

with Server(0, store, logger) as server:
    print(server.address())
    print(server.connection_ids())
    server.broadcast_message(Message("PING"))
```

- `parse` raises `ProtocolError`, a subclass of `ValueError`, when a line
  is malformed. A line is malformed when it is empty, has no type
  separator or no type, or holds a parameter without `=` or with an
  empty key.
- `ContextStore.get` and `ContextStore.get_all` return `None` for values
  or clients that are not set. `get_all` returns a copy of the client's
  values.
- `Logger.fatal` writes its message and then raises `SystemExit(1)`.
- `Server` can be used as a context manager, or started and stopped with
  `start()` and `shutdown()`. `start()` raises `OSError` when it cannot
  listen on the port.

## What it does not do

- Context data is held in memory only. It is lost when the server stops.
  It is not removed when a client disconnects.
- Clients cannot read context back over the protocol. Only `PING` and
  `CONTEXT` get replies.
- `mcpd.config` defines `MAX_MESSAGE_SIZE`, `MAX_CONNECTIONS`,
  `WRITE_TIMEOUT` and `IDLE_TIMEOUT`, but the server does not enforce
  them. The port is the only setting the command takes. Nothing is read
  from environment variables or configuration files.

## Running the tests

```
pip install ".[test]"
pytest
```