"""TCP server speaking the line protocol, one thread per client connection."""

from __future__ import annotations

import socket
import threading
import time

from .config import MESSAGE_DELIMITER, READ_TIMEOUT
from .context_store import ContextStore
from .logger import Logger
from .protocol import (
    TYPE_ACK,
    TYPE_CONTEXT,
    TYPE_PING,
    TYPE_PONG,
    Message,
    ProtocolError,
    parse,
)

_ACCEPT_POLL_SECONDS = 0.2
_JOIN_SECONDS = 2.0
_DELIMITER = MESSAGE_DELIMITER.encode()


def _format_address(peer: tuple) -> str:
    host, port = peer[0], peer[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class Connection:
    """One client connection: reads messages, answers them and updates the store."""

    def __init__(
        self, conn_id: str, sock: socket.socket, store: ContextStore, logger: Logger
    ) -> None:
        self.id = conn_id
        self._sock = sock
        self._store = store
        self._logger = logger
        self._closed = threading.Event()
        self._close_lock = threading.Lock()
        self._send_lock = threading.Lock()

    @property
    def closed(self) -> bool:
        """Whether the connection has been closed."""
        return self._closed.is_set()

    def handle(self) -> None:
        """Serve the client until it disconnects, a read fails or the connection closes."""
        self._logger.info("New connection established")
        try:
            try:
                reader = self._sock.makefile("rb")
            except OSError as exc:
                self._logger.error("Error reading from connection: %s", exc)
                return
            with reader:
                while not self._closed.is_set():
                    line = self._read_line(reader)
                    if line is None:
                        return
                    try:
                        message = parse(line)
                    except ProtocolError as exc:
                        self._logger.error("Failed to parse message: %s", exc)
                        continue
                    self._handle_message(message)
        finally:
            self.close()

    def _read_line(self, reader) -> str | None:
        try:
            self._sock.settimeout(READ_TIMEOUT)
        except OSError as exc:
            self._logger.error("Failed to set read deadline: %s", exc)
            return None
        try:
            raw = reader.readline()
        except OSError as exc:
            self._logger.error("Error reading from connection: %s", exc)
            return None
        if not raw.endswith(_DELIMITER):
            self._logger.error("Error reading from connection: %s", "EOF")
            return None
        return raw.decode("utf-8", errors="replace")

    def _handle_message(self, message: Message) -> None:
        self._logger.info("Received message: %s", message)
        if message.type == TYPE_PING:
            self._handle_ping(message)
        elif message.type == TYPE_CONTEXT:
            self._handle_context_update(message)
        else:
            self._logger.warning("Unknown message type: %s", message.type)

    def _handle_ping(self, message: Message) -> None:
        self._logger.info("Ping received with params: %s", message.params)
        self.send(Message(TYPE_PONG, {"time": str(int(time.time()))}))

    def _handle_context_update(self, message: Message) -> None:
        self._logger.info("Context update received with params: %s", message.params)
        for key, value in message.params.items():
            self._store.set(self.id, key, value)
        self.send(Message(TYPE_ACK, {"status": "ok"}))

    def send(self, message: Message) -> None:
        """Write one message to the client; failures are logged."""
        data = (message.format() + MESSAGE_DELIMITER).encode()
        try:
            with self._send_lock:
                self._sock.sendall(data)
        except OSError as exc:
            self._logger.error("Failed to send message: %s", exc)

    def close(self) -> None:
        """Close the connection; later calls do nothing."""
        with self._close_lock:
            if self._closed.is_set():
                return
            self._closed.set()
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()
        self._logger.info("Connection closed")


class Server:
    """Accepts TCP clients and hands each to its own :class:`Connection` thread."""

    def __init__(self, port: int, store: ContextStore, logger: Logger) -> None:
        self.port = port
        self.store = store
        self.logger = logger
        self._listener: socket.socket | None = None
        self._accept_thread: threading.Thread | None = None
        self._connections: dict[str, Connection] = {}
        self._lock = threading.Lock()
        self._closed = threading.Event()

    def __enter__(self) -> Server:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def start(self) -> None:
        """Start listening and accepting clients in the background."""
        addr = f":{self.port}"
        try:
            listener = socket.create_server(("", self.port))
        except OSError as exc:
            raise OSError(f"failed to listen on {addr}: {exc}") from exc
        listener.settimeout(_ACCEPT_POLL_SECONDS)
        self._listener = listener
        self._accept_thread = threading.Thread(
            target=self._accept_connections, name="mcpd-accept", daemon=True
        )
        self._accept_thread.start()

    def address(self) -> tuple[str, int]:
        """Return the host and port the server is bound to."""
        if self._listener is None:
            raise RuntimeError("server is not started")
        host, port = self._listener.getsockname()[:2]
        return host, port

    def connection_ids(self) -> list[str]:
        """Return the ids of the registered connections."""
        with self._lock:
            return list(self._connections)

    def shutdown(self) -> None:
        """Stop accepting clients and close every connection."""
        self._closed.set()
        if self._listener is not None:
            self._listener.close()
        if self._accept_thread is not None:
            self._accept_thread.join(_JOIN_SECONDS)
        with self._lock:
            for conn_id, conn in list(self._connections.items()):
                self.logger.info("Closing connection %s", conn_id)
                conn.close()
            self._connections.clear()

    def broadcast_message(self, message: Message) -> None:
        """Send a message to every registered connection."""
        with self._lock:
            connections = list(self._connections.values())
        for conn in connections:
            conn.send(message)

    def _accept_connections(self) -> None:
        listener = self._listener
        while not self._closed.is_set():
            try:
                sock, peer = listener.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self._closed.is_set():
                    return
                self.logger.error("Error accepting connection: %s", exc)
                continue

            conn_id = f"{_format_address(peer)}-{time.time_ns()}"
            conn = Connection(
                conn_id, sock, self.store, self.logger.with_prefix(f"conn[{conn_id}]")
            )
            with self._lock:
                if self._closed.is_set():
                    sock.close()
                    return
                self._connections[conn_id] = conn
            threading.Thread(
                target=conn.handle, name=f"mcpd-conn-{conn_id}", daemon=True
            ).start()