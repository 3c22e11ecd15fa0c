import os
import signal
import socket
import threading
import time

import pytest

from mcpd import config
from mcpd.cli import main, parse_args


def test_default_port():
    assert parse_args([]).port == config.DEFAULT_PORT


@pytest.mark.parametrize("flag", ["-port", "--port"])
def test_port_flag(flag):
    assert parse_args([flag, "9000"]).port == 9000


def test_port_must_be_integer():
    with pytest.raises(SystemExit):
        parse_args(["-port", "abc"])


def test_main_fails_on_busy_port(capsys):
    before = signal.getsignal(signal.SIGTERM)
    with socket.create_server(("", 0)) as busy:
        port = busy.getsockname()[1]
        assert main(["--port", str(port)]) == 1
    out = capsys.readouterr().out
    assert "Failed to start server: failed to listen on" in out
    assert signal.getsignal(signal.SIGTERM) == before


def _free_port():
    with socket.create_server(("", 0)) as probe:
        return probe.getsockname()[1]


def test_main_serves_until_sigterm(capsys):
    port = _free_port()
    replies = []

    def client():
        try:
            deadline = time.monotonic() + 5
            while time.monotonic() < deadline:
                try:
                    sock = socket.create_connection(("127.0.0.1", port), timeout=5)
                    break
                except OSError:
                    time.sleep(0.05)
            else:
                return
            with sock:
                sock.sendall(b"PING:\n")
                buf = b""
                while not buf.endswith(b"\n"):
                    chunk = sock.recv(1)
                    if not chunk:
                        break
                    buf += chunk
                replies.append(buf.decode())
        finally:
            os.kill(os.getpid(), signal.SIGTERM)

    worker = threading.Thread(target=client)
    worker.start()
    status = main(["-port", str(port)])
    worker.join(5)

    assert status == 0
    assert len(replies) == 1
    assert replies[0].startswith("PONG:time=")
    out = capsys.readouterr().out
    assert f"MCP server listening on port {port}" in out
    assert "Received signal terminated, shutting down..." in out
    assert "Server shutdown complete" in out