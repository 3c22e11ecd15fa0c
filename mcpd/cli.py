"""Command line entry point that runs the server until SIGINT or SIGTERM."""

from __future__ import annotations

import argparse
import signal
import threading

from .config import DEFAULT_PORT
from .context_store import ContextStore
from .logger import Logger
from .server import Server

_SIGNAL_NAMES = {signal.SIGINT: "interrupt", signal.SIGTERM: "terminated"}
_WAIT_SECONDS = 0.5


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the command line options."""
    parser = argparse.ArgumentParser(prog="mcpd", description="Run the MCP server.")
    parser.add_argument(
        "-port", "--port", type=int, default=DEFAULT_PORT, help="Port to listen on"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the server until a termination signal arrives; return the exit status."""
    args = parse_args(argv)
    logger = Logger("server")
    logger.info("Starting MCP server...")

    server = Server(args.port, ContextStore(), logger)

    stop = threading.Event()
    received: list[int] = []

    def on_signal(signum: int, _frame: object) -> None:
        received.append(signum)
        stop.set()

    previous = {sig: signal.signal(sig, on_signal) for sig in _SIGNAL_NAMES}
    try:
        try:
            server.start()
        except OSError as exc:
            logger.error("Failed to start server: %s", exc)
            return 1

        logger.info("MCP server listening on port %d", args.port)

        while not stop.wait(_WAIT_SECONDS):
            pass

        name = _SIGNAL_NAMES.get(received[0], str(received[0]))
        logger.info("Received signal %s, shutting down...", name)

        try:
            server.shutdown()
        except OSError as exc:
            logger.error("Error during shutdown: %s", exc)
            return 1

        logger.info("Server shutdown complete")
        return 0
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


if __name__ == "__main__":
    raise SystemExit(main())