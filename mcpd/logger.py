"""Small levelled logger writing timestamped lines to a stream."""

from __future__ import annotations

import enum
import sys
import threading
from datetime import datetime
from typing import TextIO

from .config import LOG_TIME_FORMAT


class LogLevel(enum.IntEnum):
    """Severity of a log message."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4

    def __str__(self) -> str:
        return "WARN" if self is LogLevel.WARNING else self.name


class Logger:
    """Writes ``<timestamp> <LEVEL> [prefix] message`` lines to a stream.

    With no stream given, lines go to whatever ``sys.stdout`` is at write time.
    """

    def __init__(self, prefix: str = "", stream: TextIO | None = None) -> None:
        self.prefix = prefix
        self.min_level = LogLevel.INFO
        self._stream = stream
        self._lock = threading.Lock()

    def with_prefix(self, prefix: str) -> Logger:
        """Return a logger that adds ``prefix`` to this one's and shares its stream."""
        child = Logger(f"{self.prefix}.{prefix}", self._stream)
        child.min_level = self.min_level
        return child

    def set_level(self, level: LogLevel) -> None:
        """Set the lowest level that is written."""
        with self._lock:
            self.min_level = LogLevel(level)

    def _log(self, level: LogLevel, message: str, args: tuple) -> None:
        with self._lock:
            if level < self.min_level:
                return
            timestamp = datetime.now().strftime(LOG_TIME_FORMAT)[:-3]
            prefix = f"[{self.prefix}] " if self.prefix else ""
            text = message % args if args else message
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(f"{timestamp} {level} {prefix}{text}\n")
            stream.flush()
        if level is LogLevel.FATAL:
            raise SystemExit(1)

    def debug(self, message: str, *args: object) -> None:
        self._log(LogLevel.DEBUG, message, args)

    def info(self, message: str, *args: object) -> None:
        self._log(LogLevel.INFO, message, args)

    def warning(self, message: str, *args: object) -> None:
        self._log(LogLevel.WARNING, message, args)

    def error(self, message: str, *args: object) -> None:
        self._log(LogLevel.ERROR, message, args)

    def fatal(self, message: str, *args: object) -> None:
        """Write the message and exit with status 1."""
        self._log(LogLevel.FATAL, message, args)