"""Thread-safe store of per-client context values."""

from __future__ import annotations

import threading
from collections.abc import Mapping


class ContextStore:
    """Keeps a mapping of string values for each client id."""

    def __init__(self) -> None:
        self._contexts: dict[str, dict[str, str]] = {}
        self._lock = threading.RLock()

    def get(self, client_id: str, key: str) -> str | None:
        """Return one value for a client, or None if it is not set."""
        with self._lock:
            return self._contexts.get(client_id, {}).get(key)

    def get_all(self, client_id: str) -> dict[str, str] | None:
        """Return a copy of all values for a client, or None for an unknown client."""
        with self._lock:
            values = self._contexts.get(client_id)
            return None if values is None else dict(values)

    def set(self, client_id: str, key: str, value: str) -> None:
        """Set one value for a client, creating the client if needed."""
        with self._lock:
            self._contexts.setdefault(client_id, {})[key] = value

    def set_multiple(self, client_id: str, values: Mapping[str, str]) -> None:
        """Set several values for a client, creating the client if needed."""
        with self._lock:
            self._contexts.setdefault(client_id, {}).update(values)

    def remove(self, client_id: str, key: str) -> None:
        """Remove one value for a client; unknown clients or keys are ignored."""
        with self._lock:
            self._contexts.get(client_id, {}).pop(key, None)

    def clear(self, client_id: str) -> None:
        """Forget a client and all its values."""
        with self._lock:
            self._contexts.pop(client_id, None)

    def list_clients(self) -> list[str]:
        """Return the ids of all clients in the store."""
        with self._lock:
            return list(self._contexts)

    def query_clients(self, key: str, value: str) -> list[str]:
        """Return the ids of clients whose ``key`` is set to exactly ``value``."""
        with self._lock:
            return [
                client_id
                for client_id, values in self._contexts.items()
                if key in values and values[key] == value
            ]