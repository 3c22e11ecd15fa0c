"""Wire format of the line protocol: ``TYPE:key=value;key2=value2``."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import (
    PARAM_KEY_VALUE_SEPARATOR,
    PARAM_PAIR_SEPARATOR,
    TYPE_PARAM_SEPARATOR,
)

TYPE_PING = "PING"
TYPE_PONG = "PONG"
TYPE_CONTEXT = "CONTEXT"
TYPE_ACK = "ACK"
TYPE_ERROR = "ERROR"

VALID_TYPES = frozenset({TYPE_PING, TYPE_PONG, TYPE_CONTEXT, TYPE_ACK, TYPE_ERROR})


class ProtocolError(ValueError):
    """Raised when a raw message cannot be parsed."""


@dataclass
class Message:
    """A protocol message: a type and its string parameters."""

    type: str
    params: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.params is None:
            self.params = {}

    def format(self) -> str:
        """Return the message in wire form, without the line delimiter."""
        pairs = PARAM_PAIR_SEPARATOR.join(
            f"{key}{PARAM_KEY_VALUE_SEPARATOR}{value}"
            for key, value in self.params.items()
        )
        return f"{self.type}{TYPE_PARAM_SEPARATOR}{pairs}"

    def __str__(self) -> str:
        shown = " ".join(f"{key}:{self.params[key]}" for key in sorted(self.params))
        return f"Message{{Type: {self.type}, Params: map[{shown}]}}"


def parse(raw: str) -> Message:
    """Parse one raw line into a :class:`Message`."""
    raw = raw.strip()
    if not raw:
        raise ProtocolError("empty message")

    msg_type, sep, rest = raw.partition(TYPE_PARAM_SEPARATOR)
    if not sep:
        raise ProtocolError("invalid message format: missing type separator")

    msg_type = msg_type.strip()
    if not msg_type:
        raise ProtocolError("missing message type")

    params: dict[str, str] = {}
    if rest:
        for pair in rest.split(PARAM_PAIR_SEPARATOR):
            key, eq, value = pair.partition(PARAM_KEY_VALUE_SEPARATOR)
            if not eq:
                raise ProtocolError(f"invalid parameter format: {pair}")
            key = key.strip()
            if not key:
                raise ProtocolError("empty parameter key")
            params[key] = value.strip()

    return Message(msg_type, params)


def validate_message_type(msg_type: str) -> bool:
    """Return whether ``msg_type`` is one of the known message types."""
    return msg_type in VALID_TYPES