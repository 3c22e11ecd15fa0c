"""Server, protocol and logging settings."""

DEFAULT_PORT = 8080
"""Port the server listens on unless told otherwise."""

MAX_MESSAGE_SIZE = 4096
"""Largest incoming message accepted, in bytes."""

READ_TIMEOUT = 60
"""Read timeout for client connections, in seconds."""

WRITE_TIMEOUT = 10
"""Write timeout for client connections, in seconds."""

IDLE_TIMEOUT = 300
"""Idle timeout for client connections, in seconds."""

MAX_CONNECTIONS = 1000
"""Largest number of simultaneous connections."""

PROTOCOL_VERSION = "1.0"

MESSAGE_DELIMITER = "\n"
TYPE_PARAM_SEPARATOR = ":"
PARAM_PAIR_SEPARATOR = ";"
PARAM_KEY_VALUE_SEPARATOR = "="

LOG_TIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
"""strftime format for log timestamps; the microseconds are cut to milliseconds."""

LOG_LEVEL = "info"