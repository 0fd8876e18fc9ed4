"""Control frame vocabulary for the WebSocket bridge."""

from __future__ import annotations

# Envelope keys
KEY_TYPE = "type"
KEY_HOST = "host"
KEY_PORT = "port"
KEY_OK = "ok"
KEY_ERROR = "error"
KEY_REASON = "reason"
KEY_MESSAGE = "message"

# Tags (shared by inbound commands and outbound events)
TYPE_CONNECT = "connect"
TYPE_DISCONNECT = "disconnect"
TYPE_ERROR = "error"

PORT_MIN = 1
PORT_MAX = 65535

# Event texts
REASON_CLIENT_REQUESTED = "client requested"
REASON_CONNECTION_CLOSED = "connection closed"
MESSAGE_NOT_CONNECTED = "not connected"
MESSAGE_INVALID_COMMAND = "invalid command"

DIAL_ERROR_PREFIX = "Failed to connect"
READ_ERROR_PREFIX = "Read error"
WRITE_ERROR_PREFIX = "Write error"

__all__ = [
    "DIAL_ERROR_PREFIX",
    "KEY_ERROR",
    "KEY_HOST",
    "KEY_MESSAGE",
    "KEY_OK",
    "KEY_PORT",
    "KEY_REASON",
    "KEY_TYPE",
    "MESSAGE_INVALID_COMMAND",
    "MESSAGE_NOT_CONNECTED",
    "PORT_MAX",
    "PORT_MIN",
    "READ_ERROR_PREFIX",
    "REASON_CLIENT_REQUESTED",
    "REASON_CONNECTION_CLOSED",
    "TYPE_CONNECT",
    "TYPE_DISCONNECT",
    "TYPE_ERROR",
    "WRITE_ERROR_PREFIX",
]
