"""Embedded relay configuration: host command names, event names and queue bounds."""

from __future__ import annotations

ENV_EMBEDDED_SEND_QUEUE_MAX = "EMBEDDED_SEND_QUEUE_MAX"

# send() fails fast instead of blocking when the queue is full. 0 means unbounded.
DEFAULT_EMBEDDED_SEND_QUEUE_MAX = 1024

# Host events
EVENT_CONNECTION = "tcp-connection"
EVENT_PACKET_RECEIVED = "tcp-packet-received"

# Host commands
COMMAND_CONNECT = "tcp_connect"
COMMAND_SEND = "tcp_send"
COMMAND_DISCONNECT = "tcp_disconnect"
COMMAND_IS_CONNECTED = "tcp_is_connected"

# Host responses
RESULT_CONNECTED = "Connected successfully"
RESULT_PACKET_SENT = "Packet sent"
RESULT_DISCONNECTED = "Disconnected"

NOT_CONNECTED_MESSAGE = "Not connected"
SEND_QUEUE_FULL_MESSAGE = "Send queue full"
CONNECTION_CLOSED_MESSAGE = "Connection closed"
RELAY_CLOSED_MESSAGE = "embedded relay closed"

__all__ = [
    "COMMAND_CONNECT",
    "COMMAND_DISCONNECT",
    "COMMAND_IS_CONNECTED",
    "COMMAND_SEND",
    "CONNECTION_CLOSED_MESSAGE",
    "DEFAULT_EMBEDDED_SEND_QUEUE_MAX",
    "ENV_EMBEDDED_SEND_QUEUE_MAX",
    "EVENT_CONNECTION",
    "EVENT_PACKET_RECEIVED",
    "NOT_CONNECTED_MESSAGE",
    "RESULT_CONNECTED",
    "RESULT_DISCONNECTED",
    "RELAY_CLOSED_MESSAGE",
    "RESULT_PACKET_SENT",
    "SEND_QUEUE_FULL_MESSAGE",
]
