"""Decode control commands from text frames and encode events back to text."""

from __future__ import annotations

from typing import Any

import orjson

from tcpbridge.errors import ProtocolError
from tcpbridge.config.protocol import (
    KEY_OK,
    KEY_HOST,
    KEY_PORT,
    KEY_TYPE,
    PORT_MAX,
    PORT_MIN,
    KEY_ERROR,
    KEY_REASON,
    TYPE_ERROR,
    KEY_MESSAGE,
    TYPE_CONNECT,
    TYPE_DISCONNECT,
)

from .commands import Command, ConnectCommand, DisconnectCommand
from .events import Event, ErrorEvent, ConnectResult, DisconnectNotice


def _parse_connect(msg: dict[str, Any]) -> ConnectCommand:
    host = msg.get(KEY_HOST)
    if not isinstance(host, str) or not host.strip():
        raise ProtocolError("connect missing non-empty 'host'")

    port = msg.get(KEY_PORT)
    # bool is an int subclass; `true` is not a port.
    if isinstance(port, bool) or not isinstance(port, int):
        raise ProtocolError("connect 'port' must be an integer")
    if port < PORT_MIN or port > PORT_MAX:
        raise ProtocolError(f"connect 'port' must be between {PORT_MIN} and {PORT_MAX}")

    return ConnectCommand(host=host.strip(), port=port)


def parse_command(raw: str | bytes) -> Command:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ProtocolError("command must be a JSON object")

    msg_type = msg.get(KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ProtocolError("command missing non-empty 'type'")

    msg_type = msg_type.strip()
    if msg_type == TYPE_CONNECT:
        return _parse_connect(msg)
    if msg_type == TYPE_DISCONNECT:
        return DisconnectCommand()
    raise ProtocolError(f"command type '{msg_type}' is not supported")


def event_to_dict(event: Event) -> dict[str, Any]:
    if isinstance(event, ConnectResult):
        return {KEY_TYPE: TYPE_CONNECT, KEY_OK: event.ok, KEY_ERROR: event.error}
    if isinstance(event, DisconnectNotice):
        return {KEY_TYPE: TYPE_DISCONNECT, KEY_REASON: event.reason}
    if isinstance(event, ErrorEvent):
        return {KEY_TYPE: TYPE_ERROR, KEY_MESSAGE: event.message}
    raise TypeError(f"unsupported event: {event!r}")


def encode_event(event: Event) -> str:
    return orjson.dumps(event_to_dict(event)).decode("utf-8")


__all__ = ["encode_event", "event_to_dict", "parse_command"]
