"""Host command dispatch: maps named host calls onto the embedded relay."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable, Awaitable

from tcpbridge.config.protocol import PORT_MAX, PORT_MIN
from tcpbridge.errors import DialError, ProtocolError, NotConnectedError, SendQueueFullError
from tcpbridge.config.embedded import (
    COMMAND_SEND,
    COMMAND_CONNECT,
    COMMAND_DISCONNECT,
    COMMAND_IS_CONNECTED,
)

from .relay import EmbeddedRelay

logger = logging.getLogger(__name__)

HandlerFn = Callable[[EmbeddedRelay, dict[str, Any]], Awaitable[Any]]

HOST_ERRORS = (DialError, ProtocolError, NotConnectedError, SendQueueFullError)


def _params(payload: dict[str, Any]) -> dict[str, Any]:
    # Hosts wrap arguments as {"params": {...}}; bare dicts are accepted too.
    params = payload.get("params", payload)
    if not isinstance(params, dict):
        raise ProtocolError("'params' must be an object")
    return params


def _parse_port(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError("'port' must be an integer")
    if value < PORT_MIN or value > PORT_MAX:
        raise ProtocolError(f"'port' must be between {PORT_MIN} and {PORT_MAX}")
    return value


def _parse_data(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, list):
        try:
            return bytes(value)
        except (TypeError, ValueError) as exc:
            raise ProtocolError(f"'data' must be a list of byte values: {exc}") from exc
    raise ProtocolError("'data' must be bytes or a list of byte values")


async def _handle_connect(relay: EmbeddedRelay, payload: dict[str, Any]) -> str:
    params = _params(payload)
    host = params.get("host")
    if not isinstance(host, str) or not host.strip():
        raise ProtocolError("'host' must be a non-empty string")
    return await relay.connect(host.strip(), _parse_port(params.get("port")))


async def _handle_send(relay: EmbeddedRelay, payload: dict[str, Any]) -> str:
    return await relay.send(_parse_data(_params(payload).get("data")))


async def _handle_disconnect(relay: EmbeddedRelay, _payload: dict[str, Any]) -> str:
    return await relay.disconnect()


async def _handle_is_connected(relay: EmbeddedRelay, _payload: dict[str, Any]) -> bool:
    return relay.status()


HANDLERS: dict[str, HandlerFn] = {
    COMMAND_CONNECT: _handle_connect,
    COMMAND_SEND: _handle_send,
    COMMAND_DISCONNECT: _handle_disconnect,
    COMMAND_IS_CONNECTED: _handle_is_connected,
}


class HostCommandDispatcher:
    """Resolve a host call to `{"ok": True, "result": ...}` or `{"ok": False, "error": ...}`."""

    def __init__(self, relay: EmbeddedRelay) -> None:
        self._relay = relay

    async def dispatch(self, name: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        handler = HANDLERS.get(name)
        try:
            if handler is None:
                raise ProtocolError(f"command '{name}' is not supported")
            result = await handler(self._relay, payload or {})
        except HOST_ERRORS as exc:
            logger.info("host command %s failed: %s", name, exc)
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "result": result}


__all__ = ["HANDLERS", "HostCommandDispatcher"]
