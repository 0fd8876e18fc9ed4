"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from fastapi import WebSocket

from tcpbridge.errors import AcceptError
from tcpbridge.state import RuntimeDeps
from tcpbridge.relay import RelaySession, OutboundSerializer
from tcpbridge.config.bridge import WS_CLOSE_AT_CAPACITY_REASON, WS_CLOSE_TRY_AGAIN_LATER_CODE

from .errors import reject_connection
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


def _peer_label(ws: WebSocket) -> str:
    client = getattr(ws, "client", None)
    if client is None:
        return f"ws-{id(ws):x}"
    return f"{client.host}:{client.port}"


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    if not await runtime_deps.connections.connect(ws):
        await reject_connection(
            ws,
            message=WS_CLOSE_AT_CAPACITY_REASON,
            close_code=WS_CLOSE_TRY_AGAIN_LATER_CODE,
        )
        raise AcceptError(WS_CLOSE_AT_CAPACITY_REASON)

    try:
        await ws.accept()
    except Exception as exc:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(ws)
        raise AcceptError(f"websocket accept failed: {exc}") from exc


async def _run_session(ws: WebSocket, runtime_deps: RuntimeDeps, label: str) -> None:
    settings = runtime_deps.settings
    outbound = OutboundSerializer(ws, maxsize=settings.bridge.outbound_queue_max, label=label)
    session = RelaySession(outbound, upstream=settings.upstream, label=label)

    outbound_task = outbound.start()
    loop_task = asyncio.create_task(run_message_loop(ws, session))
    try:
        # A dead outbound writer means the channel is gone even if no close frame arrived.
        await asyncio.wait({loop_task, outbound_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if not loop_task.done():
            loop_task.cancel()
        try:
            await loop_task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("session %s: message loop failed", label)
        await session.close()
        await outbound.stop()


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    label = _peer_label(ws)
    try:
        await _prepare_connection(ws, runtime_deps)
    except AcceptError as exc:
        logger.warning("WebSocket peer %s not accepted: %s", label, exc)
        return

    logger.info("WebSocket session %s accepted. Active: %s", label, runtime_deps.connections.get_connection_count())
    try:
        await _run_session(ws, runtime_deps, label)
    finally:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(ws)
        logger.info(
            "WebSocket session %s closed. Active: %s",
            label,
            runtime_deps.connections.get_connection_count(),
        )


__all__ = ["handle_websocket_connection"]
