"""Inbound frame loop for one bridge session."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocketDisconnect

from tcpbridge.relay import RelaySession

logger = logging.getLogger(__name__)

WS_RECEIVE = "websocket.receive"
WS_DISCONNECT = "websocket.disconnect"


async def run_message_loop(ws: Any, session: RelaySession) -> None:
    """Feed frames to the session until the client closes the channel.

    Binary frames are opaque payload for the upstream link; text frames are
    control commands. Frames are handled one at a time, in arrival order.
    """
    try:
        while True:
            message = await ws.receive()
            msg_type = message.get("type")
            if msg_type == WS_DISCONNECT:
                return
            if msg_type != WS_RECEIVE:
                continue

            data = message.get("bytes")
            if data is not None:
                await session.send_payload(data)
                continue

            text = message.get("text")
            if text is not None:
                await session.handle_text(text)
    except WebSocketDisconnect:
        return


__all__ = ["run_message_loop"]
