"""Admission failure helpers for the bridge WebSocket."""

from __future__ import annotations

import logging
from typing import Any

from tcpbridge.protocol import ErrorEvent, encode_event

logger = logging.getLogger(__name__)


async def safe_send_text(ws: Any, text: str) -> bool:
    try:
        await ws.send_text(text)
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def reject_connection(ws: Any, *, message: str, close_code: int) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        # If accept fails, nothing else to do.
        return
    await safe_send_text(ws, encode_event(ErrorEvent(message)))
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = ["reject_connection", "safe_send_text"]
