"""Logging initialization."""

from __future__ import annotations

import logging

from tcpbridge.config.logging import LOG_LEVEL, LOG_FORMAT, SHOW_ACCESS_LOGS


def configure_logging() -> None:
    # Per-handshake access lines drown the relay logs. Keep them quiet unless explicitly enabled.
    if not SHOW_ACCESS_LOGS:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
