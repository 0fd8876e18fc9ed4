"""Lifecycle states of a bridge session."""

from __future__ import annotations

import enum


class SessionState(enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"


__all__ = ["SessionState"]
