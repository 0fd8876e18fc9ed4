"""Outbound control events (closed set).

Upstream payload never takes one of these shapes; it travels as raw bytes.
"""

from __future__ import annotations

from typing import Union
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConnectResult:
    ok: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class DisconnectNotice:
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    message: str


Event = Union[ConnectResult, DisconnectNotice, ErrorEvent]

__all__ = ["ConnectResult", "DisconnectNotice", "ErrorEvent", "Event"]
