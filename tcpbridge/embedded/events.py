"""Host-facing event payloads emitted by the embedded relay."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass
from collections.abc import Callable

# Fire-and-forget: (event name, JSON-friendly payload).
EventSink = Callable[[str, dict[str, Any]], None]


@dataclass(frozen=True, slots=True)
class ConnectionEvent:
    connected: bool
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"connected": self.connected, "error": self.error}


@dataclass(frozen=True, slots=True)
class PacketReceivedEvent:
    data: bytes

    def to_payload(self) -> dict[str, Any]:
        # Hosts receive a plain byte array, not a bytes object.
        return {"data": list(self.data)}


__all__ = ["ConnectionEvent", "EventSink", "PacketReceivedEvent"]
