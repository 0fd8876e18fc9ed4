"""WebSocket session admission and bookkeeping."""

from __future__ import annotations

import asyncio
from typing import Any


class ConnectionManager:
    """Track active bridge sessions. A cap of 0 admits every peer."""

    def __init__(self, *, max_connections: int = 0) -> None:
        self._max = max(0, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: set[int] = set()

    async def connect(self, ws: Any) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        key = id(ws)
        async with self._lock:
            if self._max and len(self._active) >= self._max:
                return False
            self._active.add(key)
            return True

    async def disconnect(self, ws: Any) -> None:
        key = id(ws)
        async with self._lock:
            self._active.discard(key)

    def get_connection_count(self) -> int:
        return len(self._active)


__all__ = ["ConnectionManager"]
