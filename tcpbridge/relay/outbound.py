"""Single-writer outbound queue for one WebSocket."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any, Union

from tcpbridge.protocol import Event, encode_event

logger = logging.getLogger(__name__)

OutboundItem = Union[Event, bytes]


class OutboundSerializer:
    """Drain queued events and payloads onto the socket one at a time.

    Producers only ever `put`; this task is the sole writer, so frames never
    interleave and per-session order is the queue order. A failed write stops
    the serializer for good.
    """

    def __init__(self, ws: Any, *, maxsize: int = 0, label: str = "-") -> None:
        self._ws = ws
        self._label = label
        self._queue: asyncio.Queue[OutboundItem] = asyncio.Queue(maxsize=max(0, int(maxsize)))
        self._task: asyncio.Task | None = None
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def put(self, item: OutboundItem) -> None:
        if self._stopped:
            logger.debug("session %s: outbound stopped; dropping %s", self._label, type(item).__name__)
            return
        await self._queue.put(item)

    async def _send(self, item: OutboundItem) -> None:
        if isinstance(item, bytes):
            await self._ws.send_bytes(item)
        else:
            await self._ws.send_text(encode_event(item))

    async def _run(self) -> None:
        try:
            while True:
                item = await self._queue.get()
                try:
                    await self._send(item)
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.info("session %s: outbound write failed; stopping", self._label, exc_info=True)
                    return
        finally:
            self._stopped = True
            self._release_producers()

    def _release_producers(self) -> None:
        # Emptying the queue wakes any producer parked on a full queue.
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return

    async def stop(self) -> None:
        self._stopped = True
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None


__all__ = ["OutboundItem", "OutboundSerializer"]
