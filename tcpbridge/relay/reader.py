"""Upstream read pump shared by the bridge session and the embedded relay."""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from tcpbridge.errors import UpstreamIOError
from tcpbridge.config.protocol import READ_ERROR_PREFIX

from .link import UpstreamLink

ChunkFn = Callable[[bytes], Awaitable[None]]


async def pump_upstream(link: UpstreamLink, *, chunk_bytes: int, on_chunk: ChunkFn) -> None:
    """Forward upstream reads to `on_chunk` until end-of-stream.

    Returns normally on EOF. Raises UpstreamIOError on a read failure.
    Cancellation lands on the read call; the caller owns closing the link.
    """
    while True:
        try:
            data = await link.reader.read(chunk_bytes)
        except OSError as exc:
            raise UpstreamIOError(f"{READ_ERROR_PREFIX}: {exc}") from exc
        if not data:
            return
        await on_chunk(data)


__all__ = ["ChunkFn", "pump_upstream"]
