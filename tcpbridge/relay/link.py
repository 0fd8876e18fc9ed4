"""Outbound TCP connection split into a read half and a write half."""

from __future__ import annotations

import socket
import asyncio
import logging
import contextlib

from tcpbridge.errors import DialError, UpstreamIOError
from tcpbridge.config.protocol import DIAL_ERROR_PREFIX, WRITE_ERROR_PREFIX

logger = logging.getLogger(__name__)


class UpstreamLink:
    """A live upstream connection. Both halves are closed together."""

    def __init__(self, host: str, port: int, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.host = host
        self.port = port
        self.reader = reader
        self.writer = writer
        self._closed = False

    @classmethod
    async def dial(
        cls,
        host: str,
        port: int,
        *,
        timeout_s: float = 0.0,
        tcp_nodelay: bool = True,
    ) -> UpstreamLink:
        try:
            if timeout_s > 0:
                reader, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout_s)
            else:
                reader, writer = await asyncio.open_connection(host, port)
        except (asyncio.TimeoutError, OSError, ValueError) as exc:
            detail = str(exc) or f"timed out after {timeout_s:g}s"
            raise DialError(host, port, f"{DIAL_ERROR_PREFIX}: {detail}") from exc

        if tcp_nodelay:
            sock = writer.get_extra_info("socket")
            if sock is not None:
                with contextlib.suppress(OSError):
                    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        return cls(host, port, reader, writer)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> None:
        """Write and flush immediately so small latency-sensitive payloads are not held back."""
        try:
            self.writer.write(data)
            await self.writer.drain()
        except (OSError, RuntimeError) as exc:
            raise UpstreamIOError(f"{WRITE_ERROR_PREFIX}: {exc}") from exc

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (OSError, RuntimeError):
            logger.debug("upstream %s: error while closing", self.address, exc_info=True)


__all__ = ["UpstreamLink"]
