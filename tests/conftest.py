from __future__ import annotations

import sys
import socket
import asyncio
from pathlib import Path

import pytest
import pytest_asyncio

from tcpbridge.state.settings import EmbeddedSettings, UpstreamSettings


def pytest_configure() -> None:
    # Keep `import tcpbridge...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


async def _echo(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    try:
        while True:
            data = await reader.read(4096)
            if not data:
                break
            writer.write(data)
            await writer.drain()
    except ConnectionError:
        pass
    finally:
        writer.close()


async def _close_immediately(_reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    writer.close()


class LoopbackUpstream:
    """A loopback TCP server that tracks its connections so teardown can drop them."""

    def __init__(self, handler) -> None:
        self._handler = handler
        self._writers: set[asyncio.StreamWriter] = set()
        self._server: asyncio.AbstractServer | None = None
        self.port = 0

    async def _track(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._writers.add(writer)
        try:
            await self._handler(reader, writer)
        finally:
            self._writers.discard(writer)

    async def start(self) -> int:
        self._server = await asyncio.start_server(self._track, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]
        return self.port

    async def stop(self) -> None:
        for writer in list(self._writers):
            writer.close()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()


@pytest.fixture
def upstream_settings() -> UpstreamSettings:
    return UpstreamSettings(read_chunk_bytes=8192, dial_timeout_s=2.0, tcp_nodelay=True)


@pytest.fixture
def embedded_settings() -> EmbeddedSettings:
    return EmbeddedSettings(send_queue_max=1024)


@pytest_asyncio.fixture
async def echo_port():
    upstream = LoopbackUpstream(_echo)
    try:
        yield await upstream.start()
    finally:
        await upstream.stop()


@pytest_asyncio.fixture
async def closing_port():
    """An upstream that accepts and immediately closes every connection."""
    upstream = LoopbackUpstream(_close_immediately)
    try:
        yield await upstream.start()
    finally:
        await upstream.stop()


@pytest.fixture
def refused_port() -> int:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
