from __future__ import annotations

from types import SimpleNamespace

import pytest

from tcpbridge.errors import DialError, UpstreamIOError
from tcpbridge.relay import UpstreamLink, pump_upstream


class _ScriptedReader:
    def __init__(self, *chunks) -> None:
        self._chunks = list(chunks)

    async def read(self, _n: int) -> bytes:
        item = self._chunks.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.mark.asyncio
async def test_dial_refused_raises_dial_error(refused_port) -> None:
    with pytest.raises(DialError) as exc:
        await UpstreamLink.dial("127.0.0.1", refused_port, timeout_s=2.0)
    assert exc.value.host == "127.0.0.1"
    assert exc.value.port == refused_port
    assert str(exc.value).startswith("Failed to connect: ")


@pytest.mark.asyncio
async def test_link_write_and_idempotent_close(echo_port) -> None:
    link = await UpstreamLink.dial("127.0.0.1", echo_port, timeout_s=2.0)
    assert link.address == f"127.0.0.1:{echo_port}"

    await link.write(b"abc")
    assert await link.reader.readexactly(3) == b"abc"

    await link.close()
    await link.close()
    assert link.closed


@pytest.mark.asyncio
async def test_pump_forwards_chunks_until_eof() -> None:
    seen: list[bytes] = []

    async def on_chunk(data: bytes) -> None:
        seen.append(data)

    link = SimpleNamespace(reader=_ScriptedReader(b"one", b"two", b""))
    await pump_upstream(link, chunk_bytes=16, on_chunk=on_chunk)

    assert seen == [b"one", b"two"]


@pytest.mark.asyncio
async def test_pump_wraps_read_failure() -> None:
    seen: list[bytes] = []

    async def on_chunk(data: bytes) -> None:
        seen.append(data)

    link = SimpleNamespace(reader=_ScriptedReader(b"one", ConnectionResetError("peer reset")))
    with pytest.raises(UpstreamIOError) as exc:
        await pump_upstream(link, chunk_bytes=16, on_chunk=on_chunk)

    assert str(exc.value) == "Read error: peer reset"
    assert seen == [b"one"]
