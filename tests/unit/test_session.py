from __future__ import annotations

import asyncio

import pytest
from fakes import RecordingOutbound

from tcpbridge.errors import UpstreamIOError
from tcpbridge.state import SessionState
from tcpbridge.relay import RelaySession, UpstreamLink
from tcpbridge.protocol import ErrorEvent, ConnectResult, DisconnectNotice


def _connect_frame(port: int, host: str = "127.0.0.1") -> str:
    return f'{{"type":"connect","host":"{host}","port":{port}}}'


@pytest.mark.asyncio
async def test_connect_echo_and_client_disconnect(upstream_settings, echo_port) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)

    await session.handle_text(_connect_frame(echo_port))
    assert outbound.items == [ConnectResult(ok=True)]
    assert session.state is SessionState.CONNECTED

    await session.send_payload(b"ping")
    await outbound.wait_for(lambda _items: outbound.payload() == b"ping")

    await session.handle_text('{"type":"disconnect"}')
    assert outbound.items[-1] == DisconnectNotice(reason="client requested")
    assert session.state is SessionState.IDLE
    assert session.link is None
    assert session.reader_task is None


@pytest.mark.asyncio
async def test_payload_while_idle_reports_not_connected(upstream_settings) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)

    await session.send_payload(b"hello")

    assert outbound.items == [ErrorEvent("not connected")]
    assert session.state is SessionState.IDLE


@pytest.mark.asyncio
async def test_disconnect_while_idle_still_acknowledges(upstream_settings) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)

    await session.handle_text('{"type":"disconnect"}')

    assert outbound.items == [DisconnectNotice(reason="client requested")]


@pytest.mark.asyncio
async def test_malformed_control_frame_leaves_state_unchanged(upstream_settings, echo_port) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)
    await session.connect("127.0.0.1", echo_port)
    link = session.link

    await session.handle_text("{nope")
    await session.handle_text('{"type":"launch"}')

    assert outbound.events()[-2:] == [ErrorEvent("invalid command"), ErrorEvent("invalid command")]
    assert session.state is SessionState.CONNECTED
    assert session.link is link
    await session.close()


@pytest.mark.asyncio
async def test_dial_failure_then_successful_connect(upstream_settings, refused_port, echo_port) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)

    await session.connect("127.0.0.1", refused_port)
    failed = outbound.items[-1]
    assert isinstance(failed, ConnectResult)
    assert failed.ok is False
    assert failed.error.startswith("Failed to connect")
    assert session.state is SessionState.IDLE

    await session.connect("127.0.0.1", echo_port)
    assert outbound.items[-1] == ConnectResult(ok=True)
    assert session.state is SessionState.CONNECTED
    await session.close()


@pytest.mark.asyncio
async def test_upstream_eof_reports_one_disconnect(upstream_settings, closing_port) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)

    await session.connect("127.0.0.1", closing_port)
    await outbound.wait_for(lambda items: any(isinstance(i, DisconnectNotice) for i in items))

    notices = [i for i in outbound.items if isinstance(i, DisconnectNotice)]
    assert notices == [DisconnectNotice(reason="connection closed")]
    assert session.state is SessionState.IDLE

    await session.send_payload(b"late")
    assert outbound.items[-1] == ErrorEvent("not connected")
    await session.close()
    assert [i for i in outbound.items if isinstance(i, DisconnectNotice)] == notices


@pytest.mark.asyncio
async def test_reconnect_replaces_reader_and_drops_old_stream(upstream_settings, echo_port) -> None:
    chatter_stop = asyncio.Event()

    async def chatty(_reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            while not chatter_stop.is_set():
                writer.write(b"A")
                await writer.drain()
                await asyncio.sleep(0.005)
        except ConnectionError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(chatty, "127.0.0.1", 0)
    chatty_port = server.sockets[0].getsockname()[1]
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)
    try:
        await session.connect("127.0.0.1", chatty_port)
        await outbound.wait_for(lambda _items: b"A" in outbound.payload())
        first_reader = session.reader_task

        await session.connect("127.0.0.1", echo_port)
        assert first_reader is not None and first_reader.done()
        assert session.reader_task is not first_reader
        marker = len(outbound.items)
        assert outbound.items[marker - 1] == ConnectResult(ok=True)

        await session.send_payload(b"B")
        await outbound.wait_for(lambda items: b"B" in b"".join(i for i in items[marker:] if isinstance(i, bytes)))
        after = b"".join(i for i in outbound.items[marker:] if isinstance(i, bytes))
        assert after == b"B"
        # The replaced link is retired silently.
        assert not any(isinstance(i, DisconnectNotice) for i in outbound.items)
    finally:
        chatter_stop.set()
        await session.close()
        server.close()
        await server.wait_closed()


@pytest.mark.asyncio
async def test_write_failure_tears_down_link(upstream_settings, echo_port, monkeypatch) -> None:
    async def broken_write(self, data: bytes) -> None:
        raise UpstreamIOError("Write error: broken pipe")

    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)
    await session.connect("127.0.0.1", echo_port)
    reader = session.reader_task

    monkeypatch.setattr(UpstreamLink, "write", broken_write)
    await session.send_payload(b"x")

    assert outbound.items[-1] == DisconnectNotice(reason="Write error: broken pipe")
    assert session.state is SessionState.IDLE
    assert reader is not None and reader.done()


@pytest.mark.asyncio
async def test_close_cancels_reader(upstream_settings, echo_port) -> None:
    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)
    await session.connect("127.0.0.1", echo_port)
    reader = session.reader_task
    link = session.link

    await session.close()

    assert reader is not None and reader.done()
    assert link is not None and link.closed
    assert outbound.items == [ConnectResult(ok=True)]


@pytest.mark.asyncio
async def test_upstream_read_error_reports_one_disconnect(upstream_settings, echo_port, monkeypatch) -> None:
    async def failing_read(_n: int = -1) -> bytes:
        raise ConnectionResetError("peer reset")

    outbound = RecordingOutbound()
    session = RelaySession(outbound, upstream=upstream_settings)
    await session.connect("127.0.0.1", echo_port)
    # The reader task has been created but not yet run.
    monkeypatch.setattr(session.link.reader, "read", failing_read)

    await outbound.wait_for(lambda items: any(isinstance(i, DisconnectNotice) for i in items))

    notices = [i for i in outbound.items if isinstance(i, DisconnectNotice)]
    assert len(notices) == 1
    assert notices[0].reason.startswith("Read error:")
    assert session.link is None
    assert session.state is SessionState.IDLE

    await session.send_payload(b"late")
    assert outbound.items[-1] == ErrorEvent("not connected")
    await session.close()
