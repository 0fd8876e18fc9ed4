"""Per-client relay session: one WebSocket against at most one upstream link."""

from __future__ import annotations

import asyncio
import logging

from tcpbridge.state.session import SessionState
from tcpbridge.state.settings import UpstreamSettings
from tcpbridge.errors import DialError, ProtocolError, UpstreamIOError
from tcpbridge.protocol import (
    Command,
    ErrorEvent,
    ConnectResult,
    ConnectCommand,
    DisconnectNotice,
    DisconnectCommand,
    parse_command,
)
from tcpbridge.config.protocol import (
    MESSAGE_NOT_CONNECTED,
    MESSAGE_INVALID_COMMAND,
    REASON_CLIENT_REQUESTED,
    REASON_CONNECTION_CLOSED,
)

from .link import UpstreamLink
from .reader import pump_upstream
from .sink import OutboundSink
from .outbound import OutboundItem

logger = logging.getLogger(__name__)


class RelaySession:
    """State machine coordinating control frames, payload frames and one upstream link.

    Only the message loop calls `handle_text`, `handle_command`, `send_payload`
    and `close`; the reader task touches session state solely to retire its own
    link. At most one reader task is alive at any instant: every path that
    installs a new link first cancels and awaits the previous reader.
    """

    def __init__(self, outbound: OutboundSink, *, upstream: UpstreamSettings, label: str = "-") -> None:
        self._outbound = outbound
        self._upstream = upstream
        self._label = label
        self._state = SessionState.IDLE
        self._link: UpstreamLink | None = None
        self._reader_task: asyncio.Task | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def link(self) -> UpstreamLink | None:
        return self._link

    @property
    def reader_task(self) -> asyncio.Task | None:
        return self._reader_task

    async def _emit(self, item: OutboundItem) -> None:
        await self._outbound.put(item)

    async def handle_text(self, raw: str) -> None:
        try:
            command = parse_command(raw)
        except ProtocolError as exc:
            logger.info("session %s: rejected control frame: %s", self._label, exc)
            await self._emit(ErrorEvent(MESSAGE_INVALID_COMMAND))
            return
        await self.handle_command(command)

    async def handle_command(self, command: Command) -> None:
        if isinstance(command, ConnectCommand):
            await self.connect(command.host, command.port)
        elif isinstance(command, DisconnectCommand):
            await self.disconnect()

    async def connect(self, host: str, port: int) -> None:
        await self._teardown()
        self._state = SessionState.CONNECTING
        logger.info("session %s: connecting to %s:%s", self._label, host, port)

        try:
            link = await UpstreamLink.dial(
                host,
                port,
                timeout_s=self._upstream.dial_timeout_s,
                tcp_nodelay=self._upstream.tcp_nodelay,
            )
        except DialError as exc:
            self._state = SessionState.IDLE
            logger.info("session %s: %s", self._label, exc)
            await self._emit(ConnectResult(ok=False, error=str(exc)))
            return

        self._link = link
        self._state = SessionState.CONNECTED
        logger.info("session %s: connected to %s", self._label, link.address)
        # Acknowledge before the reader can forward anything from the new link.
        await self._emit(ConnectResult(ok=True))
        self._reader_task = asyncio.create_task(self._read_loop(link))

    async def disconnect(self) -> None:
        await self._teardown()
        await self._emit(DisconnectNotice(reason=REASON_CLIENT_REQUESTED))

    async def send_payload(self, data: bytes) -> None:
        link = self._link
        if link is None or self._state is not SessionState.CONNECTED:
            await self._emit(ErrorEvent(MESSAGE_NOT_CONNECTED))
            return

        try:
            await link.write(data)
        except UpstreamIOError as exc:
            if self._link is not link:
                # The reader already retired this link and reported it.
                return
            logger.info("session %s: %s", self._label, exc)
            await self._teardown()
            await self._emit(DisconnectNotice(reason=str(exc)))

    async def close(self) -> None:
        """End the session: stop the reader and release the upstream link."""
        await self._teardown()

    async def _read_loop(self, link: UpstreamLink) -> None:
        try:
            try:
                await pump_upstream(link, chunk_bytes=self._upstream.read_chunk_bytes, on_chunk=self._emit)
            except UpstreamIOError as exc:
                reason = str(exc)
            else:
                reason = REASON_CONNECTION_CLOSED

            if self._link is not link:
                return
            self._link = None
            self._state = SessionState.IDLE
            logger.info("session %s: upstream %s ended: %s", self._label, link.address, reason)
            await self._emit(DisconnectNotice(reason=reason))
        finally:
            await link.close()

    async def _teardown(self) -> None:
        task, self._reader_task = self._reader_task, None
        link, self._link = self._link, None
        self._state = SessionState.IDLE

        if task is not None and not task.done():
            task.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("session %s: upstream reader failed", self._label)
        if link is not None:
            await link.close()
            logger.info("session %s: upstream %s closed", self._label, link.address)


__all__ = ["RelaySession"]
