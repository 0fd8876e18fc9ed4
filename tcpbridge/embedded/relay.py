"""Embedded relay: the TCP bridge exposed to a local host through calls and events.

Connection state is owned by a single actor task. Public operations post a
typed request onto the command queue and await its future; reader and writer
tasks report terminal conditions back through the same queue. Nothing holds a
lock across network I/O.

Re-connecting while connected replaces the stored link without cancelling the
previous reader/writer pair, and `disconnect()` does not cancel the reader
either. Both stay tracked so `close()` releases them, and every link still
reports its own end to the host as `tcp-connection{connected: false}`.
"""

from __future__ import annotations

import weakref
import asyncio
import logging
from typing import Any
from collections.abc import Callable

from tcpbridge.relay import UpstreamLink, pump_upstream
from tcpbridge.errors import UpstreamIOError, NotConnectedError, SendQueueFullError
from tcpbridge.state.settings import EmbeddedSettings, UpstreamSettings
from tcpbridge.config.embedded import (
    EVENT_CONNECTION,
    RESULT_CONNECTED,
    RESULT_PACKET_SENT,
    RESULT_DISCONNECTED,
    EVENT_PACKET_RECEIVED,
    RELAY_CLOSED_MESSAGE,
    NOT_CONNECTED_MESSAGE,
    SEND_QUEUE_FULL_MESSAGE,
    CONNECTION_CLOSED_MESSAGE,
)

from .state import ConnectionState
from .events import EventSink, ConnectionEvent, PacketReceivedEvent
from .requests import LinkClosed, SendRequest, RelayRequest, ConnectRequest, DisconnectRequest

logger = logging.getLogger(__name__)

RequestBuilder = Callable[[asyncio.Future[Any]], RelayRequest]


class EmbeddedRelay:
    def __init__(
        self,
        sink: EventSink,
        *,
        upstream: UpstreamSettings,
        embedded: EmbeddedSettings,
    ) -> None:
        self._sink = sink
        self._upstream = upstream
        self._send_queue_max = max(0, int(embedded.send_queue_max))
        self._state = ConnectionState()
        self._commands: asyncio.Queue[RelayRequest] = asyncio.Queue()
        self._task: asyncio.Task | None = None
        self._link_tasks: set[asyncio.Task] = set()
        self._ended_links: weakref.WeakSet[UpstreamLink] = weakref.WeakSet()

    async def __aenter__(self) -> EmbeddedRelay:
        self.start()
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.close()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def link_task_count(self) -> int:
        return sum(1 for task in self._link_tasks if not task.done())

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def connect(self, host: str, port: int) -> str:
        return await self._submit(lambda fut: ConnectRequest(host=host, port=port, future=fut))

    async def send(self, data: bytes) -> str:
        return await self._submit(lambda fut: SendRequest(data=bytes(data), future=fut))

    async def disconnect(self) -> str:
        return await self._submit(lambda fut: DisconnectRequest(future=fut))

    def status(self) -> bool:
        return self._state.connected

    async def close(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        link_tasks = list(self._link_tasks)
        for link_task in link_tasks:
            link_task.cancel()
        await asyncio.gather(*link_tasks, return_exceptions=True)
        self._state = ConnectionState()

        while not self._commands.empty():
            self._abandon(self._commands.get_nowait())

    async def _submit(self, build: RequestBuilder) -> Any:
        if not self.running:
            raise RuntimeError("embedded relay is not running")
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._commands.put_nowait(build(future))
        return await future

    async def _run(self) -> None:
        while True:
            request = await self._commands.get()
            try:
                await self._handle(request)
            except asyncio.CancelledError:
                # The in-flight request is already off the queue; close() cannot reach it.
                self._abandon(request)
                raise
            except Exception as exc:
                future = getattr(request, "future", None)
                if future is not None and not future.done():
                    logger.info("embedded: %s failed: %s", type(request).__name__, exc)
                    future.set_exception(exc)
                else:
                    logger.exception("embedded: %s failed", type(request).__name__)

    async def _handle(self, request: RelayRequest) -> None:
        if isinstance(request, ConnectRequest):
            await self._handle_connect(request)
        elif isinstance(request, SendRequest):
            self._handle_send(request)
        elif isinstance(request, DisconnectRequest):
            self._handle_disconnect(request)
        elif isinstance(request, LinkClosed):
            self._handle_link_closed(request)

    async def _handle_connect(self, request: ConnectRequest) -> None:
        logger.info("embedded: connecting to %s:%s", request.host, request.port)
        # DialError propagates to the caller through the request future.
        link = await UpstreamLink.dial(
            request.host,
            request.port,
            timeout_s=self._upstream.dial_timeout_s,
            tcp_nodelay=self._upstream.tcp_nodelay,
        )

        previous = self._state.link
        if previous is not None:
            logger.warning(
                "embedded: connect while connected to %s; previous reader/writer left running",
                previous.address,
            )

        send_queue: asyncio.Queue[bytes | None] = asyncio.Queue()
        self._state = ConnectionState(link=link, send_queue=send_queue)
        logger.info("embedded: connected to %s", link.address)
        self._emit(EVENT_CONNECTION, ConnectionEvent(connected=True).to_payload())

        self._spawn(self._read_loop(link))
        self._spawn(self._write_loop(link, send_queue))
        self._resolve(request.future, RESULT_CONNECTED)

    def _handle_send(self, request: SendRequest) -> None:
        send_queue = self._state.send_queue
        if send_queue is None:
            raise NotConnectedError(NOT_CONNECTED_MESSAGE)
        # Bound checked here so the retire sentinel can always be queued.
        if self._send_queue_max and send_queue.qsize() >= self._send_queue_max:
            raise SendQueueFullError(SEND_QUEUE_FULL_MESSAGE, self._send_queue_max)
        send_queue.put_nowait(request.data)
        self._resolve(request.future, RESULT_PACKET_SENT)

    def _handle_disconnect(self, request: DisconnectRequest) -> None:
        self._retire_current()
        logger.info("embedded: disconnected")
        self._resolve(request.future, RESULT_DISCONNECTED)

    def _handle_link_closed(self, notice: LinkClosed) -> None:
        # Reader and writer may both report the same link.
        if notice.link in self._ended_links:
            return
        self._ended_links.add(notice.link)

        if self._state.link is notice.link:
            self._retire_current()
            logger.info("embedded: link %s ended: %s", notice.link.address, notice.reason)
        else:
            logger.info("embedded: superseded link %s ended: %s", notice.link.address, notice.reason)
        self._emit(EVENT_CONNECTION, ConnectionEvent(connected=False, error=notice.reason).to_payload())

    def _retire_current(self) -> None:
        send_queue = self._state.send_queue
        self._state = ConnectionState()
        if send_queue is not None:
            # Writer drains what was queued, then exits on the sentinel.
            send_queue.put_nowait(None)

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._link_tasks.add(task)
        task.add_done_callback(self._link_tasks.discard)

    async def _forward_packet(self, data: bytes) -> None:
        self._emit(EVENT_PACKET_RECEIVED, PacketReceivedEvent(data).to_payload())

    async def _read_loop(self, link: UpstreamLink) -> None:
        try:
            try:
                await pump_upstream(link, chunk_bytes=self._upstream.read_chunk_bytes, on_chunk=self._forward_packet)
            except UpstreamIOError as exc:
                reason = str(exc)
            else:
                reason = CONNECTION_CLOSED_MESSAGE
            self._commands.put_nowait(LinkClosed(link=link, reason=reason))
        finally:
            await link.close()

    async def _write_loop(self, link: UpstreamLink, send_queue: asyncio.Queue[bytes | None]) -> None:
        while True:
            data = await send_queue.get()
            if data is None:
                return
            try:
                await link.write(data)
            except UpstreamIOError as exc:
                logger.info("embedded: %s", exc)
                self._commands.put_nowait(LinkClosed(link=link, reason=str(exc)))
                await link.close()
                return

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        try:
            self._sink(name, payload)
        except Exception:
            logger.exception("embedded: host event sink failed for %s", name)

    @staticmethod
    def _abandon(request: RelayRequest) -> None:
        future = getattr(request, "future", None)
        if future is not None and not future.done():
            future.set_exception(RuntimeError(RELAY_CLOSED_MESSAGE))

    @staticmethod
    def _resolve(future: asyncio.Future[Any], result: Any) -> None:
        if not future.done():
            future.set_result(result)


__all__ = ["EmbeddedRelay"]
