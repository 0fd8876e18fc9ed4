"""Runtime dependency construction (settings, session admission, embedded relay)."""

from __future__ import annotations

import logging

from tcpbridge.state import RuntimeDeps
from tcpbridge.state.settings import AppSettings
from tcpbridge.embedded import EventSink, EmbeddedRelay
from tcpbridge.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    connections = ConnectionManager(max_connections=settings.bridge.max_concurrent_sessions)
    logger.info(
        "runtime: session cap=%s outbound queue=%s read chunk=%s dial timeout=%ss",
        settings.bridge.max_concurrent_sessions or "unlimited",
        settings.bridge.outbound_queue_max or "unbounded",
        settings.upstream.read_chunk_bytes,
        settings.upstream.dial_timeout_s,
    )
    return RuntimeDeps(connections=connections, settings=settings)


def build_embedded_relay(sink: EventSink, settings: AppSettings | None = None) -> EmbeddedRelay:
    """Wire an embedded relay for a local host. Call `start()` (or use `async with`) on a running loop."""
    settings = settings or load_settings()
    return EmbeddedRelay(sink, upstream=settings.upstream, embedded=settings.embedded)


__all__ = ["RuntimeDeps", "build_embedded_relay", "build_runtime_deps"]
