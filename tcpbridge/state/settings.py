"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BridgeSettings:
    host: str
    port: int
    max_concurrent_sessions: int
    outbound_queue_max: int


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    read_chunk_bytes: int
    dial_timeout_s: float
    tcp_nodelay: bool


@dataclass(frozen=True, slots=True)
class EmbeddedSettings:
    send_queue_max: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    bridge: BridgeSettings
    upstream: UpstreamSettings
    embedded: EmbeddedSettings


__all__ = [
    "AppSettings",
    "BridgeSettings",
    "EmbeddedSettings",
    "UpstreamSettings",
]
