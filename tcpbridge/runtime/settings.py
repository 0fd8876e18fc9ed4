"""Environment parsing for runtime settings.

Names and defaults live in `tcpbridge/config/*`; this module resolves them
into the structured dataclasses the rest of the bridge consumes.
"""

from __future__ import annotations

import os

from tcpbridge.config.embedded import ENV_EMBEDDED_SEND_QUEUE_MAX, DEFAULT_EMBEDDED_SEND_QUEUE_MAX
from tcpbridge.config.protocol import PORT_MAX, PORT_MIN
from tcpbridge.state.settings import (
    AppSettings,
    BridgeSettings,
    EmbeddedSettings,
    UpstreamSettings,
)
from tcpbridge.config.bridge import (
    ENV_BRIDGE_HOST,
    ENV_BRIDGE_PORT,
    DEFAULT_BRIDGE_HOST,
    DEFAULT_BRIDGE_PORT,
    ENV_OUTBOUND_QUEUE_MAX,
    DEFAULT_OUTBOUND_QUEUE_MAX,
    ENV_MAX_CONCURRENT_SESSIONS,
    DEFAULT_MAX_CONCURRENT_SESSIONS,
)
from tcpbridge.config.upstream import (
    ENV_UPSTREAM_TCP_NODELAY,
    ENV_UPSTREAM_DIAL_TIMEOUT_S,
    DEFAULT_UPSTREAM_TCP_NODELAY,
    ENV_UPSTREAM_READ_CHUNK_BYTES,
    DEFAULT_UPSTREAM_DIAL_TIMEOUT_S,
    DEFAULT_UPSTREAM_READ_CHUNK_BYTES,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _validate_port(port: int) -> int:
    if port < PORT_MIN or port > PORT_MAX:
        raise ValueError(f"{ENV_BRIDGE_PORT} must be between {PORT_MIN} and {PORT_MAX}")
    return port


def _load_bridge_settings() -> BridgeSettings:
    return BridgeSettings(
        host=_str_env(ENV_BRIDGE_HOST, DEFAULT_BRIDGE_HOST),
        port=_validate_port(_int_env(ENV_BRIDGE_PORT, DEFAULT_BRIDGE_PORT)),
        max_concurrent_sessions=max(0, _int_env(ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS)),
        outbound_queue_max=max(0, _int_env(ENV_OUTBOUND_QUEUE_MAX, DEFAULT_OUTBOUND_QUEUE_MAX)),
    )


def _load_upstream_settings() -> UpstreamSettings:
    chunk = _int_env(ENV_UPSTREAM_READ_CHUNK_BYTES, DEFAULT_UPSTREAM_READ_CHUNK_BYTES)
    if chunk <= 0:
        chunk = DEFAULT_UPSTREAM_READ_CHUNK_BYTES
    return UpstreamSettings(
        read_chunk_bytes=chunk,
        dial_timeout_s=max(0.0, _float_env(ENV_UPSTREAM_DIAL_TIMEOUT_S, DEFAULT_UPSTREAM_DIAL_TIMEOUT_S)),
        tcp_nodelay=_bool_env(ENV_UPSTREAM_TCP_NODELAY, DEFAULT_UPSTREAM_TCP_NODELAY),
    )


def _load_embedded_settings() -> EmbeddedSettings:
    return EmbeddedSettings(
        send_queue_max=max(0, _int_env(ENV_EMBEDDED_SEND_QUEUE_MAX, DEFAULT_EMBEDDED_SEND_QUEUE_MAX)),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        bridge=_load_bridge_settings(),
        upstream=_load_upstream_settings(),
        embedded=_load_embedded_settings(),
    )


__all__ = ["load_settings"]
