"""Upstream TCP link configuration (env-resolved constants only)."""

from __future__ import annotations

ENV_UPSTREAM_READ_CHUNK_BYTES = "UPSTREAM_READ_CHUNK_BYTES"
ENV_UPSTREAM_DIAL_TIMEOUT_S = "UPSTREAM_DIAL_TIMEOUT_S"
ENV_UPSTREAM_TCP_NODELAY = "UPSTREAM_TCP_NODELAY"

# One upstream read becomes one binary frame, so this also caps frame size.
DEFAULT_UPSTREAM_READ_CHUNK_BYTES = 8192
# 0 disables the timeout and waits for the OS connect timeout.
DEFAULT_UPSTREAM_DIAL_TIMEOUT_S = 10.0
DEFAULT_UPSTREAM_TCP_NODELAY = True

__all__ = [
    "DEFAULT_UPSTREAM_DIAL_TIMEOUT_S",
    "DEFAULT_UPSTREAM_READ_CHUNK_BYTES",
    "DEFAULT_UPSTREAM_TCP_NODELAY",
    "ENV_UPSTREAM_DIAL_TIMEOUT_S",
    "ENV_UPSTREAM_READ_CHUNK_BYTES",
    "ENV_UPSTREAM_TCP_NODELAY",
]
