"""WebSocket bridge listener configuration (env-resolved constants only)."""

from __future__ import annotations

ENV_BRIDGE_HOST = "BRIDGE_HOST"
ENV_BRIDGE_PORT = "BRIDGE_PORT"
ENV_MAX_CONCURRENT_SESSIONS = "MAX_CONCURRENT_SESSIONS"
ENV_OUTBOUND_QUEUE_MAX = "OUTBOUND_QUEUE_MAX"

DEFAULT_BRIDGE_HOST = "127.0.0.1"
DEFAULT_BRIDGE_PORT = 17899
# 0 disables the cap.
DEFAULT_MAX_CONCURRENT_SESSIONS = 0
# Producers await a full queue, so a stalled client back-pressures upstream reads.
DEFAULT_OUTBOUND_QUEUE_MAX = 1024

WS_ENDPOINT_PATH = "/"

# Close codes
WS_CLOSE_TRY_AGAIN_LATER_CODE = 1013

WS_CLOSE_AT_CAPACITY_REASON = "bridge at capacity"

__all__ = [
    "DEFAULT_BRIDGE_HOST",
    "DEFAULT_BRIDGE_PORT",
    "DEFAULT_MAX_CONCURRENT_SESSIONS",
    "DEFAULT_OUTBOUND_QUEUE_MAX",
    "ENV_BRIDGE_HOST",
    "ENV_BRIDGE_PORT",
    "ENV_MAX_CONCURRENT_SESSIONS",
    "ENV_OUTBOUND_QUEUE_MAX",
    "WS_CLOSE_AT_CAPACITY_REASON",
    "WS_CLOSE_TRY_AGAIN_LATER_CODE",
    "WS_ENDPOINT_PATH",
]
