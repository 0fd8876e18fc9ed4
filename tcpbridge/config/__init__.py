"""Configuration module exports (env-resolved constants only)."""

from .bridge import (
    DEFAULT_BRIDGE_HOST,
    DEFAULT_BRIDGE_PORT,
    WS_ENDPOINT_PATH,
)

__all__ = [
    "DEFAULT_BRIDGE_HOST",
    "DEFAULT_BRIDGE_PORT",
    "WS_ENDPOINT_PATH",
]
