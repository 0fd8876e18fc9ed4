"""Shared error types for the TCP bridge.

Every failure is terminal to the operation that raised it, never to the
process. Each type maps onto exactly one client-visible event or host response.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AcceptError(Exception):
    """Raised when an inbound WebSocket peer cannot be admitted or accepted."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class DialError(Exception):
    """Raised when the upstream TCP connect fails. Never retried."""

    host: str
    port: int
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class UpstreamIOError(Exception):
    """Raised when a read, write or flush fails on an established upstream link."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ProtocolError(Exception):
    """Raised for malformed or unrecognized control input."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class NotConnectedError(Exception):
    """Raised when a payload is sent without an active upstream link."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class SendQueueFullError(Exception):
    """Raised when the embedded send queue has reached its bound."""

    message: str
    limit: int

    def __str__(self) -> str:
        return self.message


__all__ = [
    "AcceptError",
    "DialError",
    "NotConnectedError",
    "ProtocolError",
    "SendQueueFullError",
    "UpstreamIOError",
]
