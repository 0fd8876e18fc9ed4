"""Structural type for anything a session can emit events and payload into."""

from __future__ import annotations

from typing import Protocol

from .outbound import OutboundItem


class OutboundSink(Protocol):
    async def put(self, item: OutboundItem) -> None: ...


__all__ = ["OutboundSink"]
