"""Connection state owned by the embedded relay's actor task."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from tcpbridge.relay import UpstreamLink


@dataclass(slots=True)
class ConnectionState:
    """A link is present iff a send queue accepting bytes is present."""

    link: UpstreamLink | None = None
    send_queue: asyncio.Queue[bytes | None] | None = None

    @property
    def connected(self) -> bool:
        return self.link is not None


__all__ = ["ConnectionState"]
