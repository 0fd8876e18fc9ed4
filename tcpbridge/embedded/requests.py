"""Typed requests posted onto the embedded relay's command queue."""

from __future__ import annotations

import asyncio
from typing import Any, Union
from dataclasses import dataclass

from tcpbridge.relay import UpstreamLink


@dataclass(slots=True)
class ConnectRequest:
    host: str
    port: int
    future: asyncio.Future[Any]


@dataclass(slots=True)
class SendRequest:
    data: bytes
    future: asyncio.Future[Any]


@dataclass(slots=True)
class DisconnectRequest:
    future: asyncio.Future[Any]


@dataclass(slots=True)
class LinkClosed:
    """Posted by a reader or writer task when its link hits a terminal condition."""

    link: UpstreamLink
    reason: str


RelayRequest = Union[ConnectRequest, SendRequest, DisconnectRequest, LinkClosed]

__all__ = ["ConnectRequest", "DisconnectRequest", "LinkClosed", "RelayRequest", "SendRequest"]
