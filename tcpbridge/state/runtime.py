"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tcpbridge.state.settings import AppSettings
    from tcpbridge.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    settings: AppSettings


__all__ = ["RuntimeDeps"]
