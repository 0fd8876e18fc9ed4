"""Inbound control commands (closed set)."""

from __future__ import annotations

from typing import Union
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConnectCommand:
    host: str
    port: int

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True, slots=True)
class DisconnectCommand:
    pass


Command = Union[ConnectCommand, DisconnectCommand]

__all__ = ["Command", "ConnectCommand", "DisconnectCommand"]
