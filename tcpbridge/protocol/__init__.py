from .codec import encode_event, parse_command
from .events import Event, ErrorEvent, ConnectResult, DisconnectNotice
from .commands import Command, ConnectCommand, DisconnectCommand

__all__ = [
    "Command",
    "ConnectCommand",
    "ConnectResult",
    "DisconnectCommand",
    "DisconnectNotice",
    "ErrorEvent",
    "Event",
    "encode_event",
    "parse_command",
]
