from .relay import EmbeddedRelay
from .state import ConnectionState
from .events import EventSink, ConnectionEvent, PacketReceivedEvent
from .commands import HostCommandDispatcher

__all__ = [
    "ConnectionEvent",
    "ConnectionState",
    "EmbeddedRelay",
    "EventSink",
    "HostCommandDispatcher",
    "PacketReceivedEvent",
]
