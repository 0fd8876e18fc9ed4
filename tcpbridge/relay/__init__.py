from .link import UpstreamLink
from .sink import OutboundSink
from .reader import pump_upstream
from .session import RelaySession
from .outbound import OutboundItem, OutboundSerializer

__all__ = [
    "OutboundItem",
    "OutboundSerializer",
    "OutboundSink",
    "RelaySession",
    "UpstreamLink",
    "pump_upstream",
]
