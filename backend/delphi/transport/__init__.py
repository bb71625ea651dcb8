"""Chat transports the oracle can talk through."""

from .base import ChatTransport, InboundMessage, PartEvent, TransportEvent
from .console import ConsoleTransport

__all__ = [
    "ChatTransport",
    "ConsoleTransport",
    "InboundMessage",
    "PartEvent",
    "TransportEvent",
]
