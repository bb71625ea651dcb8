"""
Transport contract - what the oracle needs from a chat connection.

The dispatcher only ever calls join/depart/say; the bot runner consumes
events(). Channel names are bare identities ("foo", not "#foo").
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol, Union


@dataclass(frozen=True)
class InboundMessage:
    """A chat line spoken by `user` in `channel`."""

    channel: str
    user: str
    text: str


@dataclass(frozen=True)
class PartEvent:
    """`user` left `channel`."""

    channel: str
    user: str


TransportEvent = Union[InboundMessage, PartEvent]


class ChatTransport(Protocol):
    async def join(self, channel: str) -> None: ...

    async def depart(self, channel: str) -> None: ...

    async def say(self, channel: str, text: str) -> None: ...

    def events(self) -> AsyncIterator[TransportEvent]: ...
