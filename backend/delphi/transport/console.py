"""
ConsoleTransport - an in-process transport for local use.

Records every join/depart/say and echoes replies through a callback. The
`delphi ask` command uses it to run single queries without a chat
connection; queued events are replayed by events().
"""

from collections.abc import AsyncIterator, Callable, Iterable

from .base import TransportEvent


class ConsoleTransport:
    def __init__(
        self,
        echo: Callable[[str], None] | None = None,
        events: Iterable[TransportEvent] = (),
    ) -> None:
        self.echo = echo
        self.pending: list[TransportEvent] = list(events)
        self.joined: list[str] = []
        self.departed: list[str] = []
        self.said: list[tuple[str, str]] = []

    async def join(self, channel: str) -> None:
        self.joined.append(channel)
        self._echo(f"* joined #{channel}")

    async def depart(self, channel: str) -> None:
        self.departed.append(channel)
        self._echo(f"* departed #{channel}")

    async def say(self, channel: str, text: str) -> None:
        self.said.append((channel, text))
        self._echo(text)

    async def events(self) -> AsyncIterator[TransportEvent]:
        while self.pending:
            yield self.pending.pop(0)

    def _echo(self, text: str) -> None:
        if self.echo is not None:
            self.echo(text)
