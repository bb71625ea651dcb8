"""
Dispatcher - turns inbound chat lines into oracle actions.

Per message:
1. Drop anything not starting with the command prefix, strip the prefix.
2. In the control channel, "join" / "depart" move the oracle in or out of
   the speaker's own channel ("join" needs the speaker on the allow-list).
3. A broadcaster speaking in their own channel may send "oracle-depart" or
   "oracle-update".
4. Whatever happened above, the text is also looked up as an entity name.
   Hits are formatted and said in the channel. Misses go through the alias
   index once, then (optionally) the fuzzy index for a "did you mean" reply.

Nothing in here raises to the transport: misses and denied directives are
ordinary outcomes, unexpected errors are logged and swallowed.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..knowledge.snapshot import Match
from .formatter import format_record

if TYPE_CHECKING:
    from ..transport.base import ChatTransport, InboundMessage, PartEvent
    from .reload import ReloadCoordinator, ReloadResult

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "!"
DEFAULT_CONTROL_CHANNEL = "oracleofdelphibot"

# Alias resolution re-dispatches at most this many times per message
MAX_ALIAS_HOPS = 1

# The query itself is never repeated back into the channel
SUGGESTION_TEMPLATE = "Did you mean {prefix}{suggestion}?"


@dataclass
class DispatchOutcome:
    """What one inbound message led to."""

    query: str = ""
    ignored: bool = False
    directive: str | None = None
    denied: bool = False
    reload: ReloadResult | None = None
    match: Match | None = None
    via_alias: str | None = None
    suggestion: str | None = None
    reply: str | None = None


DirectiveHandler = Callable[[str, str, DispatchOutcome], Awaitable[None]]


class Dispatcher:
    """
    Routes chat messages to control directives and entity lookups.

    Usage:
        dispatcher = Dispatcher(transport, coordinator, bot_name="oracleofdelphibot")
        await dispatcher.handle(InboundMessage(channel="foo", user="bar", text="!long-sword"))
    """

    def __init__(
        self,
        transport: ChatTransport,
        coordinator: ReloadCoordinator,
        *,
        control_channel: str = DEFAULT_CONTROL_CHANNEL,
        bot_name: str | None = None,
        prefix: str = DEFAULT_PREFIX,
        suggestions_enabled: bool = True,
    ) -> None:
        if not prefix:
            raise ValueError("command prefix must not be empty")
        self.transport = transport
        self.coordinator = coordinator
        self.control_channel = control_channel
        self.bot_name = bot_name
        self.prefix = prefix
        self.suggestions_enabled = suggestions_enabled

        # Directive name -> handler(channel, user, outcome)
        self.control_directives: dict[str, DirectiveHandler] = {
            "join": self._control_join,
            "depart": self._control_depart,
        }
        self.broadcaster_directives: dict[str, DirectiveHandler] = {
            "oracle-depart": self._broadcaster_depart,
            "oracle-update": self._broadcaster_update,
        }

    # ---------- Entry points ----------

    async def handle(self, message: InboundMessage) -> DispatchOutcome:
        """Process one chat message. Never raises."""
        if self.bot_name and message.user == self.bot_name:
            return DispatchOutcome(ignored=True)
        if not message.text.startswith(self.prefix):
            return DispatchOutcome(ignored=True)

        text = message.text[len(self.prefix) :].strip()
        if not text:
            return DispatchOutcome(ignored=True)

        try:
            return await self._dispatch(message.channel, message.user, text, hops=0)
        except Exception:
            logger.exception(
                "Error handling %r from %s in #%s", message.text, message.user, message.channel
            )
            return DispatchOutcome(query=text)

    async def handle_part(self, event: PartEvent) -> bool:
        """Leave a channel when its broadcaster leaves it. Returns True if departed."""
        if event.user != event.channel:
            return False
        try:
            await self.transport.depart(event.channel)
        except Exception:
            logger.exception("Error departing #%s", event.channel)
            return False
        logger.info("Broadcaster left #%s; departing", event.channel)
        return True

    # ---------- Dispatch ----------

    async def _dispatch(self, channel: str, user: str, text: str, hops: int) -> DispatchOutcome:
        outcome = DispatchOutcome(query=text)

        if channel == self.control_channel:
            handler = self.control_directives.get(text)
            if handler is not None:
                outcome.directive = text
                await handler(channel, user, outcome)
        elif user == channel:
            handler = self.broadcaster_directives.get(text)
            if handler is not None:
                outcome.directive = text
                await handler(channel, user, outcome)

        # One snapshot for the whole lookup, taken after any reload above
        snapshot = self.coordinator.current

        match = snapshot.find(text)
        if match is not None:
            outcome.match = match
            outcome.reply = format_record(match.name, match.record)
            await self.transport.say(channel, outcome.reply)
            return outcome

        canonical = snapshot.resolve_alias(text)
        if canonical is not None:
            if hops >= MAX_ALIAS_HOPS:
                logger.warning("Alias %r -> %r needs another hop; giving up", text, canonical)
                return outcome
            inner = await self._dispatch(channel, user, canonical, hops + 1)
            inner.via_alias = text
            inner.directive = inner.directive or outcome.directive
            inner.denied = inner.denied or outcome.denied
            inner.reload = inner.reload or outcome.reload
            return inner

        logger.debug("No entry for %r (knowledge v%d)", text, snapshot.version)
        if hops == 0 and outcome.directive is None and self.suggestions_enabled:
            suggestion = snapshot.suggest(text)
            if suggestion is not None:
                outcome.suggestion = suggestion
                outcome.reply = SUGGESTION_TEMPLATE.format(
                    prefix=self.prefix, suggestion=suggestion
                )
                await self.transport.say(channel, outcome.reply)
        return outcome

    # ---------- Directives ----------

    async def _control_join(self, channel: str, user: str, outcome: DispatchOutcome) -> None:
        if not self.coordinator.current.access_policy.allows(user):
            outcome.denied = True
            logger.debug("Ignoring join request from %s (not allowed)", user)
            return
        await self.transport.join(user)
        logger.info("Joined #%s on request", user)

    async def _control_depart(self, channel: str, user: str, outcome: DispatchOutcome) -> None:
        await self.transport.depart(user)
        logger.info("Departed #%s on request", user)

    async def _broadcaster_depart(self, channel: str, user: str, outcome: DispatchOutcome) -> None:
        await self.transport.depart(channel)
        logger.info("Departed #%s at the broadcaster's request", channel)

    async def _broadcaster_update(self, channel: str, user: str, outcome: DispatchOutcome) -> None:
        logger.info("Knowledge update requested by %s", user)
        outcome.reload = await self.coordinator.reload()
