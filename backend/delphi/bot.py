"""
OracleBot - wires a chat transport to the dispatcher.

Start-up order:
    1. Load the first knowledge snapshot (bad data is fatal here).
    2. Connect the transport and join the home and control channels.
    3. Handle every chat event in its own task until the connection ends.
    4. Reconnect with backoff; the transport rejoins every channel it was in.
"""

import asyncio
import logging

import websockets

from .config import Settings
from .engine.dispatcher import Dispatcher
from .engine.reload import ReloadCoordinator, SnapshotLoader
from .errors import ConfigurationError
from .knowledge.loader import load_snapshot
from .knowledge.snapshot import KnowledgeSnapshot
from .transport.base import ChatTransport, InboundMessage, PartEvent
from .transport.twitch import TwitchTransport

logger = logging.getLogger(__name__)

# Seconds between reconnect attempts, doubling up to the maximum
RECONNECT_INITIAL_DELAY = 1.0
RECONNECT_MAX_DELAY = 60.0


def make_loader(settings: Settings) -> SnapshotLoader:
    """Snapshot loader bound to the configured data directory."""

    def load(version: int) -> KnowledgeSnapshot:
        return load_snapshot(
            settings.data_dir, version=version, min_score=settings.fuzzy_min_score
        )

    return load


def make_dispatcher(
    settings: Settings, transport: ChatTransport, coordinator: ReloadCoordinator
) -> Dispatcher:
    return Dispatcher(
        transport,
        coordinator,
        control_channel=settings.control_channel,
        bot_name=settings.bot_name,
        prefix=settings.prefix,
        suggestions_enabled=settings.suggestions_enabled,
    )


class OracleBot:
    """Consumes transport events and hands them to the dispatcher."""

    def __init__(
        self, settings: Settings, transport: ChatTransport, coordinator: ReloadCoordinator
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.coordinator = coordinator
        self.dispatcher = make_dispatcher(settings, transport, coordinator)
        self._tasks: set[asyncio.Task] = set()

    async def serve(self) -> None:
        """Join the start-up channels and process events until the transport stops."""
        await self.join_startup_channels()
        await self.process_events()

    async def join_startup_channels(self) -> None:
        for channel in dict.fromkeys([self.settings.home_channel, self.settings.control_channel]):
            await self.transport.join(channel)
            logger.info("Joined #%s", channel)

    async def process_events(self) -> None:
        """Handle events until the stream ends, then wait for in-flight handlers."""
        try:
            async for event in self.transport.events():
                if isinstance(event, InboundMessage):
                    self._spawn(self.dispatcher.handle(event))
                elif isinstance(event, PartEvent):
                    self._spawn(self.dispatcher.handle_part(event))
        finally:
            if self._tasks:
                await asyncio.gather(*self._tasks)

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


async def run_bot(
    settings: Settings,
    *,
    reconnect_delay: float = RECONNECT_INITIAL_DELAY,
    max_reconnect_delay: float = RECONNECT_MAX_DELAY,
) -> None:
    """
    Run the oracle against Twitch chat, reconnecting whenever the connection ends.

    The delay between attempts doubles up to max_reconnect_delay and resets
    after every successful connect. Only a rejected login, bad configuration
    or cancellation stops the loop.

    Raises:
        ConfigurationError: If the initial knowledge cannot be loaded or the
            chat URL is invalid
        AuthenticationError: If Twitch rejects the OAuth token
    """
    coordinator = ReloadCoordinator.start(make_loader(settings))
    transport = TwitchTransport(settings.bot_name, settings.oauth_token, settings.irc_url)
    bot = OracleBot(settings, transport, coordinator)

    delay = reconnect_delay
    started = False
    while True:
        try:
            await transport.connect()
            delay = reconnect_delay
            if not started:
                await bot.join_startup_channels()
                started = True
            await bot.process_events()
        except websockets.InvalidURI as e:
            raise ConfigurationError(f"invalid chat URL {settings.irc_url!r}") from e
        except (OSError, websockets.WebSocketException) as e:
            logger.warning("Chat connection failed: %s", e)
        finally:
            await transport.close()

        logger.info("Reconnecting in %.1fs", delay)
        await asyncio.sleep(delay)
        delay = min(delay * 2, max_reconnect_delay)
