"""
Twitch chat transport - IRC over WebSocket.

Twitch chat speaks plain IRC lines inside WebSocket text frames. Only the
handful of commands the oracle needs are handled: PASS/NICK to log in,
CAP REQ for membership (PART) events, JOIN/PART/PRIVMSG, and PING/PONG
keepalive. RECONNECT ends the event stream; reconnecting is up to the
caller, and connect() rejoins the channels the transport was in.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

import websockets

from ..errors import AuthenticationError
from .base import InboundMessage, PartEvent, TransportEvent

logger = logging.getLogger(__name__)

DEFAULT_IRC_URL = "wss://irc-ws.chat.twitch.tv:443"
MEMBERSHIP_CAPABILITY = "twitch.tv/membership"
# Twitch drops chat messages longer than this
MAX_MESSAGE_LENGTH = 500
# NOTICE texts sent when PASS/NICK are rejected
AUTH_FAILURE_NOTICES = ("Login authentication failed", "Improperly formatted auth")


@dataclass(frozen=True)
class IrcLine:
    """One parsed IRC line."""

    command: str
    params: list[str] = field(default_factory=list)
    prefix: str | None = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def nick(self) -> str | None:
        """Nickname part of the prefix (":nick!user@host")."""
        if not self.prefix:
            return None
        return self.prefix.split("!", 1)[0]


def parse_irc_line(line: str) -> IrcLine | None:
    """
    Parse a raw IRC line into tags, prefix, command and params.

    Returns None for blank lines.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None

    tags: dict[str, str] = {}
    if line.startswith("@"):
        raw_tags, _, line = line[1:].partition(" ")
        for item in raw_tags.split(";"):
            key, _, value = item.partition("=")
            tags[key] = value

    prefix = None
    if line.startswith(":"):
        prefix, _, line = line[1:].partition(" ")

    trailing = None
    if " :" in line:
        line, trailing = line.split(" :", 1)
    elif line.startswith(":"):
        line, trailing = "", line[1:]

    parts = line.split()
    if not parts:
        return None
    params = parts[1:]
    if trailing is not None:
        params.append(trailing)
    return IrcLine(command=parts[0].upper(), params=params, prefix=prefix, tags=tags)


def irc_channel(channel: str) -> str:
    return "#" + channel.lstrip("#").lower()


def bare_channel(channel: str) -> str:
    return channel.lstrip("#").lower()


def format_privmsg(channel: str, text: str) -> str:
    """Build a PRIVMSG line, flattened to one line and cut to Twitch's limit."""
    flat = " ".join(text.split())
    if len(flat) > MAX_MESSAGE_LENGTH:
        flat = flat[: MAX_MESSAGE_LENGTH - 3].rstrip() + "..."
    return f"PRIVMSG {irc_channel(channel)} :{flat}"


def to_event(line: IrcLine) -> TransportEvent | None:
    """Map PRIVMSG and PART lines to transport events; everything else is None."""
    nick = line.nick
    if nick is None or not line.params:
        return None
    if line.command == "PRIVMSG" and len(line.params) >= 2:
        return InboundMessage(
            channel=bare_channel(line.params[0]), user=nick.lower(), text=line.params[1]
        )
    if line.command == "PART":
        return PartEvent(channel=bare_channel(line.params[0]), user=nick.lower())
    return None


class TwitchTransport:
    """
    ChatTransport backed by a Twitch chat WebSocket.

    Usage:
        transport = TwitchTransport("oracleofdelphibot", token)
        await transport.connect()
        await transport.join("oracleofdelphibot")
        async for event in transport.events():
            ...
    """

    def __init__(self, nick: str, token: str, url: str = DEFAULT_IRC_URL) -> None:
        self.nick = nick.lower()
        self.token = token if token.startswith("oauth:") else f"oauth:{token}"
        self.url = url
        self._ws = None
        self.channels: set[str] = set()

    async def connect(self) -> None:
        """Open the socket, log in and rejoin every channel joined so far."""
        logger.info("Connecting to %s as %s", self.url, self.nick)
        self._ws = await websockets.connect(self.url)
        await self._send(f"CAP REQ :{MEMBERSHIP_CAPABILITY}")
        await self._send(f"PASS {self.token}")
        await self._send(f"NICK {self.nick}")
        for channel in sorted(self.channels):
            await self._send(f"JOIN {irc_channel(channel)}")
        if self.channels:
            logger.info("Rejoined %d channel(s)", len(self.channels))

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
            self._ws = None

    async def _send(self, line: str) -> None:
        if self._ws is None:
            raise RuntimeError("Twitch transport is not connected")
        if line.startswith("PASS "):
            logger.debug("> PASS oauth:***")
        else:
            logger.debug("> %s", line)
        await self._ws.send(line + "\r\n")

    # ---------- ChatTransport ----------

    async def join(self, channel: str) -> None:
        await self._send(f"JOIN {irc_channel(channel)}")
        self.channels.add(bare_channel(channel))

    async def depart(self, channel: str) -> None:
        await self._send(f"PART {irc_channel(channel)}")
        self.channels.discard(bare_channel(channel))

    async def say(self, channel: str, text: str) -> None:
        await self._send(format_privmsg(channel, text))

    async def events(self) -> AsyncIterator[TransportEvent]:
        """
        Yield chat events until the connection ends. Answers PINGs itself.

        Returns when the server closes the socket or asks for a reconnect;
        the rest of the frame carrying RECONNECT is still delivered. The
        caller owns close() and any reconnect.

        Raises:
            AuthenticationError: If the server rejects the login
        """
        if self._ws is None:
            raise RuntimeError("Twitch transport is not connected")
        try:
            async for frame in self._ws:
                if isinstance(frame, bytes):
                    frame = frame.decode("utf-8", errors="replace")
                reconnect = False
                for raw in frame.split("\n"):
                    line = parse_irc_line(raw)
                    if line is None:
                        continue
                    if line.command == "PING":
                        await self._send(
                            "PONG :" + (line.params[-1] if line.params else "tmi.twitch.tv")
                        )
                        continue
                    if line.command == "NOTICE" and line.params:
                        notice = line.params[-1]
                        if any(text in notice for text in AUTH_FAILURE_NOTICES):
                            raise AuthenticationError(f"Twitch rejected the login: {notice}")
                        logger.warning("Twitch notice: %s", notice)
                        continue
                    if line.command == "RECONNECT":
                        logger.warning("Twitch requested a reconnect")
                        reconnect = True
                        continue
                    event = to_event(line)
                    if event is not None:
                        yield event
                if reconnect:
                    return
        except websockets.ConnectionClosed as e:
            logger.warning("Twitch connection lost: %s", e)
            return
        logger.info("Twitch connection closed")
