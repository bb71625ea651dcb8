"""
Oracle configuration.

Settings come from environment variables so the bot can run unchanged in a
container or a shell session:

    TWITCHBOT               bot account name
    TWITCHCHANNEL           channel joined at start-up (default: the control channel)
    ORACLE_CONTROL_CHANNEL  channel that takes join/depart requests (default: oracleofdelphibot)
    TWITCHOAUTH             chat OAuth token
    ORACLE_DATA_DIR         directory of YAML data files (default: bundled world_data)
    ORACLE_PREFIX           command prefix (default: !)
    ORACLE_SUGGESTIONS      reply with "did you mean" suggestions (default: true)
    ORACLE_FUZZY_MIN_SCORE  minimum suggestion score, 0-1 (default: 0.35)
    ORACLE_IRC_URL          chat WebSocket URL
    ORACLE_LOG_LEVEL        logging level (default: INFO)
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .engine.dispatcher import DEFAULT_CONTROL_CHANNEL, DEFAULT_PREFIX
from .errors import ConfigurationError
from .knowledge.fuzzy import DEFAULT_MIN_SCORE
from .transport.twitch import DEFAULT_IRC_URL

BUNDLED_DATA_DIR = Path(__file__).parent / "world_data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _channel(value: str) -> str:
    return value.strip().lstrip("#").lower()


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Settings:
    bot_name: str = DEFAULT_CONTROL_CHANNEL
    control_channel: str = DEFAULT_CONTROL_CHANNEL
    home_channel: str = DEFAULT_CONTROL_CHANNEL
    oauth_token: str = ""
    data_dir: Path = BUNDLED_DATA_DIR
    prefix: str = DEFAULT_PREFIX
    suggestions_enabled: bool = True
    fuzzy_min_score: float = DEFAULT_MIN_SCORE
    irc_url: str = DEFAULT_IRC_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        bot_name = env.get("TWITCHBOT", defaults.bot_name).strip().lower()
        control_channel = _channel(env.get("ORACLE_CONTROL_CHANNEL", defaults.control_channel))
        home_channel = _channel(env.get("TWITCHCHANNEL", control_channel))

        suggestions = defaults.suggestions_enabled
        if "ORACLE_SUGGESTIONS" in env:
            suggestions = _parse_bool("ORACLE_SUGGESTIONS", env["ORACLE_SUGGESTIONS"])

        min_score = defaults.fuzzy_min_score
        if "ORACLE_FUZZY_MIN_SCORE" in env:
            try:
                min_score = float(env["ORACLE_FUZZY_MIN_SCORE"])
            except ValueError:
                raise ConfigurationError(
                    f"ORACLE_FUZZY_MIN_SCORE must be a number, got {env['ORACLE_FUZZY_MIN_SCORE']!r}"
                ) from None

        settings = cls(
            bot_name=bot_name,
            control_channel=control_channel,
            home_channel=home_channel,
            oauth_token=env.get("TWITCHOAUTH", defaults.oauth_token).strip(),
            data_dir=Path(env.get("ORACLE_DATA_DIR", str(defaults.data_dir))),
            prefix=env.get("ORACLE_PREFIX", defaults.prefix),
            suggestions_enabled=suggestions,
            fuzzy_min_score=min_score,
            irc_url=env.get("ORACLE_IRC_URL", defaults.irc_url),
            log_level=env.get("ORACLE_LOG_LEVEL", defaults.log_level).upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ConfigurationError on out-of-range values."""
        if not self.prefix:
            raise ConfigurationError("ORACLE_PREFIX must not be empty")
        if not 0.0 <= self.fuzzy_min_score <= 1.0:
            raise ConfigurationError(
                f"ORACLE_FUZZY_MIN_SCORE must be between 0 and 1, got {self.fuzzy_min_score}"
            )
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"unknown log level {self.log_level!r}")

    def with_overrides(self, **changes) -> "Settings":
        """Copy with the given non-None fields replaced (CLI options)."""
        updated = replace(self, **{k: v for k, v in changes.items() if v is not None})
        updated.validate()
        return updated
