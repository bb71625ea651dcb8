"""
Delphi CLI - command line interface for the chat oracle.

Usage:
    delphi run            Connect to Twitch chat and answer queries
    delphi check          Validate a data directory and show what it holds
    delphi ask QUERY      Answer one query locally, without a chat connection
"""

import asyncio
import logging
import sys
from pathlib import Path

import click

from delphi import __version__
from delphi.config import Settings
from delphi.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger("delphi")


def _fail(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="delphi")
@click.option("--log-level", default=None, help="Logging level (overrides ORACLE_LOG_LEVEL)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """Delphi - answers !item questions in roguelike chat channels."""
    try:
        settings = Settings.from_env()
        if log_level:
            settings = settings.with_overrides(log_level=log_level.upper())
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.option("--data-dir", "-d", type=click.Path(path_type=Path), help="YAML data directory")
@click.pass_obj
def run(settings: Settings, data_dir: Path | None):
    """Connect to Twitch chat and serve queries until disconnected."""
    from delphi.bot import run_bot

    settings = settings.with_overrides(data_dir=data_dir)
    if not settings.oauth_token:
        _fail("TWITCHOAUTH is not set; a chat token is required to connect.")

    click.echo(f"⏳ Starting oracle as {settings.bot_name} (data: {settings.data_dir})...")
    try:
        asyncio.run(run_bot(settings))
    except ConfigurationError as e:
        logger.error("Cannot start: %s", e)
        _fail(f"Configuration error: {e}")
    except AuthenticationError as e:
        logger.error("Cannot log in: %s", e)
        _fail(f"{e}. Check TWITCHOAUTH.")
    except KeyboardInterrupt:
        click.echo("Oracle stopped.")


@main.command()
@click.option("--data-dir", "-d", type=click.Path(path_type=Path), help="YAML data directory")
@click.pass_obj
def check(settings: Settings, data_dir: Path | None):
    """Load and validate the data directory, then print a summary."""
    from delphi.knowledge.loader import load_snapshot

    settings = settings.with_overrides(data_dir=data_dir)
    try:
        snapshot = load_snapshot(settings.data_dir, min_score=settings.fuzzy_min_score)
    except ConfigurationError as e:
        _fail(f"Invalid data: {e}")

    click.echo(f"📁 {settings.data_dir}")
    for category, count in snapshot.counts().items():
        click.echo(f"  {category.value:<12} {count:>5}")
    click.echo(f"  {'aliases':<12} {len(snapshot.aliases):>5}")
    click.echo(f"  {'allowed':<12} {len(snapshot.access_policy.allowed):>5}")
    accuracy = snapshot.fuzzy.mutation_accuracy()
    click.echo(f"  fuzzy accuracy on one-letter typos: {accuracy:.0%}")
    click.echo(click.style("✅ Data is valid", fg="green", bold=True))


@main.command()
@click.argument("query")
@click.option("--data-dir", "-d", type=click.Path(path_type=Path), help="YAML data directory")
@click.option("--channel", "-c", default="console", help="Channel the query is spoken in")
@click.option("--user", "-u", default="console", help="User speaking the query")
@click.pass_obj
def ask(settings: Settings, query: str, data_dir: Path | None, channel: str, user: str):
    """Answer QUERY as if it were said in chat (the prefix is optional)."""
    from delphi.bot import make_dispatcher, make_loader
    from delphi.engine.reload import ReloadCoordinator
    from delphi.transport import ConsoleTransport, InboundMessage

    settings = settings.with_overrides(data_dir=data_dir)
    try:
        coordinator = ReloadCoordinator.start(make_loader(settings))
    except ConfigurationError as e:
        _fail(f"Invalid data: {e}")

    transport = ConsoleTransport(echo=click.echo)
    dispatcher = make_dispatcher(settings, transport, coordinator)
    text = query if query.startswith(settings.prefix) else settings.prefix + query
    asyncio.run(dispatcher.handle(InboundMessage(channel=channel, user=user, text=text)))
    if not transport.said:
        click.echo("(no reply)")


if __name__ == "__main__":
    main()
