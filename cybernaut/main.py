"""Main entry point for the cybernaut bot.

Initializes logging in two phases (defaults then config-driven),
loads and validates configuration, builds the command registry, and
runs the Discord client until it disconnects or is interrupted.

Key functions:
    load_registry: Build the registry, tolerating an unreadable
        commands directory.
    main: Async entry point.
    run: Synchronous wrapper for the ``cybernaut`` console script.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import discord
import structlog

from .client import CybernautClient
from .command_loader import build_registry
from .config import Config
from .exceptions import CommandDirectoryError, ConfigError
from .logging_config import setup_logging
from .registry import CommandRegistry

__version__ = "1.0.0"


def load_registry(commands_dir: Path) -> CommandRegistry:
    """Build the command registry; an unreadable directory yields an empty one."""
    logger = structlog.get_logger("cybernaut.commands")
    try:
        return build_registry(commands_dir)
    except CommandDirectoryError as e:
        logger.error(
            "commands_dir_unreadable",
            path=str(commands_dir),
            error=str(e),
            hint="Create a commands directory with your command files in it.",
        )
        return CommandRegistry().freeze()


async def main(config_dir: Optional[Path] = None) -> int:
    """Main async entry point. Returns the process exit status."""
    # Phase 1: console only until the config is known
    setup_logging()
    logger = structlog.get_logger("cybernaut.bot")
    logger.info("cybernaut_starting", version=__version__)

    try:
        config = Config(config_dir)
        config.validate()
    except ConfigError as e:
        logger.error("startup_failed", error=str(e), error_type=type(e).__name__)
        return 1

    # Phase 2: reconfigure with real config
    setup_logging(config)

    registry = load_registry(config.commands_dir)
    if not len(registry):
        logger.warning("no_commands_loaded", path=str(config.commands_dir))

    client = CybernautClient(registry, config)
    try:
        async with client:
            await client.start(config.bot_token)
    except discord.LoginFailure as e:
        logger.error("login_failed", error=str(e), hint="Check bot_token / BOT_TOKEN")
        return 1
    finally:
        logger.info("cybernaut_stopped")
    return 0


def run():
    """Synchronous entry point for the ``cybernaut`` console script."""
    try:
        status = asyncio.run(main())
    except KeyboardInterrupt:
        status = 0
    sys.exit(status)


if __name__ == "__main__":
    run()
