"""Discord client for cybernaut.

Thin adapter between discord.py's gateway events and the Dispatcher.
Connection, login, heartbeats and rate limiting are all discord.py's.
"""

import asyncio
from typing import Any, Dict

import discord
import structlog

from .dispatcher import Dispatcher
from .registry import CommandRegistry

logger = structlog.get_logger("cybernaut.bot")


def default_intents() -> discord.Intents:
    """Guilds, guild messages, and message content (privileged)."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return intents


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    """Event-loop exception handler: log and keep running."""
    exception = context.get("exception")
    logger.error(
        "unhandled_async_error",
        message=context.get("message", "Unknown async error"),
        error=str(exception) if exception else None,
        error_type=type(exception).__name__ if exception else None,
    )


class CybernautClient(discord.Client):
    """Discord client that routes messages to registered commands.

    Args:
        registry: Frozen command registry.
        config: Loaded Config; shared read-only with handlers.
    """

    def __init__(self, registry: CommandRegistry, config, **options):
        options.setdefault("intents", default_intents())
        super().__init__(**options)
        self.config = config
        self.registry = registry
        self.dispatcher = Dispatcher(registry, config, self)

    async def setup_hook(self) -> None:
        """Install the process-level async error handler."""
        asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

    async def on_ready(self) -> None:
        logger.info(
            "bot_ready",
            user=str(self.user),
            commands=len(self.registry),
            prefix=self.config.prefix,
        )
        await self.change_presence(activity=discord.Game(name=self.config.activity))

    async def on_message(self, message: discord.Message) -> None:
        self.dispatcher.submit(message)

    async def on_error(self, event_method: str, *args: Any, **kwargs: Any) -> None:
        logger.exception("client_event_error", event=event_method)
