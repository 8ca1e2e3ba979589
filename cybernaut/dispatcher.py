"""Prefix command dispatcher for cybernaut.

Turns inbound messages into command invocations:

    self/bot guard -> prefix check -> tokenize -> resolve -> execute

Every failure is contained to the message that caused it. A missing
command yields a notice, a raising handler yields one error log and a
best-effort apology, and a failed reply is logged and dropped.

Key classes:
    Dispatcher: Routes messages against a frozen CommandRegistry.

Key functions:
    parse_command: Split prefixed text into (name, args).
    log_task_exception: Done-callback for fire-and-forget dispatch tasks.
"""

import asyncio
import inspect
from typing import Any, List, Optional, Set, Tuple

import structlog

from .registry import CommandRegistry

logger = structlog.get_logger("cybernaut.bot")

NOT_FOUND_REPLY = "Hmm, I don't know that command! 🤔"
COMMAND_ERROR_REPLY = "Yikes! There was an error trying to execute that command! 😵‍💫"


def log_task_exception(task: asyncio.Task):
    """Log exceptions from fire-and-forget tasks instead of silently swallowing them."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc:
        logger.error("dispatch_task_failed", error=str(exc), error_type=type(exc).__name__)


def parse_command(content: str, prefix: str) -> Optional[Tuple[str, List[str]]]:
    """Split a prefixed message into a case-folded command name and args.

    Returns None when ``content`` does not start with ``prefix``. A bare
    prefix yields an empty name, which never resolves.
    """
    if not prefix or not content.startswith(prefix):
        return None
    tokens = content[len(prefix):].split()
    if not tokens:
        return "", []
    return tokens[0].lower(), tokens[1:]


def _author_tag(author: Any) -> str:
    return str(getattr(author, "name", None) or getattr(author, "id", "unknown"))


class Dispatcher:
    """Routes messages to registered commands.

    Holds only read-only shared state (registry, config, client), so
    overlapping dispatches need no locking.

    Args:
        registry: Frozen command registry.
        config: Shared Config passed to every handler.
        client: Discord client; its ``user`` is the bot identity and it
            is passed to handlers as the session handle.
    """

    def __init__(self, registry: CommandRegistry, config, client):
        self.registry = registry
        self.config = config
        self.client = client
        self._tasks: Set[asyncio.Task] = set()

    def _is_own_or_bot(self, message) -> bool:
        author = message.author
        own = getattr(self.client, "user", None)
        if own is not None and getattr(author, "id", None) == getattr(own, "id", object()):
            return True
        return bool(self.config.ignore_bots and getattr(author, "bot", False))

    def submit(self, message) -> asyncio.Task:
        """Handle ``message`` as an independent task and return it."""
        task = asyncio.create_task(self.handle_message(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(log_task_exception)
        return task

    @property
    def pending(self) -> int:
        """Number of dispatch tasks still running."""
        return len(self._tasks)

    async def handle_message(self, message) -> None:
        """Process one inbound message through the full routing chain."""
        if self._is_own_or_bot(message):
            return

        parsed = parse_command(message.content or "", self.config.prefix)
        if parsed is None:
            return
        name, args = parsed

        command = self.registry.resolve(name)
        if command is None:
            logger.info("command_not_found", command=name, author=_author_tag(message.author))
            await self._safe_reply(message, NOT_FOUND_REPLY)
            return

        logger.debug("command_routing", command=command.name, invoked_as=name, args=len(args))
        try:
            result = command.execute(message, args, self.client, self.config)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "command_failed",
                command=command.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            await self._safe_reply(message, COMMAND_ERROR_REPLY)
            return

        logger.info("command_executed", command=command.name, author=_author_tag(message.author))

    async def _safe_reply(self, message, text: str) -> bool:
        """Reply to ``message``; log and swallow any failure."""
        try:
            await message.reply(text)
            return True
        except Exception as e:
            logger.warning("reply_failed", error=str(e), error_type=type(e).__name__)
            return False
