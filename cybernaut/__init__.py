"""cybernaut: a modular prefix-command Discord bot and a terminal countdown timer.

Provides the CommandRegistry and Dispatcher used by the bot, and the
CountdownTimer behind the ``cybernaut-timer`` console script.
"""

from .command_base import Command
from .command_loader import CommandLoader, build_registry
from .dispatcher import Dispatcher, parse_command
from .registry import CommandRegistry
from .timer import CountdownTimer

__all__ = [
    "Command",
    "CommandLoader",
    "CommandRegistry",
    "CountdownTimer",
    "Dispatcher",
    "build_registry",
    "parse_command",
]
