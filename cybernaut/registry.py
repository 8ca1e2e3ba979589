"""Command registry for cybernaut.

Maps command names to validated Command objects, preserving
registration order so alias resolution is deterministic. The registry
is populated once at startup by the command loader, frozen, and then
threaded read-only into the dispatcher.
"""

from typing import Dict, Iterator, List, Optional

import structlog

from .command_base import Command

logger = structlog.get_logger("cybernaut.commands")


class CommandRegistry:
    """Ordered mapping of command name -> Command with alias lookup.

    Name collisions are resolved last-registration-wins and reported as
    a warning. After freeze() the registry rejects further registration.
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}
        self._frozen = False

    def register(self, command: Command) -> None:
        """Add a command, replacing any earlier command with the same name.

        Raises:
            RuntimeError: The registry has been frozen.
        """
        if self._frozen:
            raise RuntimeError("Command registry is frozen")

        existing = self._commands.get(command.name)
        if existing is not None:
            logger.warning(
                "command_name_conflict",
                command=command.name,
                previous_source=existing.source,
                source=command.source,
            )
            # Re-insert so iteration order reflects the winning registration
            del self._commands[command.name]

        for alias in command.aliases:
            owner = self._alias_owner(alias)
            if alias in self._commands or owner is not None:
                logger.warning(
                    "command_alias_conflict",
                    alias=alias,
                    command=command.name,
                    shadowed_by=alias if alias in self._commands else owner.name,
                )

        self._commands[command.name] = command
        logger.debug("command_registered", command=command.name, aliases=command.aliases)

    def freeze(self) -> "CommandRegistry":
        """Make the registry read-only. Returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[Command]:
        """Exact name lookup (case-insensitive)."""
        return self._commands.get(name.lower())

    def resolve(self, token: str) -> Optional[Command]:
        """Resolve a command by name, falling back to aliases.

        Exact name match wins. Otherwise the first command, in
        registration order, that declares ``token`` as an alias.
        """
        normalized = token.lower()
        command = self._commands.get(normalized)
        if command is not None:
            return command
        return self._alias_owner(normalized)

    def _alias_owner(self, alias: str) -> Optional[Command]:
        for command in self._commands.values():
            if command.matches_alias(alias):
                return command
        return None

    def help_lines(self, prefix: str = "") -> List[str]:
        """Help entries for every command in registration order."""
        return [command.help_line(prefix) for command in self._commands.values()]

    @property
    def command_names(self) -> frozenset:
        """All registered command names."""
        return frozenset(self._commands.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)
