"""Command model and handler contract for cybernaut.

A command module is any Python file in the commands directory that
defines, at module level::

    name = "ping"                 # required, non-empty
    aliases = ["p"]               # optional
    description = "Replies pong"  # optional
    usage = "ping"                # optional

    async def execute(message, args, client, config):
        await message.reply("Pong!")

``execute`` may also be a plain function. It receives the triggering
discord.Message, the argument tokens, the client (session handle), and
the shared read-only Config.
"""

from typing import Any, Awaitable, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Handler signature: (message, args, client, config) -> None | Awaitable[None]
CommandHandler = Callable[[Any, List[str], Any, Any], Union[None, Awaitable[None]]]


class Command(BaseModel):
    """A validated, immutable command definition."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Unique command name (case-folded)")
    aliases: List[str] = Field(default_factory=list)
    description: str = ""
    usage: Optional[str] = None
    source: str = Field(default="", description="Module or file the command came from")
    execute: CommandHandler

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("aliases", mode="before")
    @classmethod
    def _normalize_aliases(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            raise ValueError("aliases must be a list of strings, not a string")
        if isinstance(value, (list, tuple)):
            return [
                a.strip().lower() for a in value
                if isinstance(a, str) and a.strip()
            ]
        return value

    def matches_alias(self, token: str) -> bool:
        """Whether ``token`` (already case-folded) is one of this command's aliases."""
        return token in self.aliases

    def help_line(self, prefix: str = "") -> str:
        """One-line help entry, e.g. ``!echo (say) - Repeats your words``."""
        line = f"{prefix}{self.name}"
        if self.aliases:
            line += f" ({', '.join(self.aliases)})"
        if self.description:
            line += f" - {self.description}"
        return line
