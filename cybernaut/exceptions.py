"""Custom exception hierarchy for cybernaut.

Every error raised by the bot or the timer derives from CybernautError,
so callers can catch broadly at process boundaries while still handling
each failure class precisely where it occurs:

    ConfigError            -- startup-fatal (missing/malformed settings, no token)
    CommandDirectoryError  -- commands directory missing or unreadable
    CommandLoadError       -- one command module failed import or validation
    TimerInputError        -- countdown duration rejected
"""

from typing import Any, Optional


class CybernautError(Exception):
    """Base exception for all cybernaut errors.

    Attributes:
        message: Human-readable error description.
        module: Originating module name (e.g. "command_loader").
        context: Arbitrary key-value pairs for structured logging.
    """

    def __init__(
        self,
        message: str = "",
        *,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.module = module
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message or self.__class__.__name__]
        if self.module:
            parts.append(f"[module={self.module}]")
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"({ctx})")
        return " ".join(parts)

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return f"{cls}({self.message!r}, module={self.module!r})"


class ConfigError(CybernautError):
    """Configuration is missing, malformed, or lacks a required value.

    Raised before the client connects; the entry point exits non-zero.
    """

    def __init__(
        self,
        message: str = "",
        *,
        key: Optional[str] = None,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.key = key
        if key is not None:
            context["key"] = key
        super().__init__(message, module=module or "config", **context)


class CommandDirectoryError(CybernautError):
    """The commands directory could not be listed.

    Attributes:
        path: Directory that failed to read.
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.path = path
        if path is not None:
            context["path"] = path
        super().__init__(message, module=module or "command_loader", **context)


class CommandLoadError(CybernautError):
    """A single command module failed to import or validate.

    Attributes:
        source: File path or module name of the offending command.
    """

    def __init__(
        self,
        message: str = "",
        *,
        source: Optional[str] = None,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.source = source
        if source is not None:
            context["source"] = source
        super().__init__(message, module=module or "command_loader", **context)


class TimerInputError(CybernautError):
    """Countdown duration is not a finite positive number."""

    def __init__(
        self,
        message: str = "",
        *,
        value: Any = None,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.value = value
        super().__init__(message, module=module or "timer", **context)
