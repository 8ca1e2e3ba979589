"""Command discovery, validation, and registry construction.

Discovery (listing ``*.py`` files in a directory) is separated from
registration so any iterable of module-like objects can be loaded via
CommandLoader.load(). Each module is validated against the command
contract; invalid modules are skipped with a warning and never reach
the registry.
"""

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, List, Optional

import structlog
from pydantic import ValidationError

from .command_base import Command
from .exceptions import CommandDirectoryError, CommandLoadError
from .registry import CommandRegistry

logger = structlog.get_logger("cybernaut.commands")

# Namespace under which command files are imported, so they cannot
# shadow real packages in sys.modules.
MODULE_NAMESPACE = "cybernaut_commands"


def command_from_module(module: Any, source: Optional[str] = None) -> Command:
    """Validate a module-like object and build a Command from it.

    Args:
        module: Object exposing ``name``, ``execute`` and optionally
            ``aliases``, ``description``, ``usage``.
        source: Label for logs; defaults to the module's ``__file__``
            or ``__name__``.

    Raises:
        CommandLoadError: ``name`` missing/empty or ``execute`` missing
            or not callable, or any other field has the wrong type.
    """
    if source is None:
        source = getattr(module, "__file__", None) or getattr(module, "__name__", repr(module))

    name = getattr(module, "name", None)
    if not isinstance(name, str) or not name.strip():
        raise CommandLoadError('missing required "name"', source=source)

    execute = getattr(module, "execute", None)
    if execute is None or not callable(execute):
        raise CommandLoadError('missing required callable "execute"', source=source)

    try:
        return Command(
            name=name,
            aliases=getattr(module, "aliases", None),
            description=getattr(module, "description", "") or "",
            usage=getattr(module, "usage", None),
            source=source,
            execute=execute,
        )
    except ValidationError as e:
        raise CommandLoadError(
            f"invalid command definition: {e.error_count()} error(s)",
            source=source,
            errors=[err["msg"] for err in e.errors()],
        ) from e


class CommandLoader:
    """Discovers command modules and builds a frozen CommandRegistry.

    Args:
        commands_dir: Directory scanned by discover_modules(). Only
            needed for directory-based discovery.
    """

    def __init__(self, commands_dir: Optional[Path] = None):
        self.commands_dir = Path(commands_dir) if commands_dir is not None else None
        self.skipped: List[str] = []

    def discover_files(self) -> List[Path]:
        """List candidate command files, sorted by name.

        Raises:
            CommandDirectoryError: Directory missing or unreadable.
        """
        if self.commands_dir is None:
            raise CommandDirectoryError("no commands directory configured")
        try:
            entries = sorted(self.commands_dir.iterdir())
        except OSError as e:
            raise CommandDirectoryError(
                f"cannot read commands directory: {e.strerror or e}",
                path=str(self.commands_dir),
            ) from e
        return [
            p for p in entries
            if p.is_file() and p.suffix == ".py" and not p.name.startswith("_")
        ]

    def load_module(self, path: Path) -> ModuleType:
        """Import a single command file.

        Raises:
            CommandLoadError: The file raised during import.
        """
        module_name = f"{MODULE_NAMESPACE}.{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise CommandLoadError("not an importable module", source=str(path))
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise CommandLoadError(
                f"import failed: {e}", source=str(path), error_type=type(e).__name__,
            ) from e
        return module

    def discover_modules(self) -> List[ModuleType]:
        """Import every command file in the directory.

        Files that fail to import are skipped and logged; the directory
        itself failing to list raises CommandDirectoryError.
        """
        modules = []
        for path in self.discover_files():
            try:
                modules.append(self.load_module(path))
            except CommandLoadError as e:
                self._skip(e)
        return modules

    def load(self, modules: Iterable[Any]) -> CommandRegistry:
        """Validate and register modules, returning a frozen registry.

        Invalid modules are skipped; valid ones in the same batch are
        still registered.
        """
        registry = CommandRegistry()
        for module in modules:
            try:
                command = command_from_module(module)
            except CommandLoadError as e:
                self._skip(e)
                continue
            registry.register(command)
            logger.info("command_loaded", command=command.name, source=command.source)

        logger.info(
            "command_loader_complete",
            commands_loaded=len(registry),
            skipped=len(self.skipped),
        )
        return registry.freeze()

    def build(self) -> CommandRegistry:
        """Discover the directory and load everything found in it."""
        return self.load(self.discover_modules())

    def _skip(self, error: CommandLoadError) -> None:
        self.skipped.append(error.source or "")
        logger.warning(
            "command_load_skipped",
            source=error.source,
            reason=error.message,
            **{k: v for k, v in error.context.items() if k != "source"},
        )


def build_registry(commands_dir: Path) -> CommandRegistry:
    """Build a registry from every valid command module in ``commands_dir``.

    Raises:
        CommandDirectoryError: The directory cannot be read.
    """
    return CommandLoader(commands_dir).build()
