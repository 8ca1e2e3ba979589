"""Configuration management for cybernaut.

Loads YAML settings (settings.yaml) and environment variables (.env)
into a typed Config object. Property getters provide safe access with
defaults for the bot, command discovery, and logging.

Key classes:
    Config: Central configuration manager.
"""

import os
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import structlog
import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

logger = structlog.get_logger("cybernaut.bot")

DEFAULT_PREFIX = "!"
DEFAULT_ACTIVITY = "managing modular commands"


class Config:
    """Central configuration manager for cybernaut.

    Loads settings.yaml and .env from the config directory. The settings
    file is required: a missing or malformed file raises ConfigError,
    which the entry point treats as fatal. Settings are exposed to
    command handlers as a read-only mapping.

    Args:
        config_dir: Path to the config directory. Defaults to
            ``config/`` under the working directory.
    """

    SETTINGS_FILE = "settings.yaml"

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path.cwd() / "config"
        self.config_dir = Path(config_dir)

        # Load environment variables
        env_file = self.config_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        self._settings = self._load_yaml(self.SETTINGS_FILE)
        logger.debug("config_loaded", config_dir=str(self.config_dir), keys=[str(k) for k in self._settings])

    def _load_yaml(self, filename: str) -> dict:
        """Load a YAML configuration file, raising ConfigError if unusable."""
        filepath = self.config_dir / filename
        if not filepath.is_file():
            raise ConfigError(
                f"{filename} is missing", path=str(filepath),
            )
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                f"{filename} could not be parsed: {e}", path=str(filepath),
            ) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"{filename} must contain a mapping, got {type(data).__name__}",
                path=str(filepath),
            )
        return data

    @property
    def settings(self) -> Mapping:
        """Read-only view of the raw settings mapping."""
        return MappingProxyType(self._settings)

    def validate(self) -> None:
        """Validate settings required to start the bot.

        Raises:
            ConfigError: No bot token configured, or the ``logging``
                section is not a mapping.
        """
        if not self.bot_token:
            raise ConfigError(
                "bot_token is missing; set it in settings.yaml or BOT_TOKEN",
                key="bot_token",
            )
        log_config = self._settings.get("logging")
        if log_config is not None and not isinstance(log_config, dict):
            raise ConfigError(
                f"logging must be a mapping, got {type(log_config).__name__}",
                key="logging",
            )
        subsystem_levels = self._logging.get("subsystem_levels")
        if subsystem_levels is not None and not isinstance(subsystem_levels, dict):
            raise ConfigError(
                "logging.subsystem_levels must be a mapping, "
                f"got {type(subsystem_levels).__name__}",
                key="logging.subsystem_levels",
            )

    @property
    def bot_token(self) -> str:
        """Discord bot token. Env var BOT_TOKEN takes precedence."""
        return os.environ.get("BOT_TOKEN") or str(self._settings.get("bot_token") or "")

    @property
    def prefix(self) -> str:
        """Command prefix. Env var BOT_PREFIX takes precedence.

        Falls back to "!" when neither source sets a non-empty prefix.
        """
        configured = os.environ.get("BOT_PREFIX") or self._settings.get("prefix")
        return str(configured or DEFAULT_PREFIX)

    @property
    def commands_dir(self) -> Path:
        """Directory scanned for command modules."""
        configured = self._settings.get("commands_dir")
        if configured:
            return Path(configured).expanduser()
        return self.config_dir.parent / "commands"

    @property
    def ignore_bots(self) -> bool:
        """Whether messages from any bot account are ignored (default True)."""
        return bool(self._settings.get("ignore_bots", True))

    @property
    def activity(self) -> str:
        """Presence activity shown once the client is ready."""
        return str(self._settings.get("activity") or DEFAULT_ACTIVITY)

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        configured = self._settings.get("log_dir")
        if configured:
            return Path(configured).expanduser()
        return self.config_dir.parent / "logs"

    @property
    def _logging(self) -> dict:
        return self._settings.get("logging") or {}

    @property
    def logging_level(self) -> str:
        """Global log level (default INFO). Controls console and log file."""
        return self._logging.get("level") or "INFO"

    @property
    def logging_subsystem_levels(self) -> dict:
        """Per-subsystem log level overrides. E.g. {"commands": "DEBUG"}."""
        return self._logging.get("subsystem_levels") or {}

    @property
    def logging_max_file_size_mb(self) -> int:
        """Max size of the log file in MB before rotation (default 10)."""
        return self._logging.get("max_file_size_mb") or 10

    @property
    def logging_backup_count(self) -> int:
        """Number of rotated log files to keep (default 5)."""
        backup_count = self._logging.get("backup_count")
        return 5 if backup_count is None else backup_count
