"""Logging configuration for cybernaut.

structlog events are handed to stdlib ``logging`` and rendered per
handler by ``structlog.stdlib.ProcessorFormatter``, so discord.py's own
stdlib records share the same format.

    root         → console (stderr), always
    cybernaut    → RotatingFileHandler → <log_dir>/cybernaut.log,
                   only once a Config is supplied

Subsystem loggers (cybernaut.bot, cybernaut.commands, cybernaut.timer)
only carry level overrides; they all write to the one combined file.
"""

import logging
import logging.handlers
import re
import sys
from typing import Any, Dict, Optional

import structlog

SUBSYSTEMS = ("bot", "commands", "timer")

LOGGER_PREFIX = "cybernaut"

_SECRET_PATTERNS = [
    # Discord bot tokens: base64 user id . timestamp . hmac
    re.compile(r"[MNO][A-Za-z\d_-]{23,27}\.[A-Za-z\d_-]{6}\.[A-Za-z\d_-]{27,40}"),
    # Authorization header values
    re.compile(r"\bBot\s+[A-Za-z\d_.-]{20,}"),
    re.compile(r"Bearer\s+[A-Za-z\d_./-]{20,}"),
]

_REDACTED = "***REDACTED***"


def _scrub_value(value: str) -> str:
    for pattern in _SECRET_PATTERNS:
        value = pattern.sub(_REDACTED, value)
    return value


def sanitize_secrets(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """structlog processor that scrubs Discord tokens from log events.

    Walks all string values in the event dict (including one level of
    list/tuple/dict nesting) and replaces matches with a placeholder.
    """
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _scrub_value(value)
        elif isinstance(value, (list, tuple)):
            event_dict[key] = type(value)(
                _scrub_value(v) if isinstance(v, str) else v
                for v in value
            )
        elif isinstance(value, dict):
            event_dict[key] = {
                k: _scrub_value(v) if isinstance(v, str) else v
                for k, v in value.items()
            }
    return event_dict


def _level(name: Any, default: int = logging.INFO) -> int:
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def _formatter(colors: bool) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=colors),
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    )


def _file_handler(config) -> Optional[logging.Handler]:
    """Combined rotating log file, or None if the directory is unusable."""
    log_dir = config.log_dir
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_dir / "cybernaut.log",
            maxBytes=config.logging_max_file_size_mb * 1024 * 1024,
            backupCount=config.logging_backup_count,
            encoding="utf-8",
        )
    except OSError as exc:
        print(
            f"WARNING: Cannot write logs to {log_dir}: {exc}. "
            "Falling back to console-only logging.",
            file=sys.stderr,
        )
        return None
    handler.setFormatter(_formatter(colors=False))
    return handler


def setup_logging(config=None) -> None:
    """Configure structlog and the stdlib handlers behind it.

    Args:
        config: Optional Config. Without one only the console handler is
            installed and nothing touches the filesystem; the timer and
            the bot's pre-config phase run this way. With one, the
            configured level, subsystem overrides and the combined log
            file are applied, and loggers are cached on first use.
    """
    root_level = _level(config.logging_level) if config is not None else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_formatter(colors=sys.stderr.isatty()))
    root_logger.addHandler(console_handler)

    app_logger = logging.getLogger(LOGGER_PREFIX)
    app_logger.handlers.clear()
    app_logger.setLevel(logging.NOTSET)
    for subsystem in SUBSYSTEMS:
        logging.getLogger(f"{LOGGER_PREFIX}.{subsystem}").setLevel(logging.NOTSET)

    if config is not None:
        for subsystem, level_name in (config.logging_subsystem_levels or {}).items():
            logging.getLogger(f"{LOGGER_PREFIX}.{subsystem}").setLevel(
                _level(level_name, root_level)
            )
        file_handler = _file_handler(config)
        if file_handler is not None:
            app_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            sanitize_secrets,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=config is not None,
    )
