"""Logging for remotecache.

Provides:
- setup_logging() that attaches a RichHandler to the package logger
- get_logger() factory that keeps loggers under the remotecache namespace

Library code only calls get_logger(); the CLI calls setup_logging() once.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER_NAME = "remotecache"
LOG_LEVEL_ENV_VAR = "REMOTE_MEDIA_CACHE_LOG_LEVEL"

_console: Console | None = None


def get_console() -> Console:
    """Get the shared stderr console used for logs and progress bars."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def resolve_log_level(log_level: str | None = None) -> int:
    """Resolve a level name, falling back to the env var and then INFO."""
    name = (log_level or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str | None = None) -> None:
    """Configure console logging for the remotecache package.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR). Defaults to
            the REMOTE_MEDIA_CACHE_LOG_LEVEL env var, then INFO.
    """
    level = resolve_log_level(log_level)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Clear existing handlers so repeated CLI invocations don't duplicate output
    root_logger.handlers.clear()

    handler = RichHandler(
        console=get_console(),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    handler.setLevel(level)
    root_logger.addHandler(handler)

    for noisy_logger in ["httpx", "httpcore"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the remotecache namespace.

    Args:
        name: Logger name (usually __name__).
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
