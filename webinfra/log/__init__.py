"""
Logging for webinfra.

Thin layer over the standard logging module providing:
- A custom TRACE level below DEBUG
- Structured extra fields rendered after the message ([key:value])
- Topic-named loggers ("/webinfra/context") derived from one root

Library components log through get_library_lg(topic). The library root logger
"/webinfra" is created on first use with the level taken from the
WEBINFRA_LOG_LEVEL environment variable (default: warning), so a test run
stays quiet unless asked otherwise.
"""

import logging
import os
import threading

from .config import LogConfig
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter, format_extra
from .logger import Logger

logging.addLevelName(LogConstants.TRACE, "TRACE")

_library_lock = threading.Lock()


def resolve_level(s: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        s: Log level as string name, numeric value, or False to disable logging

    Returns:
        Numeric log level or False to disable logging

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    if isinstance(s, bool):
        return s

    if str(s).isnumeric():
        return int(s)

    name = str(s).lower()
    if name in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[name]

    raise InvalidLogLevelError(s)


def create_root_lg(
    level: str | int = "info",
    location: bool = False,
    micros: bool = False,
    colors: bool = False,
) -> Logger:
    """
    Create the "/" root logger.

    Example:
        >>> lg = create_root_lg("debug", location=True)
    """
    config = LogConfig.from_params(level, location=location, micros=micros, colors=colors)
    return LoggerFactory.create_root(config)


def get_library_lg(topic: str | list[str] | None = None) -> Logger:
    """
    Get the library logger, or a logger derived from it for ``topic``.

    Args:
        topic: Topic tag(s) below "/webinfra", e.g. "context" or ["web", "browser"]

    Returns:
        Logger named "/webinfra" or "/webinfra/<topic>"
    """
    with _library_lock:
        root = LoggerFactory._existing(LogConstants.LIBRARY_ROOT)
        if root is None:
            level = os.environ.get(LogConstants.LEVEL_ENV_VAR, LogConstants.DEFAULT_LIBRARY_LEVEL)
            root = LoggerFactory.create(LogConstants.LIBRARY_ROOT, LogConfig.from_params(level))
    if not topic:
        return root
    return LoggerFactory.derive(root, topic)


__all__ = [
    "InvalidLogLevelError",
    "LogConfig",
    "LogConstants",
    "LogError",
    "LogFormatter",
    "Logger",
    "LoggerFactory",
    "create_root_lg",
    "format_extra",
    "get_library_lg",
    "resolve_level",
]
