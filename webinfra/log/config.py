"""
Immutable logger configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable configuration for loggers created by LoggerFactory.

    Attributes:
        level: Numeric log level, or False to disable logging
        location: Whether to append the caller's file:line to each message
        micros: Whether timestamps carry microseconds
        colors: Whether to emit ANSI colours
    """

    level: int | bool = logging.INFO
    location: bool = False
    micros: bool = False
    colors: bool = False

    @staticmethod
    def _resolve_level(level: str | int | bool) -> int | bool:
        """Resolve level parameter to int or False."""
        if isinstance(level, bool):
            return False if not level else logging.INFO
        if isinstance(level, str):
            if level.isnumeric():
                return int(level)
            if level.lower() in LogConstants.LEVEL_NAMES:
                return LogConstants.LEVEL_NAMES[level.lower()]
            raise InvalidLogLevelError(level)
        return level

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        location: bool = False,
        micros: bool = False,
        colors: bool = False,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            location: Whether to show the caller location
            micros: Whether to show microsecond precision
            colors: Whether to enable coloured output

        Returns:
            LogConfig instance

        Raises:
            InvalidLogLevelError: If the level name is unknown
        """
        return cls(
            level=cls._resolve_level(level),
            location=bool(location),
            micros=micros,
            colors=colors,
        )

    @classmethod
    def from_config(cls, config_dict: dict[str, Any], section: str = "logging") -> LogConfig:
        """
        Create LogConfig from a nested configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g. parsed YAML)
            section: Dotted path of the logging section (default: "logging")

        Returns:
            LogConfig instance; missing sections fall back to defaults

        Example:
            log_config = LogConfig.from_config({"logging": {"level": "debug"}})
        """
        current: Any = config_dict
        for part in section.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                current = {}
                break

        level = current.get("level", "info")
        if level == "false":
            level = False

        return cls.from_params(
            level=level,
            location=current.get("location", False),
            micros=current.get("microseconds", current.get("micros", False)),
            colors=current.get("colors", False),
        )
