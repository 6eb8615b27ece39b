"""
Constants for the logging system.

Format strings, rule widths, the custom TRACE level and the level names
accepted by LogConfig and resolve_level().
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Messages are padded to this width before extra fields are appended
    DEFAULT_RULE_WIDTH: int = 70
    MICRO_RULE_WIDTH: int = 74

    TRACE: int = 5

    LEVEL_NAMES: dict[str, int | bool] = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "trace": 5,
        "false": False,  # disables logging entirely
    }

    # Library logger settings
    LIBRARY_ROOT: str = "/webinfra"
    LEVEL_ENV_VAR: str = "WEBINFRA_LOG_LEVEL"
    DEFAULT_LIBRARY_LEVEL: str = "warning"

    # ANSI escape sequences
    RESET: str = "\x1b[0m"
    LEVEL_COLORS: dict[int, str] = {
        logging.CRITICAL: "\x1b[35",
        logging.ERROR: "\x1b[31",
        logging.WARNING: "\x1b[33",
        logging.INFO: "\x1b[32",
        logging.DEBUG: "\x1b[36",
        5: "\x1b[90",
    }
    DEFAULT_COLOR: str = "\x1b[37"
