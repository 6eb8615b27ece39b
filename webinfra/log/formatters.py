"""
Log record formatting.

Produces lines of the form:

    [12:34:56,789] [I] loaded context configuration    [env:staging-ta] [/webinfra/context]

Structured fields passed through ``extra=`` are rendered as ``[key:value]``
after the message instead of being interpolated into it.
"""

import collections
import logging
from typing import Any

from .config import LogConfig
from .constants import LogConstants

# Record attribute holding the merged extra fields (set by Logger)
EXTRA_ATTR = "__webinfra__extra"


def _format_value(key: str, value: Any) -> str:
    """Render one extra field."""
    if key == "exception" and isinstance(value, BaseException):
        return f"[{key}:{value.__class__.__name__}: {value}]"
    if isinstance(value, (list, tuple)):
        return f"[{key}:{','.join(str(v) for v in value)}]"
    return f"[{key}:{value}]"


def format_extra(extra: dict[str, Any] | None) -> str:
    """
    Render extra fields as a space separated list of ``[key:value]`` blocks.

    Plain dicts are rendered in sorted key order, OrderedDicts keep their order.
    """
    if not extra:
        return ""
    keys: Any = extra.keys()
    if not isinstance(extra, collections.OrderedDict):
        keys = sorted(keys)
    return " ".join(_format_value(key, extra[key]) for key in keys)


class LogFormatter(logging.Formatter):
    """Formatter rendering messages, extra fields and the logger topic."""

    def __init__(self, config: LogConfig) -> None:
        super().__init__(LogConstants.DEFAULT_FORMAT, datefmt="%H:%M:%S")
        self._config = config

    @property
    def config(self) -> LogConfig:
        return self._config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        base = super().formatTime(record, datefmt)
        if self._config.micros:
            return f"{base},{int(record.msecs * 1000) % 1000000:06d}"
        return f"{base},{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        width = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )

        # Exception text lives on following lines; pad only the first one
        first, sep, rest = line.partition("\n")
        parts = [first.ljust(width)]
        extra = format_extra(getattr(record, EXTRA_ATTR, None))
        if extra:
            parts.append(extra)
        parts.append(f"[{record.name}]")
        if self._config.location:
            parts.append(f"[{record.filename}:{record.lineno}]")
        first = " ".join(parts)

        if self._config.colors:
            color = LogConstants.LEVEL_COLORS.get(record.levelno, LogConstants.DEFAULT_COLOR)
            first = f"{color}m{first}{LogConstants.RESET}"

        return first + sep + rest
