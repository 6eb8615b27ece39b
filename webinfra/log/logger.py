"""
Logger class for the logging system.

Extends the standard logger with pre-populated extra fields, a TRACE level,
and "view" loggers that share their root's handlers.
"""

import collections
import logging
from typing import Any

from .config import LogConfig
from .constants import LogConstants
from .formatters import EXTRA_ATTR


class Logger(logging.Logger):
    """
    Enhanced logger with structured extra fields.

    Every record carries the merge of the logger's pre-populated extra fields
    and the per-call ``extra=`` argument; the formatter renders them after the
    message.
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name (topic path such as "/webinfra/context")
            config: Logger configuration, default LogConfig if None
            extra: Pre-populated extra fields to include in all log records
        """
        if config is None:
            config = LogConfig()

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # set for derived "view" loggers

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self._extra)

    def get_level(self) -> int | bool:
        """Get configured log level."""
        return self._config.level

    def isEnabledFor(self, level: int) -> bool:
        if self._logging_disabled:
            return False
        if not super().isEnabledFor(level):
            return False
        # View loggers also respect their parent chain
        if isinstance(self.parent, Logger):
            return self.parent.isEnabledFor(level)
        return True

    def _merge_extra(
        self, extra: dict[str, Any] | collections.OrderedDict | None
    ) -> dict[str, Any] | collections.OrderedDict:
        """Merge pre-populated extra fields with per-call extra fields."""
        merged: dict[str, Any] | collections.OrderedDict
        if isinstance(self._extra, collections.OrderedDict) or isinstance(
            extra, collections.OrderedDict
        ):
            merged = collections.OrderedDict(self._extra)
        else:
            merged = dict(self._extra)
        if extra:
            merged.update(extra)
        return merged

    def makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        merged = self._merge_extra(extra)
        # Extra fields are kept off the record's attribute namespace so keys
        # such as "message" or "name" cannot collide with LogRecord fields.
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        setattr(record, EXTRA_ATTR, merged)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a TRACE level message.

        Args:
            msg: Log message
            *args: Message format arguments
            **kwargs: Additional keyword arguments including 'extra' for structured data
        """
        if self.isEnabledFor(LogConstants.TRACE):
            self._log(LogConstants.TRACE, msg, args, **kwargs)

    def callHandlers(self, record: logging.LogRecord) -> None:
        """
        Pass a record to all relevant handlers.

        Derived "view" loggers delegate to the root logger's handlers instead
        of owning any themselves.
        """
        if self._root_logger is not None:
            for handler in self._root_logger.handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        else:
            super().callHandlers(record)
