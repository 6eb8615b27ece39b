"""
Factory for creating and configuring loggers.
"""

import collections
import logging
import sys
from typing import Any, TextIO

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(config: LogConfig, stream: TextIO | None = None) -> Logger:
        """
        Create the "/" root logger with the specified configuration.

        Example:
            >>> config = LogConfig.from_params(level="info")
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("suite started")
            [12:34:56,789] [I] suite started    [/]
        """
        return LoggerFactory.create("/", config, stream=stream)

    @staticmethod
    def _existing(name: str) -> Logger | None:
        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            return existing
        return None

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        stream: TextIO | None = None,
    ) -> Logger:
        """
        Create a logger owning a console handler.

        Returns the already registered logger when one exists under ``name``.

        Args:
            name: Logger name (topic path)
            config: Logger configuration
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream for the handler (default: sys.stderr)

        Returns:
            Configured logger instance
        """
        existing = LoggerFactory._existing(name)
        if existing is not None:
            return existing

        lg = Logger(name, config, extra)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setLevel(lg.level)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        logging.root.manager.loggerDict[name] = lg
        return lg

    @staticmethod
    def derive(
        parent: Logger,
        tags: str | list[str],
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ) -> Logger:
        """
        Derive a "view" logger that delegates to the root's handlers.

        Examples:
            >>> root = LoggerFactory.create("/webinfra", config)
            >>> LoggerFactory.derive(root, "context").name
            '/webinfra/context'
            >>> LoggerFactory.derive(root, ["web", "browser"]).name
            '/webinfra/web/browser'

        Args:
            parent: Parent logger instance
            tags: Single tag string or list of tags forming the hierarchy
            extra: Pre-populated extra fields for the derived logger

        Returns:
            Derived logger instance sharing the parent's configuration
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = LoggerFactory._existing(name)
        if existing is not None:
            return existing

        root = parent._root_logger if parent._root_logger is not None else parent
        lg = Logger(name, parent.config, extra)
        lg.setLevel(logging.NOTSET)
        lg._root_logger = root
        lg.parent = parent
        lg.propagate = False

        logging.root.manager.loggerDict[name] = lg
        return lg
