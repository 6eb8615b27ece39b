"""
Unified exception hierarchy for webinfra.

All library errors derive from WebInfraError so callers can catch every
library failure with a single except clause. Configuration absence (unknown
environment, missing context file, empty config key) is never reported
through these exceptions; it degrades to empty data instead.
"""

from typing import Any


class WebInfraError(Exception):
    """
    Base exception for all webinfra errors.

    Example:
        try:
            config = WebConfig.from_settings(settings)
        except WebInfraError as e:
            lg.error("bad web configuration", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(WebInfraError):
    """
    Configuration-related errors.

    Examples:
        - SauceLabs hub URL requested without credentials
        - Unsupported context file format
    """

    pass


class ContextSourceError(ConfigError):
    """
    A context document could not be read.

    Raised by FileContextSource.read() for unreadable, malformed or oversized
    files. Lookup methods on the source catch it and report "no data".
    """

    pass


class ValidationError(WebInfraError):
    """
    Input validation errors.

    Examples:
        - Unknown browser type name
        - Unknown execution mode name
    """

    pass
