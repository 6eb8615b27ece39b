"""
WebDriver configuration objects.

This package provides:
- BrowserType and ExecutionMode enumerations
- WebConfig, built from published settings
- BrowserConfig and BrowserConfigLoader for browser capability files
"""

from .browser_config import BrowserConfig, BrowserConfigLoader
from .config import WebConfig
from .types import BrowserType, ExecutionMode

__all__ = [
    "BrowserConfig",
    "BrowserConfigLoader",
    "BrowserType",
    "ExecutionMode",
    "WebConfig",
]
