from importlib.metadata import PackageNotFoundError, version

from .context import (
    SAUCELABS_KEY,
    ContextConfigLoader,
    ContextSource,
    DictContextSource,
    FileContextSource,
)
from .environment import detected_ci_system, is_running_in_pipeline, is_running_locally
from .exceptions import ConfigError, ContextSourceError, ValidationError, WebInfraError
from .settings import TEST_ENVIRONMENT, EnvironSettings, MemorySettings, Settings
from .web import BrowserConfig, BrowserConfigLoader, BrowserType, ExecutionMode, WebConfig

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("webinfra")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    # Context configuration
    "ContextConfigLoader",
    "ContextSource",
    "DictContextSource",
    "FileContextSource",
    "SAUCELABS_KEY",
    # Settings
    "Settings",
    "EnvironSettings",
    "MemorySettings",
    "TEST_ENVIRONMENT",
    # Environment detection
    "is_running_in_pipeline",
    "is_running_locally",
    "detected_ci_system",
    # Web configuration
    "BrowserConfig",
    "BrowserConfigLoader",
    "BrowserType",
    "ExecutionMode",
    "WebConfig",
    # Exceptions
    "WebInfraError",
    "ConfigError",
    "ContextSourceError",
    "ValidationError",
]
