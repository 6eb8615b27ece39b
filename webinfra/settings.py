"""
Key-value settings stores.

The context loader publishes merged configuration into a Settings store and
downstream components (WebConfig, environment detection) read from one.
EnvironSettings is the process-wide store, backed by os.environ so that
settings published by the loader are visible to subprocesses and to code
that reads the environment directly. MemorySettings is an isolated store for
tests and embedded use.
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, MutableMapping
from typing import Any

# Ambient signal: presence switches the suite into pipeline mode
TEST_ENVIRONMENT = "testEnvironment"

# Settings published from context configuration
GUI_LANG = "web.gui.lang"
APP_URL = "web.app.url"
BROWSERS_CONFIG = "web.browsers.config"
HUB_USE = "test.hub.use"
HUB_URL = "test.hub.url"
HUB_NAME = "test.hub.name"
HUB_OWNER = "test.hub.owner"

# Local execution and SauceLabs credentials
BROWSER = "browser"
EXECUTION_MODE = "execution.mode"
HEADLESS = "headless"
SAUCE_USERNAME = "sauce.username"
SAUCE_ACCESS_KEY = "sauce.accessKey"
SAUCE_TEST_NAME = "sauce.testName"
SAUCE_BUILD_NAME = "sauce.buildName"

# Overrides for CI detection
FORCE_LOCAL = "force.local"
FORCE_PIPELINE = "force.pipeline"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class Settings(ABC):
    """
    Abstract dictionary-like store of string settings.

    Subclasses provide the backing mapping; all accessors are implemented
    on top of it.
    """

    @abstractmethod
    def _mapping(self) -> MutableMapping[str, str]:
        """Return the backing mapping."""
        pass  # pragma: no cover

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a setting, or ``default`` when it is unset."""
        return self._mapping().get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """
        Get a setting interpreted as a boolean.

        Unset or empty settings return ``default``; otherwise "true", "1",
        "yes" and "on" (any case) are true and everything else is false.
        """
        value = self.get(key)
        if value is None or value == "":
            return default
        return value.strip().lower() in _TRUE_VALUES

    def get_first(self, *keys: str, default: str | None = None) -> str | None:
        """Return the first non-empty value among ``keys``."""
        for key in keys:
            value = self.get(key)
            if value:
                return value
        return default

    def set(self, key: str, value: Any) -> None:
        """Set a setting; non-string values are stored as strings."""
        self._mapping()[key] = value if isinstance(value, str) else str(value)

    def unset(self, key: str) -> None:
        """Remove a setting if present."""
        self._mapping().pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._mapping()

    def keys(self) -> list[str]:
        return list(self._mapping().keys())

    def __contains__(self, key: object) -> bool:
        return key in self._mapping()

    def __getitem__(self, key: str) -> str:
        return self._mapping()[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        del self._mapping()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._mapping()))

    def __len__(self) -> int:
        return len(self._mapping())


class EnvironSettings(Settings):
    """Process-wide settings backed by os.environ."""

    def _mapping(self) -> MutableMapping[str, str]:
        return os.environ

    def __repr__(self) -> str:
        return "EnvironSettings()"


class MemorySettings(Settings):
    """
    In-memory settings store.

    Example:
        settings = MemorySettings({"testEnvironment": "staging-ta"})
        loader = ContextConfigLoader(source, settings)
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def _mapping(self) -> MutableMapping[str, str]:
        return self._data

    def to_dict(self) -> dict[str, str]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"MemorySettings({self._data!r})"
