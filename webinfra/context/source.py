"""
Context configuration sources.

A context document maps environment names to configuration, plus one
environment-independent SauceLabs overlay:

    {
      "_saucelabs": {"sauce.username": "ci-bot"},
      "staging-ta": {
        "data.manager": "staging-data",
        "chrome-fr": {"web.gui.lang": "fr", "web.app.url": "https://..."}
      }
    }

Scalar entries directly under an environment apply to every config key of
that environment; object entries are config keys. Sources never raise for
missing environments, config keys or files: absence is reported as None or
an empty mapping.
"""

import copy
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..exceptions import ContextSourceError
from ..log import Logger, get_library_lg
from .constants import MAX_CONTEXT_SIZE_BYTES, SAUCELABS_KEY, get_context_file_path


def _scalars(section: dict[str, Any]) -> dict[str, Any]:
    """Return entries whose values are not nested mappings."""
    return {k: v for k, v in section.items() if not isinstance(v, dict)}


class ContextSnapshot:
    """
    Point-in-time view of a context document with keyed lookups.

    All lookups return copies, so callers may mutate results freely.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    def __bool__(self) -> bool:
        return bool(self._data)

    def saucelabs(self) -> dict[str, Any]:
        """Scalar entries of the SauceLabs overlay, empty if absent."""
        section = self._data.get(SAUCELABS_KEY)
        if not isinstance(section, dict):
            return {}
        return _scalars(section)

    def has_environment(self, environment: str | None) -> bool:
        return bool(environment) and isinstance(self._data.get(environment), dict)

    def environments(self) -> list[str]:
        """Names of all environments, excluding the overlay."""
        return [
            k for k, v in self._data.items() if k != SAUCELABS_KEY and isinstance(v, dict)
        ]

    def environment(self, environment: str | None) -> dict[str, Any] | None:
        """Scalar entries of an environment, or None if it does not exist."""
        if not self.has_environment(environment):
            return None
        return _scalars(self._data[environment])

    def config_keys(self, environment: str | None) -> list[str]:
        """Config keys defined under an environment."""
        if not self.has_environment(environment):
            return []
        return [k for k, v in self._data[environment].items() if isinstance(v, dict)]

    def scope(self, environment: str | None, config_key: str | None) -> dict[str, Any] | None:
        """Scalar entries of environment+config key, or None if either is missing."""
        if not config_key or not self.has_environment(environment):
            return None
        section = self._data[environment].get(config_key)
        if not isinstance(section, dict):
            return None
        return _scalars(section)


class ContextSource(ABC):
    """Keyed store of context configuration."""

    @abstractmethod
    def snapshot(self) -> ContextSnapshot:
        """
        Return the current contents of the source.

        Implementations must not raise for absent or unreadable data; they
        return an empty snapshot instead.
        """
        pass  # pragma: no cover

    def get_saucelabs(self) -> dict[str, Any]:
        return self.snapshot().saucelabs()

    def get_environment(self, environment: str | None) -> dict[str, Any] | None:
        return self.snapshot().environment(environment)

    def get_scope(self, environment: str | None, config_key: str | None) -> dict[str, Any] | None:
        return self.snapshot().scope(environment, config_key)

    def has_environment(self, environment: str | None) -> bool:
        return self.snapshot().has_environment(environment)

    def environments(self) -> list[str]:
        return self.snapshot().environments()


class DictContextSource(ContextSource):
    """
    In-memory context source.

    The document is held by reference; updates made through update() or to
    the original dict are visible to the next snapshot.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data if data is not None else {}

    def update(self, data: dict[str, Any]) -> None:
        """Replace the document."""
        self._data = data

    def snapshot(self) -> ContextSnapshot:
        return ContextSnapshot(copy.deepcopy(self._data))

    def __repr__(self) -> str:
        return f"DictContextSource(environments={self.snapshot().environments()!r})"


class FileContextSource(ContextSource):
    """
    Context source backed by a JSON or YAML file.

    The file is re-read on every snapshot so that edits between calls are
    picked up. Files ending in ".json" are parsed with the json module, all
    others with the YAML loader.

    Example:
        source = FileContextSource("src/test/resources/contexts/context.json")
        source.get_scope("staging-ta", "chrome-fr")
    """

    def __init__(self, path: str | Path | None = None, lg: Logger | None = None) -> None:
        """
        Args:
            path: Context file path (default: WEBINFRA_CONTEXT_FILE or DEFAULT_CONTEXT_FILE)
            lg: Logger (default: the library "/webinfra/context" logger)
        """
        self._path = Path(path) if path is not None else Path(get_context_file_path())
        self._lg = lg if lg is not None else get_library_lg("context")

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> dict[str, Any] | None:
        """
        Read and parse the context file.

        Returns:
            The parsed document, or None if the file does not exist

        Raises:
            ContextSourceError: If the file is too large, unreadable, malformed,
                or its top level is not a mapping
        """
        if not self._path.is_file():
            return None

        size = os.path.getsize(self._path)
        if size > MAX_CONTEXT_SIZE_BYTES:
            raise ContextSourceError(
                "context file exceeds maximum size",
                path=str(self._path),
                size=size,
                max_size=MAX_CONTEXT_SIZE_BYTES,
            )

        try:
            with open(self._path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ContextSourceError("unable to read context file", path=str(self._path)) from e

        if not text.strip():
            return {}

        try:
            if self._path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ContextSourceError("malformed context file", path=str(self._path)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ContextSourceError(
                "context file must contain a mapping",
                path=str(self._path),
                type=type(data).__name__,
            )
        return data

    def snapshot(self) -> ContextSnapshot:
        try:
            data = self.read()
        except ContextSourceError as e:
            self._lg.error("failed to load context file", extra={"exception": e})
            return ContextSnapshot()

        if data is None:
            self._lg.warning("context file not found", extra={"path": str(self._path)})
            return ContextSnapshot()

        self._lg.debug("loaded context file", extra={"path": str(self._path)})
        return ContextSnapshot(data)

    def __repr__(self) -> str:
        return f"FileContextSource({str(self._path)!r})"
