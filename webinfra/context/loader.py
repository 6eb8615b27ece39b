"""
Context configuration loader.

Resolves the configuration of a pipeline test run from a context document and
publishes it into a settings store. For an environment such as "staging-ta"
and a config key such as "chrome-fr", three layers are merged, later layers
winning on key collisions:

    1. the "_saucelabs" overlay (environment independent)
    2. scalar entries of the environment
    3. entries of the environment's config key

Missing files, environments or config keys never raise; they only shrink the
merged result.
"""

import threading
from typing import Any, Optional

from ..log import Logger, get_library_lg
from ..settings import TEST_ENVIRONMENT, EnvironSettings, Settings
from .source import ContextSource, FileContextSource


def _to_setting(value: Any) -> str:
    """Convert a context value to its settings string form."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_to_setting(v) for v in value)
    return str(value)


def _add_layer(merged: dict[str, str], layer: dict[str, Any] | None) -> int:
    """Overlay ``layer`` onto ``merged``; returns the number of entries added."""
    if not layer:
        return 0
    for key, value in layer.items():
        merged[str(key)] = _to_setting(value)
    return len(layer)


class ContextConfigLoader:
    """
    Merges context configuration and publishes it as settings.

    A process-wide instance is available through get_instance(); tests either
    construct loaders with explicit collaborators or call reset_instance()
    between cases.

    Note:
        load_config() writes to shared settings without synchronization.
        Callers running loaders from several threads must serialize access.

    Example:
        >>> loader = ContextConfigLoader.get_instance()
        >>> if loader.is_pipeline_mode():
        ...     loader.load_config(loader.get_test_environment(), "chrome-fr")
    """

    _instance: Optional["ContextConfigLoader"] = None
    _lock_class = threading.Lock()

    def __init__(
        self,
        source: ContextSource | None = None,
        settings: Settings | None = None,
        lg: Logger | None = None,
    ) -> None:
        """
        Args:
            source: Context source (default: FileContextSource on the default path)
            settings: Publish target and ambient signal (default: EnvironSettings)
            lg: Logger (default: the library "/webinfra/context" logger)
        """
        self._lg = lg if lg is not None else get_library_lg("context")
        self._source = source if source is not None else FileContextSource(lg=self._lg)
        self._settings = settings if settings is not None else EnvironSettings()

    @classmethod
    def get_instance(cls) -> "ContextConfigLoader":
        """
        Get the process-wide loader, creating it on first use.

        Repeated calls return the same object until reset_instance().
        """
        if cls._instance is None:
            with cls._lock_class:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def configure_instance(
        cls,
        source: ContextSource | None = None,
        settings: Settings | None = None,
        lg: Logger | None = None,
    ) -> "ContextConfigLoader":
        """Replace the process-wide loader with one built from the given collaborators."""
        with cls._lock_class:
            cls._instance = cls(source, settings, lg)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """
        Discard the process-wide loader.

        The next get_instance() call constructs a new loader. Published
        settings are left as they are.
        """
        with cls._lock_class:
            cls._instance = None

    @property
    def source(self) -> ContextSource:
        return self._source

    @property
    def settings(self) -> Settings:
        return self._settings

    def is_pipeline_mode(self) -> bool:
        """True when the testEnvironment signal is set and non-empty."""
        return bool(self._settings.get(TEST_ENVIRONMENT))

    def get_test_environment(self) -> str | None:
        """Current testEnvironment value, or None when unset."""
        return self._settings.get(TEST_ENVIRONMENT)

    def get_merged_config(
        self, environment: str | None, config_key: str | None
    ) -> dict[str, str]:
        """
        Merge configuration for ``environment`` and ``config_key``.

        Does not modify any settings. The context source is consulted on
        every call.

        Values are converted to strings: None becomes "", booleans become
        "true" or "false", and lists are joined with ",". Nested mappings
        inside a layer are ignored.

        Returns:
            Flattened mapping of setting name to string value; empty when the
            environment is not given. An unknown environment yields the
            SauceLabs overlay alone, an unknown config key the overlay plus
            the environment's scalar entries.
        """
        merged: dict[str, str] = {}
        if not environment:
            return merged

        snapshot = self._source.snapshot()
        if not snapshot:
            return merged

        count = _add_layer(merged, snapshot.saucelabs())
        self._lg.trace("added saucelabs properties", extra={"count": count})

        env_props = snapshot.environment(environment)
        if env_props is None:
            self._lg.warning("environment not found", extra={"env": environment})
            return merged
        count = _add_layer(merged, env_props)
        self._lg.trace("added environment properties", extra={"env": environment, "count": count})

        scope = snapshot.scope(environment, config_key)
        if scope is None:
            self._lg.warning(
                "config key not found",
                extra={"env": environment, "config_key": config_key},
            )
            return merged
        count = _add_layer(merged, scope)
        self._lg.trace("added config key properties", extra={"config_key": config_key, "count": count})

        return merged

    def load_config(self, environment: str | None, config_key: str | None) -> dict[str, str]:
        """
        Merge configuration and publish every merged entry as a setting.

        Settings not present in the merged mapping are left untouched. Nothing
        is published when ``environment`` or ``config_key`` is missing.

        Returns:
            The published mapping (empty when skipped). Keys the settings store
            rejects, such as names containing "=" for EnvironSettings, are
            logged and left out.
        """
        if not environment:
            self._lg.debug("no test environment, skipping context configuration")
            return {}

        if not config_key:
            self._lg.warning(
                "no config key, skipping context configuration",
                extra={"env": environment},
            )
            return {}

        merged = self.get_merged_config(environment, config_key)
        if not merged:
            self._lg.warning(
                "no context configuration found",
                extra={"env": environment, "config_key": config_key},
            )
            return merged

        published: dict[str, str] = {}
        for key, value in merged.items():
            # os.environ rejects names containing "=" and values containing NUL
            try:
                self._settings.set(key, value)
            except ValueError as e:
                self._lg.warning(
                    "skipping setting rejected by settings store",
                    extra={"key": key, "exception": e},
                )
                continue
            published[key] = value
            self._lg.trace("published setting", extra={"key": key})

        self._lg.info(
            "loaded context configuration",
            extra={"env": environment, "config_key": config_key, "count": len(published)},
        )
        return published

    def load_from_signal(self, config_key: str | None) -> dict[str, str]:
        """Load configuration for the environment named by the testEnvironment signal."""
        return self.load_config(self.get_test_environment(), config_key)
