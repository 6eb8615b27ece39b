"""
Browser capability configuration loaded from JSON files.

Pipeline runs point the "web.browsers.config" setting at a file such as
configuration/config_chrome_win10.json:

    {
      "browsers": [{
        "browserName": "chrome",
        "platformName": "WIN10",
        "sauce:options": {"screenResolution": "1920x1080", "parentTunnel": "TestAdmin"},
        "goog:chromeOptions": {"args": ["--disable-notifications"]}
      }]
    }

Local runs read debug_config.json:

    {"browser": "chrome", "cap": {"headless": false, "window_size": "1920x1080"}}

Missing or malformed files fall back to BrowserConfig.defaults().
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..log import Logger, get_library_lg

DEFAULT_BASE_DIR = os.path.join("src", "test", "resources")
DEFAULT_DEBUG_CONFIG = os.path.join(DEFAULT_BASE_DIR, "debug_config.json")

_DEFAULT_RESOLUTION = (1920, 1080)


def _default_chrome_args() -> list[str]:
    return ["--ignore-certificate-errors", "--disable-notifications", "--disable-popup-blocking"]


def _default_chrome_prefs() -> dict[str, Any]:
    return {"credentials_enable_service": False, "profile.password_manager_enabled": False}


@dataclass(frozen=True)
class BrowserConfig:
    """Browser capabilities for one session."""

    browser_name: str = "chrome"
    platform_name: str = "Windows 11"
    browser_version: str = "latest"
    headless: bool = False

    # sauce:options
    sauce_options: dict[str, Any] = field(default_factory=dict)
    extended_debugging: bool = True
    screen_resolution: str = "1920x1080"
    parent_tunnel: str | None = None
    tunnel_identifier: str | None = None
    idle_timeout: int = 300

    # goog:chromeOptions
    chrome_options: dict[str, Any] = field(default_factory=dict)
    chrome_args: list[str] = field(default_factory=list)
    chrome_prefs: dict[str, Any] = field(default_factory=dict)

    firefox_options: dict[str, Any] = field(default_factory=dict)
    edge_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def defaults(cls) -> BrowserConfig:
        return cls(chrome_args=_default_chrome_args(), chrome_prefs=_default_chrome_prefs())

    @property
    def window_dimensions(self) -> tuple[int, int]:
        """Screen resolution as (width, height), (1920, 1080) if unparsable."""
        width, sep, height = (self.screen_resolution or "").lower().partition("x")
        if not sep or not width.strip().isdigit() or not height.strip().isdigit():
            return _DEFAULT_RESOLUTION
        return int(width), int(height)

    def has_chrome_args(self) -> bool:
        return bool(self.chrome_args)

    def has_chrome_prefs(self) -> bool:
        return bool(self.chrome_prefs)

    def has_sauce_options(self) -> bool:
        return bool(self.sauce_options)


def _text(node: dict[str, Any], key: str, default: str | None) -> str | None:
    if key in node and node[key] is not None:
        return str(node[key])
    return default


def _flag(node: dict[str, Any], key: str, default: bool) -> bool:
    if key not in node:
        return default
    value = node[key]
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _int(node: dict[str, Any], key: str, default: int) -> int:
    try:
        return int(node[key])
    except (KeyError, TypeError, ValueError):
        return default


def _parse_pipeline(document: Any) -> BrowserConfig:
    """Build a BrowserConfig from the first entry of "browsers"."""
    if not isinstance(document, dict):
        return BrowserConfig.defaults()
    browsers = document.get("browsers")
    if not isinstance(browsers, list) or not browsers or not isinstance(browsers[0], dict):
        return BrowserConfig.defaults()

    node = browsers[0]
    values: dict[str, Any] = {
        "browser_name": _text(node, "browserName", "chrome"),
        "platform_name": _text(node, "platformName", "Windows 11"),
        "browser_version": _text(node, "browserVersion", "latest"),
    }

    sauce = node.get("sauce:options")
    if isinstance(sauce, dict):
        values.update(
            sauce_options=dict(sauce),
            extended_debugging=_flag(sauce, "extendedDebugging", True),
            screen_resolution=_text(sauce, "screenResolution", "1920x1080"),
            parent_tunnel=_text(sauce, "parentTunnel", None),
            tunnel_identifier=_text(sauce, "tunnelIdentifier", None),
            idle_timeout=_int(sauce, "idleTimeout", 300),
        )

    chrome = node.get("goog:chromeOptions")
    if isinstance(chrome, dict):
        chrome_options: dict[str, Any] = {}
        if isinstance(chrome.get("args"), list):
            chrome_options["args"] = [str(a) for a in chrome["args"]]
            values["chrome_args"] = list(chrome_options["args"])
        if isinstance(chrome.get("prefs"), dict):
            chrome_options["prefs"] = dict(chrome["prefs"])
            values["chrome_prefs"] = dict(chrome["prefs"])
        values["chrome_options"] = chrome_options

    for key, attr in (("moz:firefoxOptions", "firefox_options"), ("ms:edgeOptions", "edge_options")):
        if isinstance(node.get(key), dict):
            values[attr] = dict(node[key])

    return BrowserConfig(**values)


def _parse_local(document: dict[str, Any]) -> BrowserConfig:
    """Build a BrowserConfig from a debug_config.json document."""
    values: dict[str, Any] = {
        "browser_name": _text(document, "browser", "chrome"),
        "platform_name": "LOCAL",
    }

    cap = document.get("cap")
    if isinstance(cap, dict):
        args: list[str] = []
        if isinstance(cap.get("chrome_args"), list):
            args.extend(str(a) for a in cap["chrome_args"])

        for option, flags in (
            ("disable_notifications", ["--disable-notifications"]),
            ("disable_popup_blocking", ["--disable-popup-blocking"]),
            ("ignore_certificate_errors", ["--ignore-certificate-errors", "--ignore-ssl-errors=yes"]),
        ):
            if _flag(cap, option, True):
                args.extend(f for f in flags if f not in args)

        prefs: dict[str, Any] = {}
        if isinstance(cap.get("chrome_prefs"), dict):
            prefs.update(cap["chrome_prefs"])
        if _flag(cap, "disable_password_manager", True):
            prefs.setdefault("credentials_enable_service", False)
            prefs.setdefault("profile.password_manager_enabled", False)
            prefs.setdefault("profile.password_manager_leak_detection", False)

        values.update(
            headless=_flag(cap, "headless", False),
            screen_resolution=_text(cap, "window_size", "1920x1080"),
            chrome_args=args,
            chrome_prefs=prefs,
        )

    return BrowserConfig(**values)


class BrowserConfigLoader:
    """
    Loads browser configuration for pipeline and local runs.

    Pipeline configs are cached per path for the life of the loader.

    Example:
        >>> loader = BrowserConfigLoader.get_instance()
        >>> config = loader.load_pipeline_config("configuration/config_chrome_win10.json")
    """

    _instance: Optional["BrowserConfigLoader"] = None
    _lock_class = threading.Lock()

    def __init__(
        self,
        base_dir: str | Path = DEFAULT_BASE_DIR,
        debug_config_path: str | Path = DEFAULT_DEBUG_CONFIG,
        lg: Logger | None = None,
    ) -> None:
        """
        Args:
            base_dir: Directory pipeline config paths are relative to
            debug_config_path: Path of debug_config.json for local runs
            lg: Logger (default: the library "/webinfra/web" logger)
        """
        self._base_dir = Path(base_dir)
        self._debug_config_path = Path(debug_config_path)
        self._lg = lg if lg is not None else get_library_lg("web")
        self._cache: dict[str, BrowserConfig] = {}

    @classmethod
    def get_instance(cls) -> "BrowserConfigLoader":
        if cls._instance is None:
            with cls._lock_class:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Discard the shared loader and its cache."""
        with cls._lock_class:
            cls._instance = None

    def _read_json(self, path: Path) -> Any | None:
        """Parse a JSON file; None when missing or unreadable."""
        if not path.is_file():
            self._lg.warning("browser config file not found", extra={"path": str(path)})
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            self._lg.error(
                "failed to load browser config",
                extra={"path": str(path), "exception": e},
            )
            return None

    def load_pipeline_config(self, config_path: str | None) -> BrowserConfig:
        """
        Load a pipeline browser config relative to the base directory.

        Returns:
            Parsed configuration, or defaults when the path is empty or the
            file is missing or malformed
        """
        if not config_path:
            self._lg.warning("no browser config path, using defaults")
            return BrowserConfig.defaults()

        cached = self._cache.get(config_path)
        if cached is not None:
            return cached

        document = self._read_json(self._base_dir / config_path)
        if document is None:
            return BrowserConfig.defaults()

        config = _parse_pipeline(document)
        self._cache[config_path] = config
        self._lg.info(
            "loaded browser config",
            extra={
                "path": config_path,
                "browser": config.browser_name,
                "platform": config.platform_name,
            },
        )
        return config

    def load_local_config(self) -> BrowserConfig:
        """Load debug_config.json; defaults when missing or malformed."""
        document = self._read_json(self._debug_config_path)
        if not isinstance(document, dict):
            return BrowserConfig.defaults()

        config = _parse_local(document)
        self._lg.info("loaded local browser config", extra={"browser": config.browser_name})
        return config

    def clear_cache(self) -> None:
        self._cache.clear()
