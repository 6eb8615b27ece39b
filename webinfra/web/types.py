"""
Browser and execution mode enumerations.
"""

from enum import Enum
from typing import TypeVar

from ..exceptions import ValidationError

_E = TypeVar("_E", bound=Enum)


# W3C capability names that differ from the member values
_BROWSER_ALIASES = {
    "microsoftedge": "edge",
    "internet explorer": "ie",
    "internetexplorer": "ie",
}


def _lookup(
    enum_cls: type[_E],
    name: str | None,
    default: _E,
    kind: str,
    aliases: dict[str, str] | None = None,
) -> _E:
    """Case-insensitive lookup by value, member name or alias."""
    if not name:
        return default
    wanted = name.strip().lower()
    wanted = (aliases or {}).get(wanted, wanted)
    for member in enum_cls:
        if member.value == wanted or member.name.lower() == wanted:
            return member
    raise ValidationError(f"Unknown {kind}: {name}", name=name)


class BrowserType(Enum):
    """
    Supported browsers.

    Example:
        >>> BrowserType.from_string("Firefox")
        <BrowserType.FIREFOX: 'firefox'>
        >>> BrowserType.from_string(None)
        <BrowserType.CHROME: 'chrome'>
    """

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    SAFARI = "safari"
    IE = "ie"

    @classmethod
    def from_string(cls, name: str | None) -> "BrowserType":
        """
        Resolve a browser name; None or empty resolves to CHROME.

        W3C names such as "MicrosoftEdge" and "internet explorer" are accepted.

        Raises:
            ValidationError: If the name matches no browser
        """
        return _lookup(cls, name, cls.CHROME, "browser type", _BROWSER_ALIASES)


class ExecutionMode(Enum):
    """Where the browser runs: on this machine, on SauceLabs, or on another grid."""

    LOCAL = "local"
    SAUCELABS = "saucelabs"
    REMOTE = "remote"

    @classmethod
    def from_string(cls, name: str | None) -> "ExecutionMode":
        """
        Resolve an execution mode name; None or empty resolves to LOCAL.

        Raises:
            ValidationError: If the name matches no execution mode
        """
        return _lookup(cls, name, cls.LOCAL, "execution mode")
