# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Live editor configuration and its fail-closed readers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from inkling.errors import ConfigurationUnavailable

_log = logging.getLogger(__name__)

EDITOR_SECTION = "editor"
EXPERIMENTS_SECTION = "inkling.experiments"
PREVIEW_KEY = "preview"
TAB_SIZE_KEY = "tabSize"
AUTO_CLOSING_BRACKETS_KEY = "autoClosingBrackets"
SHOW_METHODS_KEY = "suggest.showMethods"

DEFAULT_TAB_SIZE = 4

# Written once at startup so completion widgets show inline suggestions.
EDITOR_DEFAULTS: tuple[tuple[str, Any], ...] = (
    ("suggest.showMethods", True),
    ("suggest.preview", True),
    ("acceptSuggestionOnEnter", "on"),
    ("snippetSuggestions", "top"),
)


class Configuration(Protocol):
    """Sectioned settings owned by the host. Values may change at any time."""

    def get(self, section: str, key: str) -> Any:
        """Current value or None. May raise ConfigurationUnavailable."""
        ...

    async def update(self, section: str, key: str, value: Any) -> None:
        """Write a value at global scope."""
        ...


class SettingsConfiguration:
    """In-process configuration keyed by section, then dotted key."""

    def __init__(self, sections: dict[str, dict[str, Any]] | None = None) -> None:
        self._sections: dict[str, dict[str, Any]] = {
            name: dict(values) for name, values in (sections or {}).items()
        }

    @classmethod
    def from_file(cls, path: Path) -> SettingsConfiguration:
        """Load `{"section": {"key": value}}` from a JSON settings file.

        A missing file yields empty settings. An unreadable one raises
        ConfigurationUnavailable.
        """
        if not path.is_file():
            return cls()
        try:
            obj = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationUnavailable(f"cannot read {path}: {exc}") from exc
        if not isinstance(obj, dict):
            raise ConfigurationUnavailable(f"{path}: top level is not an object")
        sections = {k: v for k, v in obj.items() if isinstance(v, dict)}
        return cls(sections)

    def get(self, section: str, key: str) -> Any:
        return self._sections.get(section, {}).get(key)

    async def update(self, section: str, key: str, value: Any) -> None:
        self._sections.setdefault(section, {})[key] = value

    def set(self, section: str, key: str, value: Any) -> None:
        """Synchronous write, for hosts that push changes in."""
        self._sections.setdefault(section, {})[key] = value


def read_value(config: Configuration, section: str, key: str, default: Any = None) -> Any:
    """Read a setting. Unavailable or missing means default."""
    try:
        value = config.get(section, key)
    except ConfigurationUnavailable as exc:
        _log.debug("configuration %s.%s unavailable: %s", section, key, exc)
        return default
    return default if value is None else value


def read_flag(config: Configuration, section: str, key: str) -> bool:
    """Boolean setting, fail-closed."""
    return read_value(config, section, key, False) is True


def preview_enabled(config: Configuration) -> bool:
    return read_flag(config, EXPERIMENTS_SECTION, PREVIEW_KEY)


def auto_closing_brackets_enabled(config: Configuration) -> bool:
    # The editor stores a mode string ("always", "languageDefined", ...)
    # or a bool depending on version. Anything but "never"/False counts.
    value = read_value(config, EDITOR_SECTION, AUTO_CLOSING_BRACKETS_KEY, False)
    if isinstance(value, str):
        return value != "never"
    return value is True


@dataclass
class EditorContext:
    """Editor facts the suggestion layer needs outside a request."""

    tab_size: int = DEFAULT_TAB_SIZE

    def update_tab_size(self, config: Configuration) -> None:
        size = read_value(config, EDITOR_SECTION, TAB_SIZE_KEY, DEFAULT_TAB_SIZE)
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            size = DEFAULT_TAB_SIZE
        self.tab_size = size


async def enable_default_config(config: Configuration) -> None:
    """Turn on the editor settings inline suggestions rely on."""
    for key, value in EDITOR_DEFAULTS:
        try:
            await config.update(EDITOR_SECTION, key, value)
        except ConfigurationUnavailable as exc:
            _log.warning("could not set %s.%s: %s", EDITOR_SECTION, key, exc)
