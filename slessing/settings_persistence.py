"""Persistence for the editor's color configuration.

Colors are stored as a flat JSON object of named color pairs, one pair per
display role, in an OS-appropriate config directory. When no file exists
yet the defaults are written out on first load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .styles import PALETTE, Role, Style, StyleSet

logger = logging.getLogger(__name__)


# Flat config keys for each role's (foreground, background)
CONFIG_KEYS: Dict[Role, tuple[str, str]] = {
    Role.MAIN: ("fg_color", "bg_color"),
    Role.STATUS: ("status_fg_color", "status_bg_color"),
    Role.MESSAGE: ("msg_fg_color", "msg_bg_color"),
    Role.LINECOUNT: ("line_count_fg_color", "line_count_bg_color"),
    Role.ERROR: ("error_fg_color", "error_bg_color"),
}


def styles_to_dict(styles: StyleSet) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for role, (fg_key, bg_key) in CONFIG_KEYS.items():
        data[fg_key] = styles[role].fg
        data[bg_key] = styles[role].bg
    return data


def styles_from_dict(data: Dict[str, Any]) -> StyleSet:
    """Build a StyleSet from a flat dict, falling back to defaults per key."""
    defaults = StyleSet()
    styles = {}
    for role, (fg_key, bg_key) in CONFIG_KEYS.items():
        fg = _valid_color(data.get(fg_key), fg_key, defaults[role].fg)
        bg = _valid_color(data.get(bg_key), bg_key, defaults[role].bg)
        styles[role] = Style(fg=fg, bg=bg)
    return StyleSet(styles)


def _valid_color(value: Any, key: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in PALETTE:
        logger.warning(f"Unknown color {value!r} for {key}, using {default}")
        return default
    return value


class StylePersistence:
    """Loads and saves the color configuration file."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize style persistence.

        Args:
            config_dir: Directory for the config file. Defaults to the
                platform's user config directory.
        """
        self._config_dir = Path(config_dir or platformdirs.user_config_dir(EditorConstants.APP_NAME))
        self._config_file = self._config_dir / EditorConstants.CONFIG_FILENAME
        self._cache: Optional[StyleSet] = None

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _ensure_config_dir(self) -> bool:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")
            return False

    def load(self) -> StyleSet:
        """Load the configured styles.

        A missing file is created with the defaults. An unreadable or
        malformed file yields the defaults without overwriting it.
        """
        if self._cache is not None:
            return self._cache.copy()

        if not self._config_file.exists():
            styles = StyleSet()
            self.save(styles)
            self._cache = styles
            return styles.copy()

        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load styles from {self._config_file}: {e}")
            self._cache = StyleSet()
            return self._cache.copy()

        if not isinstance(data, dict):
            logger.warning("Config file has invalid format (not a dict), using defaults")
            self._cache = StyleSet()
            return self._cache.copy()

        self._cache = styles_from_dict(data)
        return self._cache.copy()

    def save(self, styles: StyleSet) -> bool:
        """Save styles atomically.

        Returns:
            True if the file was written.
        """
        if not self._ensure_config_dir():
            return False

        temp_file = self._config_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(styles_to_dict(styles), f, indent=2)
            temp_file.replace(self._config_file)
        except OSError as e:
            logger.warning(f"Could not save styles to {self._config_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

        self._cache = styles.copy()
        return True

    def clear_cache(self) -> None:
        """Clear the in-memory copy of the configuration."""
        self._cache = None
