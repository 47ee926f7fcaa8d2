"""
Settings manager for the palette converter
Remembers picker directories and default output preferences between runs
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Optional

from .constants import DEFAULT_FORMAT
from .logging_config import get_logger
from .models import Endianness, PaletteFormat

logger = get_logger("settings")

SETTINGS_FILE_NAME = "settings.json"
HOME_OVERRIDE_ENV = "PALETTE_CONVERTER_HOME"

DEFAULT_SETTINGS: dict[str, Any] = {
    "last_input_dir": "",
    "last_output_dir": "",
    "preferences": {
        "default_format": DEFAULT_FORMAT,
        "default_endianness": Endianness.LITTLE.value,
    },
}


def _merge(defaults: dict[str, Any], stored: dict[str, Any]) -> dict[str, Any]:
    """Overlay stored values on a copy of the defaults, section by section"""
    merged = copy.deepcopy(defaults)
    for key, value in stored.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SettingsManager:
    """
    Persistent converter preferences.

    Settings live in %APPDATA%/<app_name>/settings.json on Windows and in
    ~/.<app_name>/settings.json elsewhere, unless PALETTE_CONVERTER_HOME
    names another directory. Keys are addressed with dots, e.g.
    "preferences.default_format".
    """

    def __init__(self, app_name="palette_converter"):
        self.app_name = app_name
        self.settings_file = self._get_settings_path()
        self.settings = self._load_settings()

    def _get_settings_path(self) -> Path:
        override = os.environ.get(HOME_OVERRIDE_ENV)
        if override:
            settings_dir = Path(override)
        elif os.name == "nt":
            settings_dir = Path(os.environ.get("APPDATA", Path.home())) / self.app_name
        else:
            settings_dir = Path.home() / f".{self.app_name}"

        settings_dir.mkdir(parents=True, exist_ok=True)
        return settings_dir / SETTINGS_FILE_NAME

    def _load_settings(self) -> dict[str, Any]:
        if not self.settings_file.exists():
            return copy.deepcopy(DEFAULT_SETTINGS)

        try:
            stored = json.loads(self.settings_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Ignoring unreadable settings file {self.settings_file}: {e}")
            stored = None

        if not isinstance(stored, dict):
            return copy.deepcopy(DEFAULT_SETTINGS)
        return _merge(DEFAULT_SETTINGS, stored)

    def save_settings(self):
        """Write the settings file; failures only cost the remembered values"""
        try:
            self.settings_file.write_text(json.dumps(self.settings, indent=2))
        except OSError as e:
            logger.debug(f"Could not save settings: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self.settings
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any):
        """Store a value under a dotted key and save immediately"""
        *sections, name = key.split(".")
        node = self.settings
        for part in sections:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[name] = value
        self.save_settings()

    def default_format(self) -> PaletteFormat:
        """Output format used when the command line names none"""
        return PaletteFormat.parse(self.get("preferences.default_format")) or PaletteFormat.HPL

    def default_endianness(self) -> Endianness:
        """HPL byte order used when --endianness is absent or unknown"""
        return Endianness.parse(self.get("preferences.default_endianness")) or Endianness.LITTLE

    def remember_input(self, path: Optional[str]):
        """Store the directory of a picked input for the next picker"""
        if path:
            directory = path if os.path.isdir(path) else os.path.dirname(path)
            self.set("last_input_dir", directory)

    def remember_output(self, path: Optional[str]):
        if path:
            self.set("last_output_dir", path)

    def reset_settings(self):
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.save_settings()


_settings_instance = None


def get_settings() -> SettingsManager:
    """Get the shared settings instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = SettingsManager()
    return _settings_instance
