"""Persistent application settings kept in an INI file."""

from __future__ import annotations

import configparser
import os
from typing import Any

from platformdirs import user_data_dir

__all__ = ["SettingsHelper"]

_SECTION = "General"


def _complete_base_name(path: str) -> str:
    """File name without its last suffix (``app.tar.gz`` gives ``app.tar``)."""
    name = os.path.basename(path)
    base, dot, _ = name.rpartition(".")
    return base if dot else name


def _serialize(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() not in ("", "0", "false")


class SettingsHelper:
    """Stores key/value settings in ``<app base name>.ini``."""

    def __init__(self) -> None:
        self._path: str | None = None
        self._parser: configparser.ConfigParser | None = None

    @property
    def path(self) -> str | None:
        """Path of the INI file, once :meth:`init` has run."""
        return self._path

    def init(self, app_path: str, directory: str | None = None) -> None:
        """Open the settings file named after the executable at ``app_path``."""
        base = _complete_base_name(app_path)
        if directory is None:
            directory = user_data_dir(base or "app", appauthor=False)
        self._path = os.path.join(directory, base + ".ini")
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str  # keep keys case-sensitive
        parser.read(self._path, encoding="utf-8")
        self._parser = parser

    def _require(self) -> configparser.ConfigParser:
        if self._parser is None or self._path is None:
            raise RuntimeError("settings are not initialised; call init() first")
        return self._parser

    def save(self, key: str, value: Any) -> None:
        parser = self._require()
        if not parser.has_section(_SECTION):
            parser.add_section(_SECTION)
        parser.set(_SECTION, key, _serialize(value))
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as handle:
            parser.write(handle)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored text for ``key``, or ``default`` if it is not set."""
        parser = self._require()
        value = parser.get(_SECTION, key, fallback=None)
        return default if value is None else value

    def save_dark_mode(self, dark_mode: int) -> None:
        self.save("darkMode", int(dark_mode))

    def get_dark_mode(self) -> int:
        return _to_int(self.get("darkMode", 0))

    def save_use_system_app_bar(self, use_system_app_bar: bool) -> None:
        self.save("useSystemAppBar", bool(use_system_app_bar))

    def get_use_system_app_bar(self) -> bool:
        return _to_bool(self.get("useSystemAppBar", False))

    def save_language(self, language: str) -> None:
        self.save("language", language)

    def get_language(self) -> str:
        return str(self.get("language", "en_US"))