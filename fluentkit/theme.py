"""Application theme: dark mode, accent colour and the derived palette."""

from __future__ import annotations

import os
import threading
from enum import IntEnum
from typing import Callable

from fluentkit.colors import AccentColor, Color, get_colors, with_opacity
from fluentkit.tools import get_wallpaper_file_path

__all__ = ["DarkMode", "Theme", "system_dark"]


class DarkMode(IntEnum):
    """How the theme decides between light and dark."""

    SYSTEM = 0
    LIGHT = 1
    DARK = 2


def system_dark(window_color: Color) -> bool:
    """Return True if a system window background of this colour counts as dark."""
    luminance = (
        window_color.r * 0.2126 + window_color.g * 0.7152 + window_color.b * 0.0722
    )
    return luminance <= 255.0 / 2


class _Signal:
    """A minimal list of callbacks fired together."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], object]] = []

    def connect(self, callback: Callable[[], object]) -> None:
        self._callbacks.append(callback)

    def disconnect(self, callback: Callable[[], object]) -> None:
        self._callbacks.remove(callback)

    def emit(self) -> None:
        for callback in list(self._callbacks):
            callback()


def _mtime(path: str) -> float | None:
    if not path:
        return None
    try:
        return os.stat(path).st_mtime_ns
    except OSError:
        return None


class Theme:
    """Holds the theme settings and the colours that follow from them."""

    def __init__(
        self,
        *,
        accent_color: AccentColor | None = None,
        system_window_color: Color | None = None,
        wallpaper_provider: Callable[[], str] | None = None,
    ) -> None:
        self.dark_changed = _Signal()
        self.desktop_image_path_changed = _Signal()
        colors = get_colors()
        self._accent_color = accent_color if accent_color is not None else colors.blue
        self._dark_mode = DarkMode.LIGHT
        self.native_text = False
        self.animation_enabled = True
        self._system_dark = system_dark(
            system_window_color if system_window_color is not None else colors.white
        )
        self._desktop_image_path = ""
        self._blur_behind_window_enabled = False
        self._wallpaper_provider = wallpaper_provider or get_wallpaper_file_path
        self._lock = threading.RLock()
        self._watched_mtime: float | None = None
        self._poll_stop: threading.Event | None = None
        self._poll_thread: threading.Thread | None = None
        self.refresh_colors()
        self.dark_changed.connect(self.refresh_colors)

    @property
    def dark(self) -> bool:
        if self._dark_mode == DarkMode.DARK:
            return True
        if self._dark_mode == DarkMode.SYSTEM:
            return self._system_dark
        return False

    @property
    def dark_mode(self) -> DarkMode:
        return self._dark_mode

    @dark_mode.setter
    def dark_mode(self, value: int) -> None:
        self._dark_mode = DarkMode(value)
        self.dark_changed.emit()

    @property
    def accent_color(self) -> AccentColor:
        return self._accent_color

    @accent_color.setter
    def accent_color(self, value: AccentColor) -> None:
        self._accent_color = value
        self.refresh_colors()

    @property
    def desktop_image_path(self) -> str:
        return self._desktop_image_path

    @desktop_image_path.setter
    def desktop_image_path(self, value: str) -> None:
        self._desktop_image_path = value
        self.desktop_image_path_changed.emit()

    @property
    def blur_behind_window_enabled(self) -> bool:
        return self._blur_behind_window_enabled

    @blur_behind_window_enabled.setter
    def blur_behind_window_enabled(self, value: bool) -> None:
        self._blur_behind_window_enabled = bool(value)
        self.check_update_desktop_image()

    def refresh_colors(self) -> None:
        """Recompute every derived colour from the accent and the dark flag."""
        is_dark = self.dark
        accent = self._accent_color
        self.primary_color = accent.lighter if is_dark else accent.dark
        self.background_color = Color(0, 0, 0) if is_dark else Color(255, 255, 255)
        self.divider_color = Color(80, 80, 80) if is_dark else Color(210, 210, 210)
        self.window_background_color = Color(32, 32, 32) if is_dark else Color(237, 237, 237)
        self.window_active_background_color = (
            Color(26, 26, 26) if is_dark else Color(243, 243, 243)
        )
        self.font_primary_color = Color(248, 248, 248) if is_dark else Color(7, 7, 7)
        self.font_secondary_color = Color(222, 222, 222) if is_dark else Color(102, 102, 102)
        self.font_tertiary_color = Color(200, 200, 200) if is_dark else Color(153, 153, 153)
        self.item_normal_color = Color(255, 255, 255, 0) if is_dark else Color(0, 0, 0, 0)
        self.frame_color = with_opacity(
            Color(56, 56, 56) if is_dark else Color(243, 243, 243), 0.8
        )
        self.frame_active_color = with_opacity(
            Color(48, 48, 48) if is_dark else Color(255, 255, 255), 0.8
        )
        self.item_hover_color = (
            with_opacity(Color(255, 255, 255), 0.06) if is_dark
            else with_opacity(Color(0, 0, 0), 0.03)
        )
        self.item_press_color = (
            with_opacity(Color(255, 255, 255), 0.09) if is_dark
            else with_opacity(Color(0, 0, 0), 0.06)
        )
        self.item_check_color = (
            with_opacity(Color(255, 255, 255), 0.12) if is_dark
            else with_opacity(Color(0, 0, 0), 0.09)
        )

    def set_system_window_color(self, window_color: Color) -> None:
        """Report a change of the system palette's window colour."""
        self._system_dark = system_dark(window_color)
        self.dark_changed.emit()

    def check_update_desktop_image(self) -> None:
        """Refresh the wallpaper path, and report changes to the wallpaper file."""
        if not self._blur_behind_window_enabled:
            return
        with self._lock:
            path = self._wallpaper_provider()
            if path != self._desktop_image_path:
                self._watched_mtime = _mtime(path)
                self.desktop_image_path = path
                return
            current = _mtime(path)
            if path and current != self._watched_mtime:
                self._watched_mtime = current
                self.desktop_image_path_changed.emit()

    def start_polling(self, interval: float = 1.0) -> None:
        """Check the desktop image every ``interval`` seconds in the background."""
        if self._poll_thread is not None:
            return
        stop = threading.Event()

        def run() -> None:
            while not stop.wait(interval):
                self.check_update_desktop_image()

        self._poll_stop = stop
        self._poll_thread = threading.Thread(target=run, daemon=True)
        self._poll_thread.start()

    def stop_polling(self) -> None:
        """Stop the background check started by :meth:`start_polling`."""
        if self._poll_stop is None or self._poll_thread is None:
            return
        self._poll_stop.set()
        self._poll_thread.join()
        self._poll_stop = None
        self._poll_thread = None