"""Assorted helpers: hashing, encoding, paths, files and platform queries."""

from __future__ import annotations

import base64
import contextlib
import hashlib
import os
import platform
import re
import shutil
import subprocess
import sys
import time
import uuid as _uuid
from functools import cache
from html.parser import HTMLParser
from typing import Any, Sequence
from urllib.parse import quote, unquote, urlsplit

from fluentkit.colors import Color

__all__ = [
    "uuid", "read_file", "is_macos", "is_linux", "is_win", "to_local_path",
    "get_file_name_by_url", "html_to_plain_text", "get_url_by_file_path", "md5",
    "sha256", "to_base64", "from_base64", "remove_dir", "remove_file",
    "show_file_in_folder", "current_timestamp", "window_build_number",
    "is_windows11_or_greater", "is_windows10_or_greater", "get_wallpaper_file_path",
    "image_main_color",
]

_WINDOWS_VERSION_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"
_MACOS_DEFAULT_WALLPAPER = "/System/Library/CoreServices/DefaultDesktop.heic"
_SAMPLE_STEP = 20


def uuid() -> str:
    """Return a random UUID as 32 lowercase hex digits."""
    return _uuid.uuid4().hex


def read_file(file_name: str) -> str:
    """Return the text of a file, or an empty string if it cannot be read."""
    try:
        with open(file_name, encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError:
        return ""


def is_macos() -> bool:
    return sys.platform == "darwin"


def is_linux() -> bool:
    return sys.platform.startswith("linux")


def is_win() -> bool:
    return sys.platform.startswith("win")


def to_local_path(url: str) -> str:
    """Return the local path of a ``file:`` URL, or an empty string for other URLs."""
    parts = urlsplit(str(url))
    if parts.scheme.lower() != "file":
        return ""
    path = unquote(parts.path)
    if parts.netloc and parts.netloc.lower() != "localhost":
        return f"//{parts.netloc}{path}"
    if re.match(r"^/[A-Za-z]:", path):
        path = path[1:]
    return path


def get_file_name_by_url(url: str) -> str:
    """Return the file name part of a ``file:`` URL."""
    return os.path.basename(to_local_path(url))


def get_url_by_file_path(path: str) -> str:
    """Return the ``file:`` URL of a local path."""
    if not path:
        return ""
    local = path.replace("\\", "/") if is_win() else path
    if re.match(r"^[A-Za-z]:/", local):
        local = "/" + local
    if local.startswith("//"):
        host, _, rest = local[2:].partition("/")
        return f"file://{host}/{quote(rest, safe='/')}"
    quoted = quote(local, safe="/:")
    return f"file://{quoted}" if local.startswith("/") else f"file:{quoted}"


class _PlainTextExtractor(HTMLParser):
    _BLOCK_TAGS = frozenset({
        "p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "ul", "ol", "tr",
        "table", "blockquote", "pre", "hr", "dl", "dt", "dd", "center",
    })
    _SKIP_TAGS = frozenset({"script", "style", "head", "title"})

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._chunks: list[str] = []
        self._skip_depth = 0
        self._pre_depth = 0

    def _emit(self, text: str) -> None:
        if text:
            self._chunks.append(text)

    def _block_break(self) -> None:
        if self._chunks and not self._chunks[-1].endswith("\n"):
            self._chunks.append("\n")

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in self._SKIP_TAGS:
            self._skip_depth += 1
        elif tag == "br":
            self._emit("\n")
        elif tag in self._BLOCK_TAGS:
            if tag == "pre":
                self._pre_depth += 1
            self._block_break()

    def handle_endtag(self, tag: str) -> None:
        if tag in self._SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in self._BLOCK_TAGS:
            if tag == "pre":
                self._pre_depth = max(0, self._pre_depth - 1)
            self._block_break()

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        if not self._pre_depth:
            data = re.sub(r"[ \t\r\n\f]+", " ", data)
        self._emit(data.replace("\xa0", " "))

    def text(self) -> str:
        raw = "".join(self._chunks)
        return "\n".join(line.strip(" ") for line in raw.split("\n")).strip("\n")


def html_to_plain_text(html: str) -> str:
    """Return the visible text of an HTML fragment, one line per block."""
    extractor = _PlainTextExtractor()
    extractor.feed(html)
    extractor.close()
    return extractor.text()


def md5(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def to_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def from_base64(text: str) -> str:
    """Decode base64 leniently: characters outside the alphabet are ignored."""
    cleaned = re.sub(r"[^A-Za-z0-9+/]", "", text)
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned).decode("utf-8", errors="replace")


def remove_dir(dir_path: str) -> bool:
    """Remove a directory tree; a missing directory counts as removed."""
    if not os.path.isdir(dir_path):
        return True
    try:
        shutil.rmtree(dir_path)
    except OSError:
        return False
    return True


def remove_file(file_path: str) -> bool:
    try:
        os.remove(file_path)
    except OSError:
        return False
    return True


def show_file_in_folder(path: str) -> None:
    """Open the system file manager at the folder holding ``path``."""
    with contextlib.suppress(OSError):
        if is_win():
            subprocess.Popen(["explorer.exe", "/select,", os.path.normpath(path)])
        elif is_linux():
            subprocess.Popen(["xdg-open", os.path.dirname(os.path.abspath(path))])
        elif is_macos():
            subprocess.run(
                ["/usr/bin/osascript", "-e",
                 f'tell application "Finder" to reveal POSIX file "{path}"'],
                check=False,
            )
            subprocess.run(
                ["/usr/bin/osascript", "-e", 'tell application "Finder" to activate'],
                check=False,
            )


def current_timestamp() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def window_build_number() -> int:
    """Return the Windows build number, or -1 elsewhere or when unknown."""
    if not is_win():
        return -1
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, _WINDOWS_VERSION_KEY) as key:
            value, _ = winreg.QueryValueEx(key, "CurrentBuildNumber")
    except OSError:
        return -1
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@cache
def is_windows11_or_greater() -> bool:
    return is_win() and window_build_number() >= 22000


@cache
def is_windows10_or_greater() -> bool:
    return is_win() and window_build_number() >= 10240


def _command_output(args: list[str]) -> str:
    try:
        completed = subprocess.run(args, capture_output=True, check=False)
    except OSError:
        return ""
    output = completed.stdout or b""
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return output.strip()


def _linux_product_type() -> str:
    try:
        return platform.freedesktop_os_release().get("ID", "").lower()
    except OSError:
        return ""


def _windows_wallpaper() -> str:
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Control Panel\Desktop") as key:
            value, _ = winreg.QueryValueEx(key, "Wallpaper")
    except OSError:
        return ""
    return str(value)


def _linux_wallpaper() -> str:
    product = _linux_product_type()
    if product == "uos":
        reply = _command_output([
            "dbus-send", "--session", "--type=method_call", "--print-reply",
            "--dest=com.deepin.wm", "/com/deepin/wm",
            "com.deepin.wm.GetCurrentWorkspaceBackgroundForMonitor",
            f"string:'{current_timestamp()}'",
        ])
        start = reply.find("file:///")
        if start != -1:
            return reply[start + 7:len(reply) - 1]
    elif product == "ubuntu":
        reply = _command_output(
            ["gsettings", "get", "org.gnome.desktop.background", "picture-uri"])
        reply = reply[1:len(reply) - 1]
        if reply.startswith("file:///"):
            return reply[7:]
    return ""


def get_wallpaper_file_path() -> str:
    """Return the desktop wallpaper's path, or an empty string if unknown."""
    if is_win():
        return _windows_wallpaper()
    if is_linux():
        return _linux_wallpaper()
    if is_macos():
        reply = _command_output([
            "osascript", "-e",
            'tell application "Finder" to get POSIX path of (desktop picture as alias)',
        ])
        return reply or _MACOS_DEFAULT_WALLPAPER
    return ""


def _rgb(pixel: Any) -> tuple[int, int, int]:
    if isinstance(pixel, Color):
        return pixel.r, pixel.g, pixel.b
    red, green, blue = tuple(pixel)[:3]
    return red, green, blue


def image_main_color(image: Sequence[Sequence[Any]], bright: float = 1) -> Color:
    """Average colour of an image sampled every 20 pixels, scaled by ``bright``.

    ``image`` is a sequence of rows; each pixel is a :class:`Color` or an
    ``(r, g, b[, a])`` tuple. Alpha is ignored.
    """
    count = 0
    red = green = blue = 0
    for row in image[::_SAMPLE_STEP]:
        for pixel in row[::_SAMPLE_STEP]:
            r, g, b = _rgb(pixel)
            red += r
            green += g
            blue += b
            count += 1
    if count == 0:
        raise ValueError("image has no pixels")

    def channel(total: int) -> int:
        return min(int(bright * total / count), 255)

    return Color(channel(red), channel(green), channel(blue))