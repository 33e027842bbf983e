"""Application logging to the console and a daily log file."""

from __future__ import annotations

import logging
import os
import platform
import sys
from datetime import datetime
from enum import IntEnum

from platformdirs import user_data_dir

from fluentkit import tools

__all__ = ["LogLevel", "LogFormatter", "pretty_product_info", "setup"]

_IGNORED_MESSAGE = "Could not get the INetworkConnection instance for the adapter GUID."
_logger = logging.getLogger(__name__)


class LogLevel(IntEnum):
    """Severity levels; a lower number is more severe."""

    FATAL = 0
    CRITICAL = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


def _level_of(levelno: int) -> LogLevel:
    if levelno >= logging.CRITICAL:
        return LogLevel.FATAL
    if levelno >= logging.ERROR:
        return LogLevel.CRITICAL
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class LogFormatter(logging.Formatter):
    """Formats ``time[Level][file:line][thread]:message``."""

    def format(self, record: logging.LogRecord) -> str:
        level = _level_of(record.levelno)
        stamp = datetime.fromtimestamp(record.created).strftime("%Y/%m/%d %H:%M:%S")
        stamp += f".{int(record.msecs):03d}"
        location = ""
        if record.pathname:
            file_name = record.pathname.replace("\\", "/").rsplit("/", 1)[-1]
            location = f"[{file_name}:{record.lineno}]"
        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return f"{stamp}[{level.label}]{location}[{record.thread}]:{message}"


def _windows_product_name(build: int) -> str:
    if build < 9200:
        return f"Windows 7 build {build}"
    if build < 10240:
        return f"Windows 8 build {build}"
    if build < 22000:
        return f"Windows 10 build {build}"
    return f"Windows 11 build {build}"


def _default_product_name() -> str:
    if tools.is_macos():
        version = platform.mac_ver()[0]
        if version:
            return f"macOS {version}"
    if tools.is_linux():
        try:
            pretty = platform.freedesktop_os_release().get("PRETTY_NAME", "")
        except OSError:
            pretty = ""
        if pretty:
            return pretty
    return f"{platform.system()} {platform.release()}".strip() or "Unknown"


def pretty_product_info() -> str:
    """Return a readable name of the operating system and its version."""
    if tools.is_win():
        build = tools.window_build_number()
        if build > 0:
            return _windows_product_name(build)
    return _default_product_name()


class _MessageHandler(logging.Handler):
    def __init__(self, file_path: str) -> None:
        super().__init__(logging.NOTSET)
        self.file_path = file_path
        self.max_level = LogLevel.DEBUG
        self._file = None
        self._file_error = False
        self.setFormatter(LogFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if message == _IGNORED_MESSAGE:
                return
            level = _level_of(record.levelno)
            if level > self.max_level or not message:
                return
            final = self.format(record)
            stream = sys.stdout if level >= LogLevel.INFO else sys.stderr
            print(final, file=stream, flush=True)
            self._write_file(final)
        except Exception:
            self.handleError(record)

    def _write_file(self, line: str) -> None:
        if self._file_error:
            return
        if self._file is None:
            try:
                self._file = open(self.file_path, "a", encoding="utf-8")
            except OSError as exc:
                print(f"Can't open file to write: {exc}", file=sys.stderr, flush=True)
                self._file_error = True
                return
        self._file.write(line + "\n")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        super().close()


class _State:
    def __init__(self) -> None:
        self.handler: _MessageHandler | None = None
        self.previous_root_level: int | None = None


_state = _State()


def _reset() -> None:
    """Remove the installed handler and close the log file."""
    root = logging.getLogger()
    if _state.handler is not None:
        root.removeHandler(_state.handler)
        _state.handler.close()
    if _state.previous_root_level is not None:
        root.setLevel(_state.previous_root_level)
    _state.handler = None
    _state.previous_root_level = None


def setup(
    app_path: str,
    app: str,
    level: int = LogLevel.DEBUG,
    log_dir: str | None = None,
) -> str:
    """Route log records to the console and ``<app>_<yyyyMMdd>.log``.

    Later calls only change the level. Returns the log file path.
    """
    if not app:
        raise ValueError("application name must not be empty")
    if _state.handler is not None:
        _state.handler.max_level = int(level)
        return _state.handler.file_path
    if log_dir is None:
        log_dir = os.path.join(user_data_dir(app, appauthor=False), "log")
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    file_name = f"{app}_{datetime.now().strftime('%Y%m%d')}.log"
    handler = _MessageHandler(os.path.join(log_dir, file_name))
    handler.max_level = int(level)
    root = logging.getLogger()
    _state.previous_root_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    _state.handler = handler

    _logger.info("===================================================")
    _logger.info("[AppName] %s", app)
    _logger.info("[AppPath] %s", app_path)
    _logger.info("[PythonVersion] %s", platform.python_version())
    _logger.info("[ProcessId] %s", os.getpid())
    _logger.info("[DeviceInfo]")
    _logger.info("  [Manufacturer] %s", pretty_product_info())
    _logger.info("  [CPU_ABI] %s", platform.machine())
    _logger.info("[LOG_LEVEL] %s", int(level))
    _logger.info("[LOG_PATH] %s", handler.file_path)
    _logger.info("===================================================")
    return handler.file_path