"""Generate a new project skeleton from templates."""

from __future__ import annotations

import logging
import os
import re
import shutil
import stat
import sys

__all__ = ["InitializrError", "fill_arguments", "copy_dir", "template_to_file",
           "copy_file", "generate"]

_logger = logging.getLogger(__name__)
_PLACEHOLDER = re.compile(r"%(\d\d?)")

_TEMPLATES = (
    ("CMakeLists.txt.in", "CMakeLists.txt"),
    ("src/CMakeLists.txt.in", "src/CMakeLists.txt"),
    ("src/main.cpp.in", "src/main.cpp"),
    ("src/main.qml.in", "src/main.qml"),
    ("src/en_US.ts.in", "src/{name}_en_US.ts"),
    ("src/zh_CN.ts.in", "src/{name}_zh_CN.ts"),
)
_COPIES = (
    ("src/App.qml.in", "src/App.qml"),
    ("src/qml.qrc.in", "src/qml.qrc"),
    ("src/logo.ico.in", "src/logo.ico"),
    ("src/README.md.in", "src/README.md"),
)


class InitializrError(Exception):
    """Raised when a project cannot be generated."""


def fill_arguments(text: str, *args: object) -> str:
    """Replace ``%N`` markers: the lowest number gets the first argument, and so on."""
    numbers = sorted({int(m.group(1)) for m in _PLACEHOLDER.finditer(text)} - {0})
    replacements = {n: str(a) for n, a in zip(numbers, args)}

    def substitute(match: re.Match[str]) -> str:
        return replacements.get(int(match.group(1)), match.group(0))

    return _PLACEHOLDER.sub(substitute, text)


def copy_dir(from_dir: str, to_dir: str, cover_if_file_exists: bool = True) -> bool:
    """Copy a directory tree; return False on the first failure."""
    if not os.path.isdir(to_dir):
        try:
            os.mkdir(to_dir)
        except OSError:
            return False
    try:
        names = sorted(os.listdir(from_dir), key=str.lower)
    except OSError:
        names = []
    for name in names:
        if name.startswith("."):
            continue
        source = os.path.join(from_dir, name)
        target = os.path.join(to_dir, name)
        if os.path.isdir(source):
            if not copy_dir(source, target, True):
                return False
            continue
        if cover_if_file_exists and os.path.lexists(target):
            try:
                os.remove(target)
            except OSError:
                pass
        if os.path.lexists(target):
            return False
        try:
            shutil.copy2(source, target)
        except OSError:
            return False
    return True


def template_to_file(source: str, dest: str, *args: object) -> bool:
    """Write ``source`` to ``dest`` with its ``%N`` markers filled from ``args``."""
    try:
        with open(source, encoding="utf-8") as handle:
            content = fill_arguments(handle.read(), *args)
    except OSError:
        _logger.debug("Failed to open resource file.")
        return False
    directory = os.path.dirname(os.path.abspath(dest))
    try:
        os.makedirs(directory, exist_ok=True)
        with open(dest, "w", encoding="utf-8") as handle:
            handle.write(content)
    except OSError:
        _logger.debug("Failed to open output file.")
        return False
    return True


def copy_file(source: str, dest: str) -> bool:
    """Copy a file unless ``dest`` exists, then make ``dest`` writable."""
    copied = False
    if not os.path.lexists(dest):
        try:
            shutil.copyfile(source, dest)
            copied = True
        except OSError:
            copied = False
    try:
        mode = os.stat(dest).st_mode
        os.chmod(dest, stat.S_IMODE(mode) | stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH)
    except OSError:
        pass
    return copied


def _application_dir() -> str:
    return os.path.dirname(os.path.abspath(sys.argv[0] or "."))


def generate(
    name: str,
    path: str,
    source_dir: str | None = None,
    template_dir: str | None = None,
) -> str:
    """Create project ``name`` under ``path``; return its top CMakeLists.txt path."""
    if not name:
        raise InitializrError("The name cannot be empty")
    if not path:
        raise InitializrError("The creation path cannot be empty")
    if not os.path.isdir(path):
        raise InitializrError("The path does not exist")
    project_path = os.path.join(path, name)
    if os.path.exists(project_path):
        raise InitializrError(f"{name} folder already exists")
    if source_dir is None:
        source_dir = os.path.join(_application_dir(), "source")
    if template_dir is None:
        template_dir = os.path.join(_application_dir(), "template")

    os.makedirs(project_path)
    copy_dir(source_dir, os.path.join(project_path, "FluentUI"))
    for template, target in _TEMPLATES:
        template_to_file(
            os.path.join(template_dir, template),
            os.path.join(project_path, target.format(name=name)),
            name,
        )
    for template, target in _COPIES:
        copy_file(os.path.join(template_dir, template), os.path.join(project_path, target))
    return project_path + "/CMakeLists.txt"