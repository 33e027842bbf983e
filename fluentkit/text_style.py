"""Font presets of the Fluent type ramp."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import cache

__all__ = ["Font", "TextStyle", "default_family", "get_text_style",
           "WEIGHT_NORMAL", "WEIGHT_DEMI_BOLD"]

WEIGHT_NORMAL = 400
WEIGHT_DEMI_BOLD = 600


@dataclass(frozen=True)
class Font:
    """A font family, a pixel size and a weight."""

    family: str
    pixel_size: int
    weight: int = WEIGHT_NORMAL


def default_family() -> str:
    """Return the family the type ramp uses on this platform."""
    if sys.platform.startswith("win"):
        return "微软雅黑"
    if sys.platform == "darwin":
        return "Helvetica"
    return "Sans Serif"


class TextStyle:
    """The caption, body, subtitle, title and display fonts."""

    def __init__(self, family: str | None = None) -> None:
        self.family = family if family is not None else default_family()
        self.caption = Font(self.family, 12)
        self.body = Font(self.family, 13)
        self.body_strong = Font(self.family, 13, WEIGHT_DEMI_BOLD)
        self.subtitle = Font(self.family, 20, WEIGHT_DEMI_BOLD)
        self.title = Font(self.family, 28, WEIGHT_DEMI_BOLD)
        self.title_large = Font(self.family, 40, WEIGHT_DEMI_BOLD)
        self.display = Font(self.family, 68, WEIGHT_DEMI_BOLD)


@cache
def get_text_style() -> TextStyle:
    """Return the shared text style."""
    return TextStyle()