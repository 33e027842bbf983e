"""Colour values, accent colour ramps and the standard Fluent palette."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from functools import cache

__all__ = ["Color", "AccentColor", "Colors", "with_opacity", "get_colors"]


@dataclass(frozen=True)
class Color:
    """An 8-bit-per-channel RGBA colour."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"channel {field.name!r} must be an int in 0..255, got {value!r}")

    def rgba(self) -> int:
        """Return the colour packed as a 32-bit 0xAARRGGBB integer."""
        return (self.a << 24) | (self.r << 16) | (self.g << 8) | self.b


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def with_opacity(color: Color, opacity: float) -> Color:
    """Return ``color`` with its alpha replaced by ``opacity`` (0.0 to 1.0)."""
    alpha = _round_half_away(opacity * 255) & 0xFF
    return Color(color.r, color.g, color.b, alpha)


@dataclass(frozen=True)
class AccentColor:
    """A seven-step ramp of shades around one accent colour."""

    darkest: Color
    darker: Color
    dark: Color
    normal: Color
    light: Color
    lighter: Color
    lightest: Color


class Colors:
    """The fixed palette of neutral greys and accent ramps."""

    def __init__(self) -> None:
        self.transparent = Color(0, 0, 0, 0)
        self.black = Color(0, 0, 0)
        self.white = Color(255, 255, 255)
        self.grey10 = Color(250, 249, 248)
        self.grey20 = Color(243, 242, 241)
        self.grey30 = Color(237, 235, 233)
        self.grey40 = Color(225, 223, 221)
        self.grey50 = Color(210, 208, 206)
        self.grey60 = Color(200, 198, 196)
        self.grey70 = Color(190, 185, 184)
        self.grey80 = Color(179, 176, 173)
        self.grey90 = Color(161, 159, 157)
        self.grey100 = Color(151, 149, 146)
        self.grey110 = Color(138, 136, 134)
        self.grey120 = Color(121, 119, 117)
        self.grey130 = Color(96, 94, 92)
        self.grey140 = Color(72, 70, 68)
        self.grey150 = Color(59, 58, 57)
        self.grey160 = Color(50, 49, 48)
        self.grey170 = Color(41, 40, 39)
        self.grey180 = Color(37, 36, 35)
        self.grey190 = Color(32, 31, 30)
        self.grey200 = Color(27, 26, 25)
        self.grey210 = Color(22, 21, 20)
        self.grey220 = Color(17, 16, 15)

        self.yellow = AccentColor(
            darkest=Color(249, 168, 37),
            darker=Color(251, 192, 45),
            dark=Color(253, 212, 53),
            normal=Color(255, 235, 59),
            light=Color(255, 238, 88),
            lighter=Color(255, 241, 118),
            lightest=Color(255, 245, 155),
        )
        self.orange = AccentColor(
            darkest=Color(153, 61, 7),
            darker=Color(172, 68, 8),
            dark=Color(209, 88, 10),
            normal=Color(247, 99, 12),
            light=Color(248, 122, 48),
            lighter=Color(249, 145, 84),
            lightest=Color(250, 192, 106),
        )
        self.red = AccentColor(
            darkest=Color(143, 10, 21),
            darker=Color(162, 11, 24),
            dark=Color(185, 13, 28),
            normal=Color(232, 17, 35),
            light=Color(236, 64, 79),
            lighter=Color(238, 88, 101),
            lightest=Color(240, 107, 118),
        )
        self.magenta = AccentColor(
            darkest=Color(111, 0, 79),
            darker=Color(160, 7, 108),
            dark=Color(181, 13, 125),
            normal=Color(227, 0, 140),
            light=Color(234, 77, 168),
            lighter=Color(238, 110, 193),
            lightest=Color(241, 140, 213),
        )
        self.purple = AccentColor(
            darkest=Color(44, 15, 118),
            darker=Color(61, 15, 153),
            dark=Color(78, 17, 174),
            normal=Color(104, 33, 122),
            light=Color(123, 76, 157),
            lighter=Color(141, 110, 189),
            lightest=Color(158, 142, 217),
        )
        self.blue = AccentColor(
            darkest=Color(0, 74, 131),
            darker=Color(0, 84, 148),
            dark=Color(0, 102, 180),
            normal=Color(0, 120, 212),
            light=Color(38, 140, 220),
            lighter=Color(76, 160, 224),
            lightest=Color(96, 171, 228),
        )
        self.teal = AccentColor(
            darkest=Color(0, 110, 91),
            darker=Color(0, 124, 103),
            dark=Color(0, 151, 125),
            normal=Color(0, 178, 148),
            light=Color(38, 189, 164),
            lighter=Color(77, 201, 180),
            lightest=Color(96, 207, 188),
        )
        self.green = AccentColor(
            darkest=Color(9, 76, 9),
            darker=Color(12, 93, 12),
            dark=Color(14, 111, 14),
            normal=Color(16, 124, 16),
            light=Color(39, 137, 57),
            lighter=Color(76, 156, 76),
            lightest=Color(106, 173, 106),
        )

    def create_accent_color(self, primary_color: Color) -> AccentColor:
        """Build an accent ramp from one colour by stepping down its opacity."""
        dark = with_opacity(primary_color, 0.9)
        light = with_opacity(primary_color, 0.9)
        darker = with_opacity(dark, 0.8)
        lighter = with_opacity(light, 0.8)
        return AccentColor(
            darkest=with_opacity(darker, 0.7),
            darker=darker,
            dark=dark,
            normal=primary_color,
            light=light,
            lighter=lighter,
            lightest=with_opacity(lighter, 0.7),
        )


@cache
def get_colors() -> Colors:
    """Return the shared palette."""
    return Colors()