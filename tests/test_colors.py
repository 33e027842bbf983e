import pytest

from fluentkit.colors import AccentColor, Color, Colors, get_colors, with_opacity


def test_color_rejects_out_of_range_channels():
    with pytest.raises(ValueError):
        Color(256, 0, 0)
    with pytest.raises(ValueError):
        Color(0, 0, 0, -1)


def test_rgba_packs_channels():
    value = Color(1, 2, 3, 4).rgba()
    assert (value >> 24) & 0xFF == 4
    assert (value >> 16) & 0xFF == 1
    assert (value >> 8) & 0xFF == 2
    assert value & 0xFF == 3


def test_with_opacity_keeps_rgb_and_rounds_alpha():
    result = with_opacity(Color(10, 20, 30), 0.5)
    assert (result.r, result.g, result.b) == (10, 20, 30)
    assert result.a == 128


def test_with_opacity_replaces_rather_than_multiplies_alpha():
    faint = Color(1, 2, 3, 10)
    assert with_opacity(faint, 1.0) == Color(1, 2, 3)
    assert with_opacity(faint, 0).a == 0


def test_with_opacity_identity_on_opaque_colour():
    opaque = Color(40, 50, 60)
    assert with_opacity(opaque, 1.0) == opaque


def test_palette_basics():
    colors = get_colors()
    assert colors.transparent.a == 0
    assert colors.white == Color(255, 255, 255)
    assert colors.blue.normal == Color(0, 120, 212)


def test_greys_get_darker():
    colors = Colors()
    greys = [
        colors.grey10, colors.grey20, colors.grey30, colors.grey40, colors.grey50,
        colors.grey60, colors.grey70, colors.grey80, colors.grey90, colors.grey100,
        colors.grey110, colors.grey120, colors.grey130, colors.grey140, colors.grey150,
        colors.grey160, colors.grey170, colors.grey180, colors.grey190, colors.grey200,
        colors.grey210, colors.grey220,
    ]
    reds = [grey.r for grey in greys]
    assert reds == sorted(reds, reverse=True)


def test_accent_ramps_are_accent_colors():
    colors = Colors()
    ramps = [colors.yellow, colors.orange, colors.red, colors.magenta,
             colors.purple, colors.blue, colors.teal, colors.green]
    assert all(isinstance(ramp, AccentColor) for ramp in ramps)
    assert all(ramp.normal.a == 255 for ramp in ramps)


def test_create_accent_color_ramp():
    primary = Color(0, 120, 212)
    accent = get_colors().create_accent_color(primary)
    assert accent.normal == primary
    assert accent.dark == accent.light == with_opacity(primary, 0.9)
    assert accent.darker == with_opacity(accent.dark, 0.8)
    assert accent.lightest == with_opacity(accent.lighter, 0.7)
    shades = [accent.darkest, accent.darker, accent.dark, accent.normal,
              accent.light, accent.lighter, accent.lightest]
    assert {(c.r, c.g, c.b) for c in shades} == {(0, 120, 212)}
    assert accent.darkest.a < accent.darker.a < accent.dark.a < accent.normal.a


def test_get_colors_is_shared():
    first = get_colors()
    second = get_colors()
    assert second is first
    assert second.green.normal == Color(16, 124, 16)
    assert second.grey10 == Color(250, 249, 248)