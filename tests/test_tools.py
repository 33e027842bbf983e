import os
import subprocess
import sys
import time
from unittest import mock

import pytest

from fluentkit import tools
from fluentkit.colors import Color


def test_uuid_format_and_uniqueness():
    first, second = tools.uuid(), tools.uuid()
    assert len(first) == 32
    assert all(ch in "0123456789abcdef" for ch in first)
    assert first != second


def test_read_file_round_trip(tmp_path):
    target = tmp_path / "note.txt"
    target.write_text("héllo\nworld", encoding="utf-8")
    assert tools.read_file(str(target)) == "héllo\nworld"


def test_read_missing_file_is_empty(tmp_path):
    assert tools.read_file(str(tmp_path / "missing.txt")) == ""


def test_platform_flags_follow_sys_platform(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    assert (tools.is_linux(), tools.is_win(), tools.is_macos()) == (True, False, False)
    monkeypatch.setattr(sys, "platform", "darwin")
    assert (tools.is_linux(), tools.is_win(), tools.is_macos()) == (False, False, True)


def test_url_path_round_trip(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    path = str(tmp_path / "x y.txt")
    url = tools.get_url_by_file_path(path)
    assert url.startswith("file://")
    assert " " not in url
    assert tools.to_local_path(url) == path
    assert tools.get_file_name_by_url(url) == "x y.txt"


def test_to_local_path_of_non_file_url_is_empty():
    assert tools.to_local_path("http://example.com/a.txt") == ""


def test_html_to_plain_text():
    assert tools.html_to_plain_text("<p>Hello <b>World</b></p>") == "Hello World"


def test_html_blocks_become_lines_and_scripts_vanish():
    text = tools.html_to_plain_text("<script>var x = 1;</script><p>first</p><p>second</p>")
    assert text.splitlines() == ["first", "second"]


def test_hashes():
    assert tools.md5("") == "d41d8cd98f00b204e9800998ecf8427e"
    digest = tools.sha256("abc")
    assert len(digest) == 64
    assert digest == tools.sha256("abc")
    assert digest != tools.sha256("abd")


def test_base64():
    assert tools.to_base64("hello") == "aGVsbG8="
    assert tools.from_base64(tools.to_base64("héllo wörld")) == "héllo wörld"


def test_from_base64_is_lenient():
    encoded = tools.to_base64("hello")
    assert tools.from_base64(encoded.rstrip("=")) == "hello"
    assert tools.from_base64("aGVs\nbG8=") == "hello"


def test_remove_dir(tmp_path):
    tree = tmp_path / "tree"
    (tree / "sub").mkdir(parents=True)
    (tree / "sub" / "f.txt").write_text("x")
    assert tools.remove_dir(str(tree)) is True
    assert not tree.exists()
    assert tools.remove_dir(str(tmp_path / "never")) is True


def test_remove_file(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("x")
    assert tools.remove_file(str(target)) is True
    assert not target.exists()
    assert tools.remove_file(str(target)) is False


def test_show_file_in_folder_on_linux(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch("subprocess.Popen") as popen:
        tools.show_file_in_folder(str(tmp_path / "f.txt"))
    popen.assert_called_once_with(["xdg-open", str(tmp_path)])


def test_current_timestamp_is_milliseconds():
    before = time.time() * 1000
    stamp = tools.current_timestamp()
    after = time.time() * 1000
    assert before - 1 <= stamp <= after + 1


def test_windows_queries_off_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    tools.is_windows11_or_greater.cache_clear()
    tools.is_windows10_or_greater.cache_clear()
    try:
        assert tools.window_build_number() == -1
        assert tools.is_windows11_or_greater() is False
        assert tools.is_windows10_or_greater() is False
    finally:
        tools.is_windows11_or_greater.cache_clear()
        tools.is_windows10_or_greater.cache_clear()


def _completed(stdout):
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout)


def test_wallpaper_on_ubuntu(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch("platform.freedesktop_os_release", return_value={"ID": "ubuntu"}), \
            mock.patch("subprocess.run",
                       return_value=_completed(b"'file:///home/user/bg.png'\n")) as run:
        assert tools.get_wallpaper_file_path() == "/home/user/bg.png"
    assert run.call_args.args[0][0] == "gsettings"


def test_wallpaper_on_deepin(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    reply = b'method return time=1\n   string "file:///usr/share/wallpapers/a.jpg"\n'
    with mock.patch("platform.freedesktop_os_release", return_value={"ID": "uos"}), \
            mock.patch("subprocess.run", return_value=_completed(reply)) as run:
        assert tools.get_wallpaper_file_path() == "/usr/share/wallpapers/a.jpg"
    assert run.call_args.args[0][0] == "dbus-send"


def test_wallpaper_on_macos_falls_back_to_default(monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    with mock.patch("subprocess.run", return_value=_completed(b"")):
        assert tools.get_wallpaper_file_path() == (
            "/System/Library/CoreServices/DefaultDesktop.heic")


def test_wallpaper_unknown_linux_is_empty(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch("platform.freedesktop_os_release", return_value={"ID": "arch"}):
        assert tools.get_wallpaper_file_path() == ""


def test_image_main_color_of_uniform_image():
    image = [[Color(10, 20, 30)] * 50 for _ in range(50)]
    assert tools.image_main_color(image) == Color(10, 20, 30)
    tuples = [[(10, 20, 30, 0)] * 50 for _ in range(50)]
    assert tools.image_main_color(tuples, 1) == Color(10, 20, 30)


def test_image_main_color_clamps_brightness():
    image = [[(200, 100, 50)] * 30 for _ in range(30)]
    result = tools.image_main_color(image, 2)
    assert result.r == 255
    assert result.g <= 255 and result.b <= 255
    assert result.g > 100


def test_image_main_color_of_empty_image():
    with pytest.raises(ValueError):
        tools.image_main_color([])


def test_remove_dir_leaves_files_alone(tmp_path):
    target = tmp_path / "plain.txt"
    target.write_text("x")
    assert tools.remove_dir(str(target)) is True
    assert os.path.exists(target)