# fluentkit

Building blocks for applications that follow the Fluent design language,
usable without any GUI toolkit: a colour palette and type ramp, a theme that
derives its colours from a light/dark mode and an accent colour, table models,
a captcha code, INI settings, logging, project scaffolding, HTTP requests with
a response cache, and AES text encryption.

Requires Python 3.10 or later. Runtime dependencies: `requests`,
`cryptography` and `platformdirs`.

## Modules

| Module | What it holds |
| --- | --- |
| `fluentkit.colors` | `Color` (RGBA, `rgba()` packs it as `0xAARRGGBB`), `with_opacity(color, opacity)`, `AccentColor` (seven shades from `darkest` to `lightest`) and `Colors`, the palette of greys (`grey10` … `grey220`), `black`, `white`, `transparent` and eight accent ramps (`yellow`, `orange`, `red`, `magenta`, `purple`, `blue`, `teal`, `green`). `Colors.create_accent_color` derives a ramp from one colour by stepping down its opacity. `get_colors()` returns a shared palette. |
| `fluentkit.text_style` | `Font` (family, pixel size, weight) and `TextStyle` with `caption`, `body`, `body_strong`, `subtitle`, `title`, `title_large` and `display`. `default_family()` picks the family for the platform; `get_text_style()` returns a shared instance. |
| `fluentkit.tools` | `uuid`, `md5`, `sha256`, `to_base64`, `from_base64`, `read_file`, `remove_file`, `remove_dir`, `to_local_path`, `get_file_name_by_url`, `get_url_by_file_path`, `html_to_plain_text`, `is_win`/`is_linux`/`is_macos`, `window_build_number`, `is_windows10_or_greater`, `is_windows11_or_greater`, `current_timestamp` (milliseconds), `show_file_in_folder`, `get_wallpaper_file_path` and `image_main_color`. |
| `fluentkit.theme` | `DarkMode` (`SYSTEM`, `LIGHT`, `DARK`), `system_dark(window_color)` and `Theme`, which recomputes `primary_color`, `background_color`, `divider_color`, the window, font, frame and item colours whenever `dark_mode`, `accent_color` or the reported system window colour change. With `blur_behind_window_enabled` set, `check_update_desktop_image` tracks the wallpaper path; `start_polling`/`stop_polling` run that check on a background thread. |
| `fluentkit.captcha` | `Captcha`: a four-character code of digits and letters, with `refresh()`, `verify(code)` and an `ignore_case` flag. |
| `fluentkit.table_model` | `TableModel`: rows of dictionaries plus a column source, with `get_row`, `set_row`, `insert_row`, `remove_row`, `append_row`, `clear`, and role-based `data(row, column, role)` using `TableRole`. Bad indexes raise `IndexError`. |
| `fluentkit.sort_proxy` | `TableSortProxyModel`: a filtered and sorted view over a `TableModel`. `set_filter` and `set_comparator` take callables that receive source row indexes; each `set_comparator` call flips the `SortOrder`. `map_to_source` maps view rows to source rows, and the row methods edit the source through the view. |
| `fluentkit.settings` | `SettingsHelper`: an INI-backed store named after the executable, with `save`/`get` and typed accessors for dark mode, the system app bar flag and the language (default `en_US`). |
| `fluentkit.log` | `setup(app_path, app, level, log_dir)` sends log records to the console and to `<app>_<yyyyMMdd>.log`, formatted by `LogFormatter` as `time[Level][file:line][thread]:message`. `LogLevel` sets the most verbose level kept. `pretty_product_info()` names the operating system. |
| `fluentkit.initializr` | `generate(name, path, source_dir, template_dir)` creates a project folder, copies a source tree into its `FluentUI` folder and fills `%1`-style templates (`fill_arguments`, `template_to_file`, `copy_dir`, `copy_file`). Problems raise `InitializrError`. |
| `fluentkit.network_params` | `NetworkParams`: a chainable request description (query, headers, form fields, files, body, timeout, retry, `CacheMode`, download target, logging) with `Method`, `BodyType`, `DownloadParam` and a stable `build_cache_key()`. |
| `fluentkit.network` | `Network`: request builders (`get`, `head`, `post_body`, `put_form`, `patch_json`, `delete_json_array`, …), `go` to run a request on a worker thread, `handle` for retries and caching, `handle_download` for resumable downloads, and a base64 response cache. Events reach a `NetworkCallable`. |
| `fluentkit.aes` | `AesEncryptor`: AES-128-CBC with PKCS#7 padding; 16-byte key and IV; base64 cipher text. |

## Examples

Hashing and encoding text:

```python
from fluentkit import tools

tools.md5("hello")             # '5d41402abc4b2a76b9719d911017c592'
tools.to_base64("hello")       # 'aGVsbG8='
tools.from_base64("aGVsbG8=")  # 'hello'
```

Working with the palette and a theme:

```python
from fluentkit.colors import get_colors, with_opacity
from fluentkit.theme import DarkMode, Theme

palette = get_colors()
accent = palette.create_accent_color(palette.blue.normal)
faded = with_opacity(palette.black, 0.5)

theme = Theme()
theme.dark_mode = DarkMode.DARK
theme.primary_color   # the accent's lighter shade in dark mode
```

Sending a request:

```python
from fluentkit.network import Network, NetworkCallable

network = Network()
params = (
    network.get("https://example.com/api/items")
    .add_query("page", 1)
    .add_header("Accept", "application/json")
    .set_retry(2)
)
future = network.go(params, NetworkCallable(on_success=print))
future.result()
network.shutdown()
```

The callable is told when the request starts, succeeds, fails, is served
from the cache, makes progress and finishes.

## What it does not do

fluentkit draws nothing. It has no windows, widgets or painting: the captcha
produces a code but no image, the theme holds colours but does not read the
system palette itself (report changes with `Theme.set_system_window_color`),
and there are no frameless-window, QR-code or hotkey helpers. It installs no
command-line program. `initializr.generate` needs a source tree and a
template folder on disk; it ships neither.

## Tests

The test suite uses pytest and responses, declared in the `test` extra:

```
pip install .[test]
pytest
```