"""HTTP requests with retries, a response cache and resumable downloads."""

from __future__ import annotations

import base64
import json
import logging
import os
import weakref
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, Mapping
from urllib.parse import quote, urlsplit, urlunsplit

import requests
from platformdirs import user_cache_dir

from fluentkit.network_params import (
    DEFAULT_OPEN_LOG,
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    BodyType,
    CacheMode,
    Method,
    NetworkParams,
    map_to_string,
)

__all__ = ["NetworkCallable", "Network", "header_list_to_string", "add_query_param"]

_logger = logging.getLogger(__name__)
_QUERY_SAFE = "!$'()*,;:@/?"
_CHUNK_SIZE = 64 * 1024


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _to_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def header_list_to_string(headers: Mapping[str, Any] | Iterable[tuple[Any, Any]]) -> str:
    """Return header name/value pairs as a compact JSON object with sorted keys."""
    pairs = headers.items() if isinstance(headers, Mapping) else headers
    obj = {_text(name): _text(value) for name, value in pairs}
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def add_query_param(url: str, params: Mapping[str, Any]) -> str:
    """Append ``params`` in key order to the query of ``url``."""
    if not params:
        return url
    parts = urlsplit(url)
    extra = "&".join(
        f"{quote(_text(key), safe=_QUERY_SAFE)}={quote(_text(params[key]), safe=_QUERY_SAFE)}"
        for key in sorted(params)
    )
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit(parts._replace(query=query))


class NetworkCallable:
    """Receives the events of one request; pass callbacks or override the methods."""

    def __init__(
        self,
        *,
        on_start: Callable[[], Any] | None = None,
        on_finish: Callable[[], Any] | None = None,
        on_error: Callable[[int, str, str], Any] | None = None,
        on_success: Callable[[str], Any] | None = None,
        on_cache: Callable[[str], Any] | None = None,
        on_upload_progress: Callable[[int, int], Any] | None = None,
        on_download_progress: Callable[[int, int], Any] | None = None,
    ) -> None:
        self._on_start = on_start
        self._on_finish = on_finish
        self._on_error = on_error
        self._on_success = on_success
        self._on_cache = on_cache
        self._on_upload_progress = on_upload_progress
        self._on_download_progress = on_download_progress

    def start(self) -> None:
        if self._on_start:
            self._on_start()

    def finish(self) -> None:
        if self._on_finish:
            self._on_finish()

    def error(self, status: int, error_string: str, result: str) -> None:
        if self._on_error:
            self._on_error(status, error_string, result)

    def success(self, result: str) -> None:
        if self._on_success:
            self._on_success(result)

    def cache(self, result: str) -> None:
        if self._on_cache:
            self._on_cache(result)

    def upload_progress(self, sent: int, total: int) -> None:
        if self._on_upload_progress:
            self._on_upload_progress(sent, total)

    def download_progress(self, received: int, total: int) -> None:
        if self._on_download_progress:
            self._on_download_progress(received, total)


def _target_gone(params: NetworkParams) -> bool:
    target = params.target
    return isinstance(target, weakref.ReferenceType) and target() is None


def _http_error_string(url: str, response: requests.Response) -> str:
    return f"Error transferring {url} - server replied: {response.reason or ''}"


class Network:
    """Builds requests and runs them, with defaults for timeout, retries and logging."""

    def __init__(
        self,
        cache_dir: str | None = None,
        application_name: str = "",
        application_version: str = "",
        max_workers: int = 4,
    ) -> None:
        self.timeout = DEFAULT_TIMEOUT
        self.retry = DEFAULT_RETRY
        self.open_log = DEFAULT_OPEN_LOG
        self.application_name = application_name
        self.application_version = application_version
        if cache_dir is None:
            cache_dir = os.path.join(
                user_cache_dir(application_name or "fluentkit", appauthor=False), "network"
            )
        self.cache_dir = cache_dir
        self._interceptor: Callable[[NetworkParams], Any] | None = None
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    # Request builders -------------------------------------------------

    def get(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.NONE, Method.GET)

    def head(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.NONE, Method.HEAD)

    def post_body(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.BODY, Method.POST)

    def put_body(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.BODY, Method.PUT)

    def patch_body(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.BODY, Method.PATCH)

    def delete_body(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.BODY, Method.DELETE)

    def post_form(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.FORM, Method.POST)

    def put_form(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.FORM, Method.PUT)

    def patch_form(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.FORM, Method.PATCH)

    def delete_form(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.FORM, Method.DELETE)

    def post_json(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSON, Method.POST)

    def put_json(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSON, Method.PUT)

    def patch_json(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSON, Method.PATCH)

    def delete_json(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSON, Method.DELETE)

    def post_json_array(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSONARRAY, Method.POST)

    def put_json_array(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSONARRAY, Method.PUT)

    def patch_json_array(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSONARRAY, Method.PATCH)

    def delete_json_array(self, url: str) -> NetworkParams:
        return NetworkParams(url, BodyType.JSONARRAY, Method.DELETE)

    def set_interceptor(self, interceptor: Callable[[NetworkParams], Any] | None) -> None:
        """Set a function that sees every request's params just before it is sent."""
        self._interceptor = interceptor

    # Running requests -------------------------------------------------

    def go(self, params: NetworkParams, callable: NetworkCallable | None = None) -> Future:
        """Run the request in the background; the returned future completes with it."""
        if self._interceptor is not None:
            self._interceptor(params)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self._max_workers)
        if params.download is not None:
            return self._executor.submit(self.handle_download, params, callable)
        return self._executor.submit(self.handle, params, callable)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background workers started by :meth:`go`."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def _timeout_seconds(self, params: NetworkParams) -> float | None:
        timeout_ms = params.get_timeout(self.timeout)
        return timeout_ms / 1000 if timeout_ms > 0 else None

    def _headers(self, params: NetworkParams) -> dict[str, str]:
        headers = {
            "User-Agent": f"Mozilla/5.0 {self.application_name}/{self.application_version}"
        }
        for key, value in params.header_map.items():
            headers[_text(key)] = _text(value)
        return headers

    def _prepare(
        self, session: requests.Session, params: NetworkParams, url: str,
        headers: dict[str, str], opened: list,
    ) -> requests.PreparedRequest:
        verb = params.method_name()
        data: Any = None
        files: Any = None
        body_type = params.body_type
        if body_type == BodyType.FORM:
            if params.file_map:
                data = {key: _text(params.param_map[key]) for key in sorted(params.param_map)}
                files = {}
                for key in sorted(params.file_map):
                    path = _text(params.file_map[key])
                    try:
                        handle = open(path, "rb")
                        opened.append(handle)
                    except OSError:
                        handle = b""
                    files[key] = (os.path.basename(path), handle)
            else:
                headers["Content-Type"] = "application/x-www-form-urlencoded"
                data = "&".join(
                    f"{key}={_text(params.param_map[key])}" for key in sorted(params.param_map)
                ).encode("utf-8")
        elif body_type == BodyType.JSON:
            headers["Content-Type"] = "application/json;charset=utf-8"
            data = json.dumps(
                params.param_map, sort_keys=True, separators=(",", ":"), ensure_ascii=False
            ).encode("utf-8")
        elif body_type == BodyType.JSONARRAY:
            headers["Content-Type"] = "application/json;charset=utf-8"
            array = [{key: params.param_map[key]} for key in sorted(params.param_map)]
            data = json.dumps(array, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        elif body_type == BodyType.BODY:
            headers["Content-Type"] = "text/plain;charset=utf-8"
            data = params.body.encode("utf-8")
        request = requests.Request(verb, url, headers=headers, data=data, files=files)
        return session.prepare_request(request)

    def _log_start(self, params: NetworkParams, prepared: requests.PreparedRequest) -> None:
        if not params.get_open_log(self.open_log):
            return
        _logger.debug("<------ %s Request Start ------>", prepared.headers.get("User-Agent", ""))
        _logger.debug("<%s> %s", params.method_name(), params.url)
        content_type = prepared.headers.get("Content-Type", "")
        if content_type:
            _logger.debug("<Header> Content-Type=%s", content_type)
        for key, value in params.header_map.items():
            _logger.debug("<Header> %s=%s", key, _text(value))
        if params.query_map:
            _logger.debug("<Query> %s", map_to_string(params.query_map))
        if params.param_map:
            _logger.debug("<Param> %s", map_to_string(params.param_map))
        if params.file_map:
            _logger.debug("<File> %s", map_to_string(params.file_map))
        if params.body:
            _logger.debug("<Body> %s", params.body)

    def _log_end(self, params: NetworkParams, user_agent: str, response: str) -> None:
        if not params.get_open_log(self.open_log):
            return
        _logger.debug("<------ %s Request End ------>", user_agent)
        _logger.debug("<%s> %s", params.method_name(), params.url)
        _logger.debug("<Result> %s", response)

    def handle(self, params: NetworkParams, callable: NetworkCallable | None = None) -> None:
        """Send a request with retries, using and filling the cache as asked."""
        callable = callable or NetworkCallable()
        callable.start()
        cache_key = params.build_cache_key()
        mode = params.cache_mode
        if mode == CacheMode.FIRST_CACHE_THEN_REQUEST and self.cache_exists(cache_key):
            callable.cache(self.read_cache(cache_key))
        if mode == CacheMode.IF_NONE_CACHE_REQUEST and self.cache_exists(cache_key):
            callable.cache(self.read_cache(cache_key))
            callable.finish()
            return
        timeout = self._timeout_seconds(params)
        retry = params.get_retry(self.retry)
        url = add_query_param(params.url, params.query_map)
        with requests.Session() as session:
            for attempt in range(retry):
                if _target_gone(params):
                    break
                headers = self._headers(params)
                opened: list = []
                try:
                    prepared = self._prepare(session, params, url, headers, opened)
                    if attempt == 0:
                        self._log_start(params, prepared)
                    user_agent = prepared.headers.get("User-Agent", "")
                    try:
                        reply = session.send(prepared, timeout=timeout)
                    except requests.RequestException as exc:
                        status, error_string, response = 0, str(exc), ""
                    else:
                        if params.body_type == BodyType.FORM and params.file_map:
                            sent = len(prepared.body or b"")
                            if sent:
                                callable.upload_progress(sent, sent)
                        if params.method == Method.HEAD:
                            response = header_list_to_string(reply.headers.items())
                        else:
                            response = reply.content.decode("utf-8", errors="replace")
                        status = reply.status_code
                        error_string = _http_error_string(url, reply)
                finally:
                    for handle in opened:
                        handle.close()
                if status == 200:
                    if mode != CacheMode.NO_CACHE:
                        self.save_response(cache_key, response)
                    callable.success(response)
                    self._log_end(params, user_agent, response)
                    break
                if attempt == retry - 1:
                    if (mode == CacheMode.REQUEST_FAILED_READ_CACHE
                            and self.cache_exists(cache_key)):
                        callable.cache(self.read_cache(cache_key))
                    callable.error(status, error_string, response)
                    self._log_end(params, user_agent, response)
        callable.finish()

    def handle_download(
        self, params: NetworkParams, callable: NetworkCallable | None = None
    ) -> None:
        """Download to the params' destination, resuming when ``append`` allows it."""
        callable = callable or NetworkCallable()
        download = params.download
        if download is None:
            raise ValueError("params have no download destination")
        callable.start()
        cache_key = params.build_cache_key()
        url = add_query_param(params.url, params.query_map)
        headers = self._headers(params)
        cache_path = self.get_cache_file_path(cache_key)
        dest_path = download.dest_path
        seek = 0
        file_mode = "wb"
        if os.path.exists(cache_path) and os.path.exists(dest_path) and download.append:
            try:
                info = json.loads(self.read_cache(cache_key))
                if not isinstance(info, dict):
                    info = {}
            except ValueError:
                info = {}
            file_size = round(float(info.get("fileSize", 0) or 0))
            content_length = round(float(info.get("contentLength", 0) or 0))
            dest_size = os.path.getsize(dest_path)
            if file_size == content_length and dest_size == content_length:
                callable.download_progress(file_size, content_length)
                callable.success(dest_path)
                callable.finish()
                return
            if file_size == dest_size:
                headers["Range"] = f"bytes={file_size}-"
                seek = file_size
                file_mode = "ab"
        try:
            dest_file = open(dest_path, file_mode)
        except OSError:
            callable.error(-1, "device not open", "")
            callable.finish()
            return
        cache_file = None
        if download.append:
            try:
                cache_file = open(cache_path, "wb")
            except OSError:
                dest_file.close()
                callable.error(-1, "cache file device not open", "")
                callable.finish()
                return
        user_agent = headers["User-Agent"]
        try:
            with requests.Session() as session:
                try:
                    with session.get(
                        url, headers=headers, timeout=self._timeout_seconds(params), stream=True
                    ) as reply:
                        status = reply.status_code
                        error_string = _http_error_string(url, reply)
                        if status < 400:
                            self._receive(reply, seek, dest_file, cache_file, callable)
                except requests.RequestException as exc:
                    status, error_string = 0, str(exc)
        finally:
            dest_file.close()
            if cache_file is not None:
                cache_file.close()
        if status == 200:
            callable.success(dest_path)
        else:
            callable.error(status, error_string, dest_path)
        self._log_end(params, user_agent, dest_path)
        callable.finish()

    @staticmethod
    def _receive(reply: requests.Response, seek: int, dest_file, cache_file,
                 callable: NetworkCallable) -> None:
        content_length = _to_int(reply.headers.get("Content-Length")) + seek
        etag = reply.headers.get("ETag", "")
        for chunk in reply.iter_content(chunk_size=_CHUNK_SIZE):
            if not chunk:
                continue
            dest_file.write(chunk)
            dest_file.flush()
            size = os.fstat(dest_file.fileno()).st_size
            if cache_file is not None:
                info = {"contentLength": content_length, "eTag": etag, "fileSize": size}
                cache_file.seek(0)
                cache_file.truncate()
                cache_file.write(base64.b64encode(json.dumps(info, indent=4).encode("utf-8")))
                cache_file.flush()
            callable.download_progress(size, content_length)

    # Cache ------------------------------------------------------------

    def get_cache_file_path(self, key: str) -> str:
        os.makedirs(self.cache_dir, exist_ok=True)
        return os.path.abspath(os.path.join(self.cache_dir, key))

    def cache_exists(self, key: str) -> bool:
        return os.path.exists(self.get_cache_file_path(key))

    def read_cache(self, key: str) -> str:
        """Return the cached text for ``key``, or an empty string if there is none."""
        path = self.get_cache_file_path(key)
        try:
            with open(path, "rb") as handle:
                raw = handle.read()
        except OSError:
            return ""
        try:
            return base64.b64decode(raw).decode("utf-8", errors="replace")
        except ValueError:
            return ""

    def save_response(self, key: str, response: str) -> None:
        try:
            with open(self.get_cache_file_path(key), "wb") as handle:
                handle.write(base64.b64encode(response.encode("utf-8")))
        except OSError:
            return