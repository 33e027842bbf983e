"""Request description built up step by step before it is sent."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

__all__ = [
    "CacheMode", "Method", "BodyType", "DownloadParam", "NetworkParams",
    "map_to_string", "DEFAULT_TIMEOUT", "DEFAULT_RETRY", "DEFAULT_OPEN_LOG",
]

DEFAULT_TIMEOUT = 5000
DEFAULT_RETRY = 3
DEFAULT_OPEN_LOG = False


class CacheMode(IntEnum):
    """How a request uses the response cache."""

    NO_CACHE = 0x0000
    REQUEST_FAILED_READ_CACHE = 0x0001
    IF_NONE_CACHE_REQUEST = 0x0002
    FIRST_CACHE_THEN_REQUEST = 0x0004


class Method(IntEnum):
    GET = 0
    HEAD = 1
    POST = 2
    PUT = 3
    PATCH = 4
    DELETE = 5


class BodyType(IntEnum):
    """How the parameters are put into the request body."""

    NONE = 0
    FORM = 1
    JSON = 2
    JSONARRAY = 3
    BODY = 4


@dataclass(frozen=True)
class DownloadParam:
    """Where a download goes and whether it may resume an earlier one."""

    dest_path: str
    append: bool = False


def _value_to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def map_to_string(mapping: dict[str, Any]) -> str:
    """Return ``key=value`` pairs in key order, separated by spaces."""
    return " ".join(
        f"{key}={_value_to_string(mapping[key])}" for key in sorted(mapping)
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class NetworkParams:
    """A request's URL, method, body kind, parameters and options.

    Every ``add``/``set`` method returns the object itself so calls chain.
    """

    def __init__(
        self,
        url: str = "",
        body_type: BodyType = BodyType.BODY,
        method: Method = Method.GET,
    ) -> None:
        self.url = url
        self.body_type = BodyType(body_type)
        self.method = Method(method)
        self.body = ""
        self.query_map: dict[str, Any] = {}
        self.header_map: dict[str, Any] = {}
        self.param_map: dict[str, Any] = {}
        self.file_map: dict[str, Any] = {}
        self.timeout = -1
        self.retry = -1
        self.log: bool | None = None
        self.cache_mode = CacheMode.NO_CACHE
        self.download: DownloadParam | None = None
        self.target: Any = None

    def add_query(self, key: str, value: Any) -> NetworkParams:
        self.query_map[key] = value
        return self

    def add_header(self, key: str, value: Any) -> NetworkParams:
        self.header_map[key] = value
        return self

    def add(self, key: str, value: Any) -> NetworkParams:
        self.param_map[key] = value
        return self

    def add_file(self, key: str, value: Any) -> NetworkParams:
        self.file_map[key] = value
        return self

    def set_body(self, value: str) -> NetworkParams:
        self.body = value
        return self

    def set_timeout(self, value: int) -> NetworkParams:
        self.timeout = int(value)
        return self

    def set_retry(self, value: int) -> NetworkParams:
        self.retry = int(value)
        return self

    def set_cache_mode(self, value: int) -> NetworkParams:
        self.cache_mode = CacheMode(value)
        return self

    def to_download(self, dest_path: str, append: bool = False) -> NetworkParams:
        self.download = DownloadParam(dest_path, bool(append))
        return self

    def bind(self, target: Any) -> NetworkParams:
        """Tie the request to an object; the request is aborted once it is gone."""
        self.target = target
        return self

    def open_log(self, value: bool | None) -> NetworkParams:
        self.log = None if value is None else bool(value)
        return self

    def method_name(self) -> str:
        return self.method.name

    def get_timeout(self, default: int = DEFAULT_TIMEOUT) -> int:
        return self.timeout if self.timeout != -1 else default

    def get_retry(self, default: int = DEFAULT_RETRY) -> int:
        return self.retry if self.retry != -1 else default

    def get_open_log(self, default: bool = DEFAULT_OPEN_LOG) -> bool:
        return self.log if self.log is not None else default

    def build_cache_key(self) -> str:
        """Return the SHA-256 hex digest identifying this request in the cache."""
        obj: dict[str, Any] = {
            "url": self.url,
            "method": self.method_name(),
            "body": self.body,
            "query": self.query_map,
            "param": self.param_map,
            "header": self.header_map,
            "file": self.file_map,
        }
        if self.download is not None:
            obj["download"] = {
                "destPath": self.download.dest_path,
                "append": self.download.append,
            }
        data = json.dumps(
            obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False,
            default=_json_default,
        )
        return hashlib.sha256(data.encode("utf-8")).hexdigest()