"""Wrappers that add headers to the reply of a filter."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any, Mapping

from .core import Filter, Headers, Response, into_response

__all__ = [
    "WithHeader",
    "WithHeaders",
    "WithDefaultHeader",
    "header",
    "headers",
    "default_header",
]

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def _check_name(name: Any) -> str:
    if isinstance(name, (bytes, bytearray)):
        name = bytes(name).decode("latin-1")
    if not isinstance(name, str) or not name or any(ch not in _TOKEN_CHARS for ch in name):
        raise ValueError("invalid header name")
    return name.lower()


def _check_value(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    if not isinstance(value, str):
        value = str(value)
    if any((ch < " " and ch != "\t") or ch == "\x7f" for ch in value):
        raise ValueError("invalid header value")
    return value


@dataclass(frozen=True)
class WithHeader:
    """Always set one header on a successful reply, replacing any existing value."""

    name: str
    value: str

    def wrap(self, filter: Filter) -> Filter:
        """Wrap ``filter`` so its reply carries this header."""

        def apply_header(reply: Any) -> Response:
            response = into_response(reply)
            response.headers[self.name] = self.value
            return response

        return filter.map(apply_header)


@dataclass(frozen=True)
class WithHeaders:
    """Always set several headers on a successful reply, replacing existing values."""

    headers: Headers

    def wrap(self, filter: Filter) -> Filter:
        """Wrap ``filter`` so its reply carries these headers."""

        def apply_headers(reply: Any) -> Response:
            response = into_response(reply)
            for name, value in self.headers.items():
                response.headers[name] = value
            return response

        return filter.map(apply_headers)


@dataclass(frozen=True)
class WithDefaultHeader:
    """Set one header on a successful reply only if it is not already set."""

    name: str
    value: str

    def wrap(self, filter: Filter) -> Filter:
        """Wrap ``filter`` so its reply carries this header unless it has one."""

        def apply_default(reply: Any) -> Response:
            response = into_response(reply)
            response.headers.setdefault(self.name, self.value)
            return response

        return filter.map(apply_default)


def header(name: Any, value: Any) -> WithHeader:
    """Wrapper that sets header ``name`` to ``value``; raises ValueError if either is invalid."""
    return WithHeader(_check_name(name), _check_value(value))


def headers(headers: Mapping[str, Any] | Headers) -> WithHeaders:
    """Wrapper that sets every header in ``headers``."""
    checked = Headers()
    for name, value in Headers(headers).items():
        checked[_check_name(name)] = _check_value(value)
    return WithHeaders(checked)


def default_header(name: Any, value: Any) -> WithDefaultHeader:
    """Wrapper that sets header ``name`` to ``value`` if absent; raises ValueError if invalid."""
    return WithDefaultHeader(_check_name(name), _check_value(value))