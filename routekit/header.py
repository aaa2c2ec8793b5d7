"""Filters on request headers."""

from __future__ import annotations

from typing import Any, Callable

from .core import Filter, Headers, InvalidHeader, MissingHeader, Request

__all__ = ["header", "optional", "exact", "exact_ignore_case", "value", "headers_cloned"]

_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


def _visible_str(raw: str, name: str) -> str:
    if all(ch == "\t" or " " <= ch <= "~" for ch in raw):
        return raw
    raise InvalidHeader(name)


def _parse(raw: str, name: str, parse: Callable[[str], Any]) -> Any:
    text = _visible_str(raw, name)
    try:
        return parse(text)
    except (ValueError, TypeError) as exc:
        raise InvalidHeader(name) from exc


def _lookup(request: Request, name: str) -> str:
    try:
        return request.headers[name]
    except KeyError:
        raise MissingHeader(name) from None


def header(name: str, parse: Callable[[str], Any] = str) -> Filter:
    """Extract header ``name`` parsed with ``parse``; reject if missing or unparsable."""
    return Filter(lambda request: (_parse(_lookup(request, name), name, parse),))


def optional(name: str, parse: Callable[[str], Any] = str) -> Filter:
    """Extract header ``name`` parsed with ``parse``, or ``None`` if absent."""
    def run(request: Request) -> tuple:
        raw = request.headers.get(name)
        if raw is None:
            return (None,)
        return (_parse(raw, name, parse),)

    return Filter(run)


def exact(name: str, value: str) -> Filter:
    """Require header ``name`` to equal ``value`` exactly."""
    def run(request: Request) -> tuple:
        if _lookup(request, name) == value:
            return ()
        raise InvalidHeader(name)

    return Filter(run)


def exact_ignore_case(name: str, value: str) -> Filter:
    """Require header ``name`` to equal ``value``, ignoring ASCII case."""
    expected = value.translate(_ASCII_LOWER)

    def run(request: Request) -> tuple:
        if _lookup(request, name).translate(_ASCII_LOWER) == expected:
            return ()
        raise InvalidHeader(name)

    return Filter(run)


def value(name: str) -> Filter:
    """Extract the raw value of header ``name``; reject if missing."""
    return Filter(lambda request: (_lookup(request, name),))


def headers_cloned() -> Filter:
    """Extract a copy of all request headers; never rejects."""
    return Filter(lambda request: (Headers(request.headers),))