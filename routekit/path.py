"""Filters on the path of a request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator

from .core import Filter, NotFound, Request, any as any_filter

__all__ = ["Tail", "Peek", "FullPath", "path", "end", "param", "tail", "peek", "full", "route"]


def _segment(request: Request) -> str:
    return request.remaining_path().split("/", 1)[0]


def path(segment: str) -> Filter:
    """Match the next path segment exactly against ``segment``.

    Raises ValueError if ``segment`` is empty or contains a slash.
    """
    if not segment:
        raise ValueError("exact path segments should not be empty")
    if "/" in segment:
        raise ValueError(f"exact path segments should not contain a slash: {segment!r}")

    def run(request: Request) -> tuple:
        seg = _segment(request)
        if seg != segment:
            raise NotFound()
        request.set_unmatched_path(len(seg))
        return ()

    return Filter(run)


def end() -> Filter:
    """Match only when the whole path has been matched."""

    def run(request: Request) -> tuple:
        if request.remaining_path():
            raise NotFound()
        return ()

    return Filter(run)


def param(parse: Callable[[str], Any] = str) -> Filter:
    """Extract the next path segment parsed with ``parse``; reject with Not Found on failure."""

    def run(request: Request) -> tuple:
        seg = _segment(request)
        if not seg:
            raise NotFound()
        try:
            value = parse(seg)
        except (ValueError, TypeError):
            raise NotFound() from None
        request.set_unmatched_path(len(seg))
        return (value,)

    return Filter(run)


@dataclass(frozen=True)
class Tail:
    """The unmatched rest of a path, taken by the ``tail`` filter."""

    full_path: str
    start_index: int

    def as_str(self) -> str:
        """The remaining path as text."""
        return self.full_path[self.start_index:]

    def __repr__(self) -> str:
        return repr(self.as_str())


@dataclass(frozen=True)
class Peek:
    """The unmatched rest of a path, seen by the ``peek`` filter without consuming it."""

    full_path: str
    start_index: int

    def as_str(self) -> str:
        """The remaining path as text."""
        return self.full_path[self.start_index:]

    def segments(self) -> Iterator[str]:
        """Iterate over the non-empty segments of the remaining path."""
        return (seg for seg in self.as_str().split("/") if seg)

    def __repr__(self) -> str:
        return repr(self.as_str())


@dataclass(frozen=True)
class FullPath:
    """The full request path, whatever has been matched."""

    full_path: str

    def as_str(self) -> str:
        """The full path as text."""
        return self.full_path

    def __repr__(self) -> str:
        return repr(self.full_path)


def tail() -> Filter:
    """Extract the unmatched rest of the path and mark it all as matched."""

    def run(request: Request) -> tuple:
        index = request.matched_path_index()
        request.set_unmatched_path(len(request.path) - index)
        return (Tail(request.path, index),)

    return Filter(run)


def peek() -> Filter:
    """Extract the unmatched rest of the path without matching it."""
    return Filter(lambda request: (Peek(request.path, request.matched_path_index()),))


def full() -> Filter:
    """Extract the full request path."""
    return Filter(lambda request: (FullPath(request.path),))


def route(*args: Any) -> Filter:
    """Chain path segments: strings match exactly, callables parse parameters.

    An ``...`` as the last argument leaves the path open as a prefix; otherwise
    the chain must match the whole path.
    """
    if not args:
        return end()
    if args == (Ellipsis,):
        raise ValueError("'...' cannot be the only segment")
    *body, last = args
    if Ellipsis in body:
        raise ValueError("'...' must be the last segment")
    combined = any_filter()
    for piece in body:
        combined = combined.and_(_piece(piece))
    if last is Ellipsis:
        return combined
    return combined.and_(_piece(last)).and_(end())


def _piece(piece: Any) -> Filter:
    if isinstance(piece, str):
        return path(piece)
    if callable(piece):
        return param(piece)
    raise TypeError(f"path segments must be strings or parsers, not {type(piece).__name__}")