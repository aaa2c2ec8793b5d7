"""Requests, responses, rejections and the composable ``Filter`` type."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Callable

__all__ = [
    "Headers",
    "Request",
    "Response",
    "Rejection",
    "NotFound",
    "MethodNotAllowed",
    "MissingHeader",
    "InvalidHeader",
    "InvalidQuery",
    "Filter",
    "combine",
    "call",
    "any",
    "into_response",
]


class Headers(MutableMapping):
    """A case-insensitive mapping of header names to string values."""

    def __init__(self, items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None):
        self._data: dict[str, str] = {}
        if items is None:
            return
        pairs = items.items() if isinstance(items, Mapping) else items
        for name, value in pairs:
            self[name] = value

    def __getitem__(self, name: str) -> str:
        return self._data[name.lower()]

    def __setitem__(self, name: str, value: Any) -> None:
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("latin-1")
        self._data[name.lower()] = str(value)

    def __delitem__(self, name: str) -> None:
        del self._data[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def copy(self) -> "Headers":
        """Return an independent copy of these headers."""
        return Headers(self._data)

    def __repr__(self) -> str:
        return f"Headers({self._data!r})"


_URI_RE = re.compile(
    r"^(?:[A-Za-z][A-Za-z0-9+.\-]*://(?P<authority>[^/?#]*))?"
    r"(?P<path>[^?#]*)(?:\?(?P<query>[^#]*))?"
)


@dataclass
class Request:
    """An incoming request together with the routing state of its path."""

    method: str = "GET"
    uri: str = "/"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    remote_addr: tuple[str, int] | None = None
    version: str = "HTTP/1.1"
    extensions: dict[str, Any] = field(default_factory=dict)
    path: str = field(init=False)
    query: str | None = field(init=False)
    authority: str | None = field(init=False)
    _index: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        match = _URI_RE.match(self.uri)
        self.authority = match.group("authority") or None
        self.path = match.group("path") or ("/" if self.authority is not None else "")
        self.query = match.group("query")
        self._index = 1 if self.path.startswith("/") else 0

    def remaining_path(self) -> str:
        """The part of the path that no filter has matched yet."""
        return self.path[self._index:]

    def matched_path_index(self) -> int:
        """Index into the full path where the unmatched part starts."""
        return self._index

    def set_unmatched_path(self, index: int) -> None:
        """Mark ``index`` characters of the remaining path as matched."""
        if not self.path:
            return
        new_index = self._index + index
        if new_index >= len(self.path):
            self._index = len(self.path)
        else:
            # Skip the separating slash after the matched segment.
            self._index = new_index + 1


@dataclass
class Response:
    """An outgoing response."""

    status: int = 200
    headers: Headers = field(default_factory=Headers)
    body: Any = b""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)


def into_response(reply: Any) -> Response:
    """Turn a reply value (a response, text, bytes or a reply object) into a Response."""
    if isinstance(reply, Response):
        return reply
    convert = getattr(reply, "into_response", None)
    if callable(convert):
        return convert()
    if isinstance(reply, str):
        return Response(200, Headers({"content-type": "text/plain; charset=utf-8"}), reply.encode())
    if isinstance(reply, (bytes, bytearray)):
        return Response(200, Headers({"content-type": "application/octet-stream"}), bytes(reply))
    raise TypeError(f"cannot build a response from {type(reply).__name__}")


class Rejection(Exception):
    """A filter declined the request; ``status`` is the HTTP status it maps to."""

    status = 500
    priority = 2

    def __init__(self, message: str | None = None):
        super().__init__(message or self.__class__.__doc__ or self.__class__.__name__)


class NotFound(Rejection):
    """Not Found"""

    status = 404
    priority = 0


class MethodNotAllowed(Rejection):
    """HTTP method not allowed"""

    status = 405
    priority = 1


class MissingHeader(Rejection):
    """A required request header is absent."""

    status = 400

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Missing request header "{name}"')


class InvalidHeader(Rejection):
    """A request header could not be parsed or did not match."""

    status = 400

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Invalid request header "{name}"')


class InvalidQuery(Rejection):
    """Invalid query string"""

    status = 400


def _preferred(first: Rejection, second: Rejection) -> Rejection:
    return second if second.priority > first.priority else first


def combine(left: tuple, right: tuple) -> tuple:
    """Concatenate two extracted tuples into one flat tuple."""
    return tuple(left) + tuple(right)


def call(func: Callable[..., Any], args: tuple) -> Any:
    """Call ``func`` with the extracted values spread as positional arguments."""
    return func(*args)


class Filter:
    """A composable request predicate that extracts a tuple of values or rejects."""

    def __init__(self, func: Callable[[Request], tuple]):
        self._func = func

    def apply(self, request: Request) -> tuple:
        """Run the filter; return the extracted tuple or raise a Rejection."""
        return tuple(self._func(request))

    def and_(self, other: "Filter") -> "Filter":
        """Require both filters, concatenating what they extract."""
        def run(request: Request) -> tuple:
            return combine(self.apply(request), other.apply(request))

        return Filter(run)

    def or_(self, other: "Filter") -> "Filter":
        """Try this filter, falling back to ``other`` if it rejects."""
        def run(request: Request) -> tuple:
            index = request.matched_path_index()
            try:
                return self.apply(request)
            except Rejection as first:
                request._index = index
                try:
                    return other.apply(request)
                except Rejection as second:
                    raise _preferred(first, second) from None

        return Filter(run)

    def map(self, func: Callable[..., Any]) -> "Filter":
        """Transform the extracted values into a single new value."""
        return Filter(lambda request: (call(func, self.apply(request)),))

    def and_then(self, func: Callable[..., Any]) -> "Filter":
        """Like ``map``, but ``func`` may raise a Rejection to decline the request."""
        def run(request: Request) -> tuple:
            return (call(func, self.apply(request)),)

        return Filter(run)

    def with_(self, wrapper: Any) -> Any:
        """Wrap this filter with a wrapper object offering ``wrap(filter)``."""
        return wrapper.wrap(self)

    def __and__(self, other: "Filter") -> "Filter":
        return self.and_(other)

    def __or__(self, other: "Filter") -> "Filter":
        return self.or_(other)


def any() -> Filter:  # noqa: A001 - mirrors the public filter name
    """A filter that matches every request and extracts nothing."""
    return Filter(lambda request: ())