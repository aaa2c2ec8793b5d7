"""Filters on the authority (host and port) a request is addressed to."""

from __future__ import annotations

import string
from dataclasses import dataclass

from .core import Filter, InvalidHeader, NotFound, Request

__all__ = ["Authority", "exact", "optional"]

_ALLOWED = frozenset(string.ascii_letters + string.digits + "-._~!$&'()*+,;=:@[]%")


@dataclass(frozen=True, eq=False)
class Authority:
    """The authority part of a URI: optional user info, a host and an optional port."""

    text: str

    @classmethod
    def parse(cls, text: str) -> "Authority":
        """Parse ``text`` as an authority, raising ValueError if it is malformed."""
        if not text:
            raise ValueError("empty authority")
        if any(ch not in _ALLOWED for ch in text):
            raise ValueError(f"invalid character in authority {text!r}")
        _, _, host_port = text.rpartition("@")
        host, port = _split_host_port(host_port)
        if not host:
            raise ValueError(f"authority {text!r} has no host")
        if port and not port.isdigit():
            raise ValueError(f"invalid port in authority {text!r}")
        return cls(text)

    def host(self) -> str:
        """The host, without user info or port."""
        _, _, host_port = self.text.rpartition("@")
        return _split_host_port(host_port)[0]

    def port(self) -> int | None:
        """The port as a number, or ``None`` if none was given."""
        _, _, host_port = self.text.rpartition("@")
        port = _split_host_port(host_port)[1]
        return int(port) if port else None

    def as_str(self) -> str:
        """The authority as text."""
        return self.text

    def __str__(self) -> str:
        return self.text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Authority):
            return NotImplemented
        return self.text.lower() == other.text.lower()

    def __hash__(self) -> int:
        return hash(self.text.lower())


def _split_host_port(host_port: str) -> tuple[str, str]:
    if host_port.startswith("["):
        close = host_port.find("]")
        if close < 0:
            raise ValueError(f"unclosed bracket in authority {host_port!r}")
        host, rest = host_port[: close + 1], host_port[close + 1:]
        if not rest:
            return host, ""
        if not rest.startswith(":"):
            raise ValueError(f"invalid text after host in {host_port!r}")
        return host, rest[1:]
    if "[" in host_port or "]" in host_port:
        raise ValueError(f"misplaced bracket in authority {host_port!r}")
    if host_port.count(":") > 1:
        raise ValueError(f"too many colons in authority {host_port!r}")
    host, _, port = host_port.partition(":")
    return host, port


def _header_authority(request: Request) -> Authority | None:
    name = "host"
    raw = request.headers.get(name)
    if raw is None:
        return None
    if not all(ch == "\t" or " " <= ch <= "~" for ch in raw):
        raise InvalidHeader(name)
    try:
        return Authority.parse(raw)
    except ValueError:
        raise InvalidHeader(name) from None


def optional() -> Filter:
    """Extract the request's authority from the URI or ``Host`` header, or ``None``.

    Rejects if the ``Host`` header is malformed or disagrees with the URI.
    """

    def run(request: Request) -> tuple:
        from_header = _header_authority(request)
        from_uri = Authority(request.authority) if request.authority else None
        if from_uri is None:
            return (from_header,)
        if from_header is None or from_uri == from_header:
            return (from_header or from_uri,)
        raise InvalidHeader("host")

    return Filter(run)


def exact(expected: str) -> Filter:
    """Require the request's authority to equal ``expected``; reject with Not Found otherwise."""
    wanted = Authority.parse(expected)
    found = optional()

    def run(request: Request) -> tuple:
        (authority,) = found.apply(request)
        if authority is not None and authority == wanted:
            return ()
        raise NotFound()

    return Filter(run)