"""Websocket upgrade filter and messages."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable

from .core import Filter, Headers, InvalidHeader, Rejection, Request, Response
from .header import exact, exact_ignore_case
from .method import get

__all__ = [
    "MissingConnectionUpgrade",
    "WebSocketConfig",
    "Ws",
    "MessageKind",
    "Message",
    "accept_key",
    "ws",
]

_log = logging.getLogger(__name__)

_GUID = b"258EAFA5-E914-47DA-95CA-C5AB0DC85B11"
_TASKS: set[asyncio.Task] = set()


class MissingConnectionUpgrade(Rejection):
    """Connection header did not include 'upgrade'"""

    status = 400


@dataclass(frozen=True)
class WebSocketConfig:
    """Limits applied to an upgraded websocket connection."""

    max_send_queue: int | None = None
    max_message_size: int | None = 64 << 20
    max_frame_size: int | None = 16 << 20


def accept_key(key: str | bytes) -> str:
    """The ``Sec-WebSocket-Accept`` value answering the client's ``key``."""
    raw = key.encode("latin-1") if isinstance(key, str) else bytes(key)
    return base64.b64encode(hashlib.sha1(raw + _GUID).digest()).decode("ascii")


def _spawn(upgrade: Callable[..., Awaitable[Any]], func: Callable[[Any], Awaitable[Any]],
           config: WebSocketConfig | None) -> None:
    async def run() -> None:
        try:
            socket = await upgrade(config)
            _log.debug("websocket upgrade complete")
            await func(socket)
        except Exception as err:
            _log.debug("ws upgrade error: %s", err)

    task = asyncio.get_running_loop().create_task(run())
    _TASKS.add(task)
    task.add_done_callback(_TASKS.discard)


@dataclass(frozen=True)
class Ws:
    """A websocket handshake accepted by the ``ws`` filter, ready to be finished.

    ``upgrade`` is the server-provided async callable that, given the
    connection config, completes the upgrade and returns the socket.
    """

    key: str
    upgrade: Callable[..., Awaitable[Any]] | None = None
    config: WebSocketConfig | None = None

    def on_upgrade(self, func: Callable[[Any], Awaitable[Any]]) -> Response:
        """Finish the handshake, handing the upgraded socket to ``func``.

        Must be called from a running event loop when an upgrade is available.
        """
        if self.upgrade is not None:
            _spawn(self.upgrade, func, self.config)
        else:
            _log.debug("ws couldn't be upgraded since no upgrade state was present")
        headers = Headers(
            {
                "connection": "upgrade",
                "upgrade": "websocket",
                "sec-websocket-accept": accept_key(self.key),
            }
        )
        return Response(101, headers, b"")

    def _with_config(self, **changes: Any) -> "Ws":
        return replace(self, config=replace(self.config or WebSocketConfig(), **changes))

    def max_send_queue(self, max: int) -> "Ws":  # noqa: A002
        """Set the size of the send queue."""
        return self._with_config(max_send_queue=max)

    def max_message_size(self, max: int) -> "Ws":  # noqa: A002
        """Set the maximum message size (64 MB by default)."""
        return self._with_config(max_message_size=max)

    def max_frame_size(self, max: int) -> "Ws":  # noqa: A002
        """Set the maximum frame size (16 MB by default)."""
        return self._with_config(max_frame_size=max)

    def __repr__(self) -> str:
        return "Ws()"


def _require_connection_upgrade(request: Request) -> None:
    raw = request.headers.get("connection")
    if raw is None or not all(ch == "\t" or " " <= ch <= "~" for ch in raw):
        raise InvalidHeader("connection")
    tokens = {token.strip().lower() for token in raw.split(",")}
    if "upgrade" not in tokens:
        raise MissingConnectionUpgrade()


def ws() -> Filter:
    """A filter accepting a websocket handshake and extracting a ``Ws``.

    Requires ``GET``, ``connection: upgrade``, ``upgrade: websocket``,
    ``sec-websocket-version: 13`` and a ``sec-websocket-key``.
    """
    method_check = get()
    upgrade_check = exact_ignore_case("upgrade", "websocket")
    version_check = exact("sec-websocket-version", "13")

    def run(request: Request) -> tuple:
        method_check.apply(request)
        _require_connection_upgrade(request)
        upgrade_check.apply(request)
        version_check.apply(request)
        key = request.headers.get("sec-websocket-key")
        if key is None:
            raise InvalidHeader("sec-websocket-key")
        upgrade = request.extensions.pop("on_upgrade", None)
        return (Ws(key, upgrade),)

    return Filter(run)


class MessageKind(Enum):
    """The kind of a websocket message."""

    TEXT = "text"
    BINARY = "binary"
    PING = "ping"
    PONG = "pong"
    CLOSE = "close"


@dataclass(frozen=True)
class Message:
    """A websocket message."""

    kind: MessageKind
    payload: str | bytes = b""
    frame: tuple[int, str] | None = None

    @classmethod
    def text(cls, s: str) -> "Message":
        """A text message."""
        return cls(MessageKind.TEXT, str(s))

    @classmethod
    def binary(cls, v: bytes) -> "Message":
        """A binary message."""
        return cls(MessageKind.BINARY, bytes(v))

    @classmethod
    def ping(cls, v: bytes) -> "Message":
        """A ping message."""
        return cls(MessageKind.PING, bytes(v))

    @classmethod
    def pong(cls, v: bytes) -> "Message":
        """A pong message."""
        return cls(MessageKind.PONG, bytes(v))

    @classmethod
    def close(cls) -> "Message":
        """A close message without code or reason."""
        return cls(MessageKind.CLOSE)

    @classmethod
    def close_with(cls, code: int, reason: str) -> "Message":
        """A close message with a status ``code`` and ``reason``."""
        code = int(code)
        if not 0 <= code <= 0xFFFF:
            raise ValueError(f"close code out of range: {code}")
        return cls(MessageKind.CLOSE, frame=(code, str(reason)))

    def is_text(self) -> bool:
        """Whether this is a text message."""
        return self.kind is MessageKind.TEXT

    def is_binary(self) -> bool:
        """Whether this is a binary message."""
        return self.kind is MessageKind.BINARY

    def is_close(self) -> bool:
        """Whether this is a close message."""
        return self.kind is MessageKind.CLOSE

    def is_ping(self) -> bool:
        """Whether this is a ping message."""
        return self.kind is MessageKind.PING

    def is_pong(self) -> bool:
        """Whether this is a pong message."""
        return self.kind is MessageKind.PONG

    def close_frame(self) -> tuple[int, str] | None:
        """The close code and reason, if this is a close message carrying them."""
        return self.frame if self.is_close() else None

    def to_str(self) -> str:
        """The text of a text message; raises ValueError for other kinds."""
        if self.is_text():
            return self.payload
        raise ValueError("not a text message")

    def as_bytes(self) -> bytes:
        """The payload bytes; empty for close messages."""
        if self.is_close():
            return b""
        if isinstance(self.payload, str):
            return self.payload.encode("utf-8")
        return self.payload

    def into_bytes(self) -> bytes:
        """The message data as bytes; a close message yields its reason."""
        if self.is_close():
            return self.frame[1].encode("utf-8") if self.frame else b""
        return self.as_bytes()

    def __bytes__(self) -> bytes:
        return self.into_bytes()