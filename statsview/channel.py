"""Push channel abstraction and its WebSocket implementation.

A `Channel` is an async iterable of raw inbound messages plus `close()`.
Iteration ends normally when the peer closes the channel cleanly and raises
`ChannelError` when it fails. An `Opener` coroutine performs the handshake
and returns an open channel (or raises `ChannelError`). The connection
manager only depends on these two seams, so tests substitute in-memory
fakes and the transport can change without touching the state machine.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosedError, WebSocketException

from .errors import ChannelError

logger = logging.getLogger(__name__)


class Channel(Protocol):
    def __aiter__(self) -> AsyncIterator[str | bytes]: ...  # pragma: no cover - interface only

    async def close(self) -> None: ...  # pragma: no cover - interface only


Opener = Callable[[str], Awaitable[Channel]]


class WebSocketChannel:
    """Adapter exposing a websockets client connection as a Channel."""

    def __init__(self, conn: ClientConnection) -> None:
        self._conn = conn

    async def __aiter__(self) -> AsyncIterator[str | bytes]:
        try:
            async for message in self._conn:
                yield message
        except ConnectionClosedError as e:
            raise ChannelError(f"channel closed abnormally: {e}") from e

    async def close(self) -> None:
        await self._conn.close()


def websocket_opener(*, open_timeout: float = 10.0, ping_interval: float | None = 20.0) -> Opener:
    """Build an Opener backed by `websockets`.

    The handshake timeout is the only bound on the connecting phase.
    """
    async def _open(url: str) -> Channel:
        try:
            conn = await connect(url, open_timeout=open_timeout, ping_interval=ping_interval)
        except (OSError, TimeoutError, WebSocketException) as e:
            raise ChannelError(f"cannot open {url}: {e}") from e
        logger.debug("websocket handshake complete url=%s", url)
        return WebSocketChannel(conn)

    return _open


__all__ = ["Channel", "Opener", "WebSocketChannel", "websocket_opener"]
