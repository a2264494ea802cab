"""Shared fakes for stats client tests: in-memory channel, opener and sink."""
from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from statsview.errors import ChannelError
from statsview.model import ViewModel

_END = object()


class FakeChannel:
    """Channel fed from the test: push() messages, end() cleanly or fail()."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self.closed = False

    def push(self, raw: str | bytes) -> None:
        self._queue.put_nowait(raw)

    def end(self) -> None:
        self._queue.put_nowait(_END)

    def fail(self, exc: BaseException) -> None:
        self._queue.put_nowait(exc)

    async def __aiter__(self):
        while True:
            item = await self._queue.get()
            if item is _END:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    async def close(self) -> None:
        self.closed = True


class FakeOpener:
    """Opener returning a fresh FakeChannel per call; `fail_next` refusals first."""

    def __init__(self, fail_next: int = 0) -> None:
        self.fail_next = fail_next
        self.calls: list[str] = []
        self.channels: list[FakeChannel] = []

    async def __call__(self, url: str) -> FakeChannel:
        self.calls.append(url)
        if self.fail_next > 0:
            self.fail_next -= 1
            raise ChannelError("connection refused")
        ch = FakeChannel()
        self.channels.append(ch)
        return ch

    @property
    def current(self) -> FakeChannel:
        return self.channels[-1]


class RecordingSink:
    def __init__(self) -> None:
        self.views: list[ViewModel] = []
        self.indicator: list[bool] = []
        self.messages: list[str] = []
        self.closed = False

    def render(self, view: ViewModel) -> None:
        self.views.append(view)

    def set_connected(self, connected: bool) -> None:
        self.indicator.append(connected)

    def show_message(self, text: str) -> None:
        self.messages.append(text)

    def close(self) -> None:
        self.closed = True


async def settle(rounds: int = 10) -> None:
    """Let ready callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def wait_for(cond: Callable[[], bool], timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not cond():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached before timeout")
        await asyncio.sleep(0.005)
