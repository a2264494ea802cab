"""Connection manager for the stats push channel.

State machine::

    DISCONNECTED --start()/reconnect timer--> CONNECTING
    CONNECTING   --channel opened-----------> CONNECTED
    CONNECTING|CONNECTED --close/error------> DISCONNECTED (+ one reconnect timer)

The manager owns the single channel handle and the connectivity state. It
never emits placeholder payloads: connecting or reconnecting leaves the
consumer's last view untouched, only the state-change callback fires.

Reconnects use a fixed delay (no backoff, no cap, no give-up) and at most
one timer is ever pending. Everything runs on one asyncio loop; inbound
messages are decoded and delivered strictly in arrival order by a single
receive task.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from .channel import Channel, Opener, websocket_opener
from .decode import decode_snapshot
from .errors import ChannelError, ConfigError, SnapshotDecodeError
from .metrics import StatsViewMetrics, get_metrics
from .model import ConnectivityState, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 2.0

SnapshotCallback = Callable[[Snapshot], None]
StateCallback = Callable[[ConnectivityState], None]


class ConnectionManager:
    """Keeps at most one push channel open and re-opens it after loss."""

    def __init__(
        self,
        url: str,
        *,
        on_snapshot: SnapshotCallback,
        on_state_change: StateCallback | None = None,
        opener: Opener | None = None,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        metrics: StatsViewMetrics | None = None,
    ) -> None:
        if not reconnect_delay > 0:
            raise ConfigError(f"reconnect_delay must be positive, got {reconnect_delay!r}")
        self._url = url
        self._on_snapshot = on_snapshot
        self._on_state_change = on_state_change
        self._opener = opener if opener is not None else websocket_opener()
        self._reconnect_delay = float(reconnect_delay)
        self._metrics = metrics if metrics is not None else get_metrics()
        self._state = ConnectivityState.DISCONNECTED
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._channel: Channel | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._started = False
        self._stopped = False
        self._attempt = 0
        self._metrics.record_state(self._state)

    # -------------------- properties --------------------
    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectivityState:
        return self._state

    @property
    def reconnect_delay(self) -> float:
        return self._reconnect_delay

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    # -------------------- lifecycle --------------------
    def start(self) -> None:
        """Open the channel. No-op while connecting, connected or waiting to reconnect."""
        if self._stopped:
            return
        if self._state is not ConnectivityState.DISCONNECTED or self._reconnect_handle is not None:
            logger.debug("start ignored state=%s reconnect_pending=%s", self._state.value, self.reconnect_pending)
            return
        self._loop = asyncio.get_running_loop()
        self._started = True
        self._attempt += 1
        self._set_state(ConnectivityState.CONNECTING)
        self._task = self._loop.create_task(self._run(), name="statsview-channel")

    async def stop(self) -> None:
        """Tear down: cancel the pending reconnect and the receive task, close the channel."""
        self._stopped = True
        self._cancel_reconnect()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._channel is not None:
            await self._close_channel(self._channel)
        self._set_state(ConnectivityState.DISCONNECTED)
        logger.info("stats channel stopped url=%s", self._url)

    # -------------------- channel events --------------------
    def on_message(self, raw: str | bytes) -> None:
        """Decode one inbound message and hand it to the consumer.

        Malformed messages are logged and dropped; the channel stays open.
        """
        t0 = time.perf_counter()
        try:
            snapshot = decode_snapshot(raw)
        except SnapshotDecodeError as e:
            self._metrics.messages.labels(result="decode_error").inc()
            logger.warning("dropping malformed stats message (%s) len=%s", e.reason, len(raw))
            return
        self._metrics.messages.labels(result="ok").inc()
        try:
            self._on_snapshot(snapshot)
        except Exception:
            logger.exception("snapshot consumer failed; message skipped")
        finally:
            self._metrics.apply_seconds.observe(time.perf_counter() - t0)

    def on_error(self, exc: BaseException) -> None:
        """Advisory only: record the error. Closure is reported through on_close."""
        self._metrics.channel_errors.inc()
        logger.warning("stats channel error url=%s: %s", self._url, exc)

    def on_close(self) -> None:
        """Channel is gone: flip to DISCONNECTED and schedule one reconnect."""
        if self._stopped or not self._started:
            return
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            # closure reported from outside the reader; drop the old reader so
            # the reconnect cannot leave two channels open
            task.cancel()
        self._channel = None
        self._set_state(ConnectivityState.DISCONNECTED)
        self._schedule_reconnect()

    # -------------------- internals --------------------
    async def _run(self) -> None:
        try:
            channel = await self._opener(self._url)
        except ChannelError as e:
            self.on_error(e)
            self.on_close()
            return
        except Exception as e:  # noqa: BLE001
            logger.exception("unexpected failure opening stats channel url=%s", self._url)
            self.on_error(e)
            self.on_close()
            return
        self._channel = channel
        self._set_state(ConnectivityState.CONNECTED)
        try:
            async for raw in channel:
                self.on_message(raw)
        except asyncio.CancelledError:
            await self._close_channel(channel)
            raise
        except ChannelError as e:
            self.on_error(e)
        except Exception as e:  # noqa: BLE001
            logger.exception("unexpected stats channel failure url=%s", self._url)
            self.on_error(e)
        else:
            logger.info("stats channel closed by peer url=%s", self._url)
        self.on_close()

    async def _close_channel(self, channel: Channel) -> None:
        if self._channel is channel:
            self._channel = None
        try:
            await channel.close()
        except Exception as e:  # noqa: BLE001
            logger.debug("channel close raised: %s", e)

    def _schedule_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            return
        loop = self._loop or asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(self._reconnect_delay, self._on_reconnect_timer)
        self._metrics.reconnects.inc()
        logger.info("reconnecting to %s in %.1fs (attempt %d)", self._url, self._reconnect_delay, self._attempt + 1)

    def _cancel_reconnect(self) -> None:
        handle, self._reconnect_handle = self._reconnect_handle, None
        if handle is not None:
            handle.cancel()

    def _on_reconnect_timer(self) -> None:
        self._reconnect_handle = None
        self.start()

    def _set_state(self, new: ConnectivityState) -> None:
        if new is self._state:
            return
        old, self._state = self._state, new
        self._metrics.record_state(new)
        if new is ConnectivityState.CONNECTED:
            logger.info("stats channel connected url=%s", self._url)
        else:
            logger.info("stats channel %s -> %s", old.value, new.value)
        if self._on_state_change is not None:
            try:
                self._on_state_change(new)
            except Exception:
                logger.exception("connectivity consumer failed state=%s", new.value)


__all__ = ["DEFAULT_RECONNECT_DELAY", "ConnectionManager"]
