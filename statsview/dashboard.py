"""Glue between the connection manager and a rendering sink.

The dashboard is the consumer of the connection manager: every decoded
snapshot becomes a fresh view model that replaces the sink's content, and
connectivity changes only flip the indicator. A disconnect therefore leaves
the last rendered view on screen (stale but visible).
"""
from __future__ import annotations

import logging
from typing import Protocol

from .builder import build_view_model
from .model import ConnectivityState, Snapshot, ViewModel

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Ambiente não suportado."


class RenderSink(Protocol):
    """Contract each output renderer implements."""

    def render(self, view: ViewModel) -> None:
        """Replace the display region with `view`."""
        ...

    def set_connected(self, connected: bool) -> None:
        """Toggle the connectivity indicator."""
        ...

    def show_message(self, text: str) -> None:
        """Replace the display region with a single message."""
        ...

    def close(self) -> None:  # pragma: no cover - trivial
        ...


class StatsDashboard:
    def __init__(self, sink: RenderSink) -> None:
        self._sink = sink
        self._last_view: ViewModel | None = None
        self._connected = False

    @property
    def last_view(self) -> ViewModel | None:
        return self._last_view

    @property
    def connected(self) -> bool:
        return self._connected

    def on_snapshot(self, snapshot: Snapshot) -> None:
        view = build_view_model(snapshot)
        self._last_view = view
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("render view=%s", view.to_dict())
        self._sink.render(view)

    def on_state_change(self, state: ConnectivityState) -> None:
        connected = state is ConnectivityState.CONNECTED
        if connected == self._connected:
            return
        self._connected = connected
        self._sink.set_connected(connected)

    def show_unsupported(self, message: str = UNSUPPORTED_MESSAGE) -> None:
        logger.error("stats client disabled: %s", message)
        self._sink.show_message(message)


__all__ = ["UNSUPPORTED_MESSAGE", "RenderSink", "StatsDashboard"]
