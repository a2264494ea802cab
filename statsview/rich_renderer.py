"""Rich live renderer.

Keeps one `rich.live.Live` region and repaints it whenever the view model
or the connectivity indicator changes. The region is created lazily on the
first paint and released by `close()`.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from . import labels
from .model import ViewModel
from .panels import barrels_panel, header_panel, ranking_panel


class RichRenderer:
    name = "rich_renderer"

    def __init__(
        self,
        *,
        console: Console | None = None,
        endpoint: str | None = None,
        low_contrast: bool = False,
        screen: bool = False,
        refresh_per_second: int = 4,
    ) -> None:
        self._console = console if console is not None else Console()
        self._endpoint = endpoint
        self._low_contrast = low_contrast
        self._screen = screen
        self._fps = max(1, refresh_per_second)
        self._live: Live | None = None
        self._view: ViewModel | None = None
        self._connected = False
        self._last_update: datetime | None = None
        self._message: str | None = None

    # -------------------- sink contract --------------------
    def render(self, view: ViewModel) -> None:
        self._view = view
        self._message = None
        self._last_update = datetime.now()
        self._paint()

    def set_connected(self, connected: bool) -> None:
        self._connected = connected
        self._paint()

    def show_message(self, text: str) -> None:
        self._message = text
        self._paint()

    def close(self) -> None:
        live, self._live = self._live, None
        if live is not None:
            live.stop()

    # -------------------- composition --------------------
    def build(self) -> Any:
        """Compose the full renderable for the current state."""
        header = header_panel(
            connected=self._connected,
            endpoint=self._endpoint,
            last_update=self._last_update,
            low_contrast=self._low_contrast,
        )
        if self._message is not None:
            return Group(header, Panel(Text(self._message, style="bold red", justify="center")))
        view = self._view
        if view is None:
            return Group(header)
        parts: list[Any] = [
            header,
            ranking_panel(labels.TOP_TERMS_TITLE, view.top_terms, low_contrast=self._low_contrast),
        ]
        if view.top_urls:
            parts.append(ranking_panel(labels.TOP_URLS_TITLE, view.top_urls, low_contrast=self._low_contrast))
        parts.append(barrels_panel(view.barrel_cards, low_contrast=self._low_contrast))
        return Group(*parts)

    def _paint(self) -> None:
        renderable = self.build()
        if self._live is None:
            self._live = Live(
                renderable,
                console=self._console,
                screen=self._screen,
                refresh_per_second=self._fps,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start(refresh=True)
            return
        self._live.update(renderable, refresh=True)


__all__ = ["RichRenderer"]
