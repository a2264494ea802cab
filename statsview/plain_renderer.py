"""Plain terminal renderer.

Used when rich output is disabled (pipes, dumb terminals, log capture).
Each call repaints a full text frame; identical consecutive frames are
suppressed unless diffing is turned off.
"""
from __future__ import annotations

import hashlib
import sys
from typing import TextIO

from . import labels
from .model import ViewModel


def format_frame(view: ViewModel | None, *, connected: bool, max_width: int = 160) -> str:
    """Render one frame as text. `view=None` means nothing received yet."""
    dot = "●" if connected else "○"
    state = labels.CONNECTED_LABEL if connected else labels.DISCONNECTED_LABEL
    lines = [f"[{labels.TITLE}] {dot} {state}"]
    if view is not None:
        lines.append("")
        lines.append(f"[{labels.TOP_TERMS_TITLE}]")
        if view.top_terms:
            for i, (term, count) in enumerate(view.top_terms, start=1):
                lines.append(f"{i}. {term}  {count}")
        else:
            lines.append(labels.NO_TERMS_MESSAGE)
        if view.top_urls:
            lines.append("")
            lines.append(f"[{labels.TOP_URLS_TITLE}]")
            for i, (url, count) in enumerate(view.top_urls, start=1):
                lines.append(f"{i}. {url}  {count}")
        lines.append("")
        lines.append(f"[{labels.BARRELS_TITLE}]")
        if view.barrel_cards:
            for card in view.barrel_cards:
                lines.append(f"{card.name}  {card.label}")
                lines.append(
                    f"  {labels.WORDS_LABEL}: {card.inverted_index_count}  "
                    f"{labels.LINKS_LABEL}: {card.incoming_links_count}"
                )
                lines.append(f"  {labels.LATENCY_LABEL}: {card.latency}ms ({card.request_count} reqs)")
        else:
            lines.append(labels.WAITING_BARRELS_MESSAGE)
    clipped = [(ln[: max_width - 1] + "…") if len(ln) > max_width else ln for ln in lines]
    return "\n".join(clipped).rstrip() + "\n"


class PlainRenderer:
    name = "plain_renderer"

    def __init__(self, *, stream: TextIO | None = None, max_width: int = 160, diff: bool = True) -> None:
        self._stream = stream
        self._max_width = max_width
        self._diff_enabled = diff
        self._last_hash: str | None = None
        self._view: ViewModel | None = None
        self._connected = False

    def render(self, view: ViewModel) -> None:
        self._view = view
        self._emit(format_frame(view, connected=self._connected, max_width=self._max_width))

    def set_connected(self, connected: bool) -> None:
        self._connected = connected
        self._emit(format_frame(self._view, connected=connected, max_width=self._max_width))

    def show_message(self, text: str) -> None:
        self._emit(text.rstrip() + "\n")

    def close(self) -> None:  # pragma: no cover - trivial
        pass

    def _emit(self, rendered: str) -> None:
        if self._diff_enabled:
            h = hashlib.sha256(rendered.encode("utf-8")).hexdigest()
            if self._last_hash == h:
                return  # suppress unchanged frame
            self._last_hash = h
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(rendered)
        stream.flush()


__all__ = ["PlainRenderer", "format_frame"]
