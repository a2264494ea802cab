from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from statsview import labels


def ranking_panel(
    title: str,
    ranked: Sequence[tuple[str, int]],
    *,
    low_contrast: bool = False,
    clip_len: int = 48,
) -> Any:
    """Numbered ranking (term or URL -> count); empty input shows the empty-state message."""
    from rich import box
    from rich.panel import Panel
    from rich.table import Table
    from rich.text import Text

    border = "white" if low_contrast else "cyan"
    if not ranked:
        return Panel(
            Text(labels.NO_TERMS_MESSAGE, style="dim italic", justify="center"),
            title=title,
            border_style=border,
            expand=True,
        )
    tbl = Table(box=box.SIMPLE_HEAD, expand=True)
    tbl.add_column("#", justify="right", style="dim", width=3)
    tbl.add_column("Termo" if title == labels.TOP_TERMS_TITLE else "URL")
    tbl.add_column("Contagem", justify="right", style="bold")
    for i, (key, count) in enumerate(ranked, start=1):
        shown = key if len(key) <= clip_len else key[: clip_len - 1] + "…"
        tbl.add_row(str(i), Text(shown), str(count))
    return Panel(tbl, title=title, border_style=border, expand=True)
