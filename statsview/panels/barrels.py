from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from statsview import labels
from statsview.model import BarrelCard


def barrel_card_panel(card: BarrelCard, *, low_contrast: bool = False) -> Any:
    from rich.panel import Panel
    from rich.table import Table
    from rich.text import Text

    color = "green" if card.is_healthy else "red"
    t = Table.grid(padding=(0, 1))
    t.add_column(style="dim")
    t.add_column(justify="right")
    t.add_row(f"{labels.WORDS_LABEL}:", str(card.inverted_index_count))
    t.add_row(f"{labels.LINKS_LABEL}:", str(card.incoming_links_count))
    t.add_row(
        f"{labels.LATENCY_LABEL}:",
        f"[{color}]{card.latency}ms[/] [dim]({card.request_count} reqs)[/]",
    )
    title = Text.assemble((card.name or "?", "bold"), "  ", (card.label, f"bold {color}"))
    return Panel(
        t,
        title=title,
        title_align="left",
        border_style=("white" if low_contrast else color),
        expand=True,
    )


def barrels_panel(cards: Sequence[BarrelCard], *, low_contrast: bool = False) -> Any:
    from rich.console import Group
    from rich.panel import Panel
    from rich.text import Text

    border = "white" if low_contrast else "cyan"
    if not cards:
        body: Any = Text(labels.WAITING_BARRELS_MESSAGE, style="dim italic", justify="center")
    else:
        body = Group(*(barrel_card_panel(c, low_contrast=low_contrast) for c in cards))
    return Panel(body, title=labels.BARRELS_TITLE, border_style=border, expand=True)
