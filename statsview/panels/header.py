from __future__ import annotations

from datetime import datetime
from typing import Any

from statsview import labels


def header_panel(
    *,
    connected: bool,
    endpoint: str | None = None,
    last_update: datetime | None = None,
    low_contrast: bool = False,
) -> Any:
    from rich import box
    from rich.panel import Panel
    from rich.table import Table

    dot = "[green]●[/]" if connected else "[red]●[/]"
    state = labels.CONNECTED_LABEL if connected else labels.DISCONNECTED_LABEL
    t = Table.grid(expand=True)
    t.add_column(justify="left")
    t.add_column(justify="right")
    upd = last_update.strftime("%H:%M:%S") if last_update is not None else "—"
    t.add_row(f"{dot} {state}", f"[dim]Atualizado:[/] {upd}")
    if endpoint:
        t.add_row(f"[dim]{endpoint}[/]", "")
    return Panel(
        t,
        box=box.ROUNDED,
        title=labels.TITLE,
        border_style=("white" if low_contrast else "cyan"),
    )
