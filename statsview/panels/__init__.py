"""Rich renderables for the stats dashboard (one module per panel)."""
from __future__ import annotations

from .barrels import barrel_card_panel, barrels_panel
from .header import header_panel
from .terms import ranking_panel

__all__ = ["barrel_card_panel", "barrels_panel", "header_panel", "ranking_panel"]
