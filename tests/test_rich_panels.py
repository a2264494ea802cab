from __future__ import annotations

import io

from rich.console import Console

from statsview.builder import build_view_model
from statsview.model import BarrelRecord, Snapshot
from statsview.panels import barrel_card_panel, barrels_panel, header_panel, ranking_panel
from statsview.rich_renderer import RichRenderer


def _text(renderable, width: int = 100) -> str:
    console = Console(record=True, file=io.StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_ranking_panel_lists_terms_in_order():
    out = _text(ranking_panel("Top Pesquisas", (("porto", 25), ("lisboa", 10))))
    assert "Top Pesquisas" in out
    assert "Termo" in out
    assert out.index("porto") < out.index("lisboa")
    assert "25" in out


def test_ranking_panel_empty_shows_message():
    assert "Sem dados" in _text(ranking_panel("Top Pesquisas", ()))


def test_ranking_panel_clips_long_keys():
    out = _text(ranking_panel("Top URLs", (("https://x.example/" + "a" * 200, 1),), clip_len=30))
    assert "URL" in out
    assert "a" * 40 not in out


def test_barrel_card_shows_status_and_metrics():
    (card,) = build_view_model(Snapshot(barrel_details=(BarrelRecord("B1", "Active", 120, 30, 12.34, 7),))).barrel_cards
    out = _text(barrel_card_panel(card))
    assert "B1" in out and "ATIVO" in out
    assert "120" in out and "30" in out
    assert "12.3ms" in out and "(7 reqs)" in out


def test_barrels_panel_waiting_message_when_empty():
    assert "A aguardar Barrels..." in _text(barrels_panel(()))


def test_header_indicator():
    assert "ligado" in _text(header_panel(connected=True, endpoint="ws://h/stats"))
    assert "desligado" in _text(header_panel(connected=False))


def test_rich_renderer_build_composes_sections():
    console = Console(record=True, file=io.StringIO(), width=100, color_system=None)
    r = RichRenderer(console=console, endpoint="ws://h/stats")
    r.render(
        build_view_model(
            Snapshot(
                top_search_terms={"porto": 25},
                top_consulted_urls={"https://a.pt": 3},
                barrel_details=(BarrelRecord("B2", "Down"),),
            )
        )
    )
    r.set_connected(True)
    out = _text(r.build())
    r.close()
    for needle in ("Googol Stats", "ligado", "Top Pesquisas", "porto", "Top URLs", "https://a.pt", "B2", "OFFLINE"):
        assert needle in out


def test_rich_renderer_message_replaces_view():
    console = Console(record=True, file=io.StringIO(), width=100, color_system=None)
    r = RichRenderer(console=console)
    r.render(build_view_model(Snapshot(top_search_terms={"porto": 25})))
    r.show_message("Ambiente não suportado.")
    out = _text(r.build())
    r.close()
    assert "Ambiente não suportado." in out
    assert "porto" not in out
