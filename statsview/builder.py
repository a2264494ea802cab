"""View model builder.

Pure transformation helpers converting a decoded `Snapshot` into the
display-ready `ViewModel`. No I/O and no state: the same snapshot always
yields an equal view model, and each snapshot fully replaces the previous
view.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from .model import HEALTHY_STATUS, BarrelCard, BarrelRecord, Snapshot, ViewModel

__all__ = [
    "TOP_N",
    "LABEL_HEALTHY",
    "LABEL_OFFLINE",
    "rank_top",
    "format_latency",
    "build_barrel_card",
    "build_view_model",
]

TOP_N = 5
LABEL_HEALTHY = "ATIVO"
LABEL_OFFLINE = "OFFLINE"


def rank_top(counts: Mapping[str, int] | None, limit: int = TOP_N) -> tuple[tuple[str, int], ...]:
    """Return up to `limit` (key, count) pairs, highest count first.

    sorted() is stable, so equal counts keep the mapping's insertion order.
    """
    if not counts:
        return ()
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return tuple(ranked[:limit])


def format_latency(ms: float | None) -> str:
    return f"{float(ms or 0.0):.1f}"


def build_barrel_card(rec: BarrelRecord) -> BarrelCard:
    healthy = rec.status == HEALTHY_STATUS
    return BarrelCard(
        name=rec.name,
        is_healthy=healthy,
        label=LABEL_HEALTHY if healthy else LABEL_OFFLINE,
        inverted_index_count=rec.inverted_index_count or 0,
        incoming_links_count=rec.incoming_links_count or 0,
        avg_response_time=float(rec.avg_response_time or 0.0),
        latency=format_latency(rec.avg_response_time),
        request_count=rec.request_count or 0,
    )


def _cards(records: Iterable[BarrelRecord] | None) -> tuple[BarrelCard, ...]:
    return tuple(build_barrel_card(r) for r in (records or ()))


def build_view_model(snapshot: Snapshot) -> ViewModel:
    """Derive the ViewModel for one snapshot.

    Empty or absent collections produce empty sequences; renderers show the
    matching empty-state message. Records are never filtered out.
    """
    return ViewModel(
        top_terms=rank_top(snapshot.top_search_terms),
        barrel_cards=_cards(snapshot.barrel_details),
        top_urls=rank_top(snapshot.top_consulted_urls),
    )
