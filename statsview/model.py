"""Typed structures for the stats feed and its display model.

`Snapshot` mirrors one decoded push message; `ViewModel` is the display-ready
structure derived from it. Both are immutable; rendering layers adapt the
view model and never write back into it.
"""
from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field

__all__ = [
    "HEALTHY_STATUS",
    "BarrelRecord",
    "Snapshot",
    "ConnectivityState",
    "BarrelCard",
    "ViewModel",
]

HEALTHY_STATUS = "Active"


@dataclass(frozen=True)
class BarrelRecord:
    name: str
    status: str | None = None  # only HEALTHY_STATUS counts as healthy
    inverted_index_count: int = 0
    incoming_links_count: int = 0
    avg_response_time: float = 0.0  # milliseconds
    request_count: int = 0


@dataclass(frozen=True)
class Snapshot:
    """One complete telemetry payload pushed by the backend.

    Mappings keep the insertion order of the wire object; ranking ties are
    resolved against that order.
    """
    top_search_terms: Mapping[str, int] = field(default_factory=dict)
    barrel_details: tuple[BarrelRecord, ...] = ()
    top_consulted_urls: Mapping[str, int] = field(default_factory=dict)


class ConnectivityState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class BarrelCard:
    name: str
    is_healthy: bool
    label: str  # "ATIVO" / "OFFLINE"
    inverted_index_count: int
    incoming_links_count: int
    avg_response_time: float
    latency: str  # avg_response_time with one fractional digit
    request_count: int


@dataclass(frozen=True)
class ViewModel:
    top_terms: tuple[tuple[str, int], ...] = ()
    barrel_cards: tuple[BarrelCard, ...] = ()
    top_urls: tuple[tuple[str, int], ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "topTerms": [list(t) for t in self.top_terms],
            "topUrls": [list(u) for u in self.top_urls],
            "barrelCards": [dict(c.__dict__) for c in self.barrel_cards],
        }
