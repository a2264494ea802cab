"""Decoding of raw push messages into `Snapshot` values.

Wire format (one JSON object per message)::

    {
      "topSearchTerms": {"<term>": <int>, ...},
      "topConsultedUrls": {"<url>": <int>, ...},
      "barrelDetails": [
        {"name": "...", "status": "Active", "invertedIndexCount": 0,
         "incomingLinksCount": 0, "avgResponseTime": 0.0, "requestCount": 0},
        ...
      ]
    }

Every top-level field is optional and unknown fields are ignored. Anything
that does not fit the shape (including negative or non-finite numbers)
raises `SnapshotDecodeError`; callers drop the message.
"""
from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from .errors import SnapshotDecodeError
from .model import BarrelRecord, Snapshot

__all__ = ["decode_snapshot"]


def _is_number(v: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a count
    if isinstance(v, bool):
        return False
    if isinstance(v, int):
        return True
    return isinstance(v, float) and math.isfinite(v)


def _reject_constant(token: str) -> Any:
    # json accepts NaN / Infinity / -Infinity unless told otherwise
    raise SnapshotDecodeError(f"non-finite number {token}")


def _count(v: Any, what: str) -> int:
    if not _is_number(v):
        raise SnapshotDecodeError(f"{what} is not a number")
    if v < 0:
        raise SnapshotDecodeError(f"{what} is negative")
    return int(v)


def _counts(obj: Mapping[str, Any], key: str) -> dict[str, int]:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SnapshotDecodeError(f"{key} must be an object")
    return {str(term): _count(count, f"{key}[{term!r}]") for term, count in value.items()}


def _int_field(rec: Mapping[str, Any], key: str) -> int:
    v = rec.get(key)
    if v is None:
        return 0
    return _count(v, f"barrel field {key}")


def _latency(rec: Mapping[str, Any]) -> float:
    v = rec.get("avgResponseTime")
    if v is None:
        return 0.0
    if not _is_number(v) or v < 0:
        raise SnapshotDecodeError("barrel field avgResponseTime is not a non-negative number")
    try:
        return float(v)
    except OverflowError as e:
        raise SnapshotDecodeError("barrel field avgResponseTime out of range") from e


def _barrel(rec: Any) -> BarrelRecord:
    if not isinstance(rec, dict):
        raise SnapshotDecodeError("barrelDetails entries must be objects")
    name = rec.get("name")
    status = rec.get("status")
    return BarrelRecord(
        name="" if name is None else str(name),
        status=status if isinstance(status, str) else None,
        inverted_index_count=_int_field(rec, "invertedIndexCount"),
        incoming_links_count=_int_field(rec, "incomingLinksCount"),
        avg_response_time=_latency(rec),
        request_count=_int_field(rec, "requestCount"),
    )


def decode_snapshot(raw: str | bytes) -> Snapshot:
    """Parse one push message into a Snapshot.

    Raises SnapshotDecodeError for non UTF-8 bytes, malformed or too deeply
    nested JSON, a non-object payload or fields of the wrong type.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotDecodeError(f"payload is not utf-8: {e}") from e
    try:
        obj = json.loads(raw, parse_constant=_reject_constant)
    except RecursionError as e:
        raise SnapshotDecodeError("json nested too deeply") from e
    except (TypeError, ValueError) as e:
        raise SnapshotDecodeError(f"invalid json: {e}") from e
    if not isinstance(obj, dict):
        raise SnapshotDecodeError(f"payload must be a JSON object, got {type(obj).__name__}")

    details = obj.get("barrelDetails")
    if details is None:
        details = []
    elif not isinstance(details, list):
        raise SnapshotDecodeError("barrelDetails must be an array")

    return Snapshot(
        top_search_terms=_counts(obj, "topSearchTerms"),
        barrel_details=tuple(_barrel(r) for r in details),
        top_consulted_urls=_counts(obj, "topConsultedUrls"),
    )
