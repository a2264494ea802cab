"""Live terminal client for the Googol stats push feed."""
from __future__ import annotations

from .builder import build_view_model
from .connection import ConnectionManager
from .dashboard import StatsDashboard
from .decode import decode_snapshot
from .model import BarrelCard, BarrelRecord, ConnectivityState, Snapshot, ViewModel

__version__ = "0.1.0"

__all__ = [
    "BarrelCard",
    "BarrelRecord",
    "ConnectionManager",
    "ConnectivityState",
    "Snapshot",
    "StatsDashboard",
    "ViewModel",
    "build_view_model",
    "decode_snapshot",
]
