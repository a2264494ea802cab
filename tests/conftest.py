"""Pytest configuration for the stats client.

1. Ensure project root on sys.path (so `tests._helpers` and `statsview` import
   without installation).
2. Isolate tests from the developer's STATSVIEW_* environment and from the
   cached env snapshot.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("STATSVIEW_"):
            monkeypatch.delenv(key, raising=False)
    from statsview import env_config

    monkeypatch.setattr(env_config, "_CACHED", None)
    yield
