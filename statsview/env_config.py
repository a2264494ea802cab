"""Centralized environment configuration for the stats client.

All environment-based behavior routes through `StatsViewEnv`; modules do
not call os.getenv directly. Values are normalized with safe fallbacks:
unparsable numbers fall back to the default and out-of-range numbers are
clamped.

Environment variables:
  STATSVIEW_URL                  page origin the channel mirrors (http/https)
  STATSVIEW_PATH                 channel path on that origin (/stats)
  STATSVIEW_RECONNECT_DELAY_SEC  fixed reconnect delay (2.0)
  STATSVIEW_OPEN_TIMEOUT_SEC     handshake timeout (10.0)
  STATSVIEW_RICH                 rich live view (on) or plain text
  STATSVIEW_LOW_CONTRAST         neutral borders
  STATSVIEW_PLAIN_DIFF           suppress identical plain frames (on)
  STATSVIEW_METRICS_HTTP         start the Prometheus exporter
  STATSVIEW_METRICS_PORT         exporter port (9335)
  STATSVIEW_LOG_LEVEL            root log level (INFO)
  STATSVIEW_LOG_FILE             optional log file
  STATSVIEW_JSON_LOGS            JSON console log lines
  STATSVIEW_VERBOSE_CONSOLE      full console log format
"""
from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .endpoint import DEFAULT_PATH

__all__ = [
    "StatsViewEnv",
    "load_env",
]


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _get(environ: Mapping[str, str], key: str) -> str | None:
    v = (environ.get(key) or "").strip()
    return v or None


def _get_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    v = (_get(environ, key) or "").lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return default


def _get_port(environ: Mapping[str, str], key: str, default: int) -> int:
    try:
        port = int(_get(environ, key) or default)
    except ValueError:
        return default
    return min(max(port, 1), 65535)


def _get_seconds(environ: Mapping[str, str], key: str, default: float, floor: float) -> float:
    try:
        v = float(_get(environ, key) or default)
    except ValueError:
        return default
    if not math.isfinite(v):
        return default
    return max(v, floor)


@dataclass(slots=True)
class StatsViewEnv:
    # Channel
    page_url: str
    path: str
    reconnect_delay_sec: float
    open_timeout_sec: float

    # Rendering
    rich_enabled: bool
    low_contrast: bool
    plain_diff_enabled: bool

    # Metrics
    metrics_http_enabled: bool
    metrics_http_port: int

    # Logging
    log_level: str
    log_file: str | None
    json_logs: bool
    verbose_console: bool

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> StatsViewEnv:
        path = _get(environ, "STATSVIEW_PATH") or DEFAULT_PATH
        if not path.startswith("/"):
            path = "/" + path
        log_level = (_get(environ, "STATSVIEW_LOG_LEVEL") or "INFO").upper()
        return cls(
            page_url=_get(environ, "STATSVIEW_URL") or "http://127.0.0.1:8080",
            path=path,
            reconnect_delay_sec=_get_seconds(environ, "STATSVIEW_RECONNECT_DELAY_SEC", 2.0, 0.05),
            open_timeout_sec=_get_seconds(environ, "STATSVIEW_OPEN_TIMEOUT_SEC", 10.0, 1.0),
            rich_enabled=_get_bool(environ, "STATSVIEW_RICH", True),
            low_contrast=_get_bool(environ, "STATSVIEW_LOW_CONTRAST", False),
            plain_diff_enabled=_get_bool(environ, "STATSVIEW_PLAIN_DIFF", True),
            metrics_http_enabled=_get_bool(environ, "STATSVIEW_METRICS_HTTP", False),
            metrics_http_port=_get_port(environ, "STATSVIEW_METRICS_PORT", 9335),
            log_level=log_level,
            log_file=_get(environ, "STATSVIEW_LOG_FILE"),
            json_logs=_get_bool(environ, "STATSVIEW_JSON_LOGS", False),
            verbose_console=_get_bool(environ, "STATSVIEW_VERBOSE_CONSOLE", False),
        )

    def describe(self) -> dict[str, Any]:
        """Return a JSON-serializable summary (safe for diagnostics)."""
        return {
            "page_url": self.page_url,
            "path": self.path,
            "reconnect_delay_sec": self.reconnect_delay_sec,
            "open_timeout_sec": self.open_timeout_sec,
            "rich_enabled": self.rich_enabled,
            "plain_diff_enabled": self.plain_diff_enabled,
            "metrics_http_enabled": self.metrics_http_enabled,
            "metrics_http_port": self.metrics_http_port,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


_CACHED: StatsViewEnv | None = None


def load_env(*, force_reload: bool = False, environ: Mapping[str, str] | None = None) -> StatsViewEnv:
    """Load (and cache) the effective StatsViewEnv.

    Pass force_reload=True to rebuild the cache after os.environ changes.
    An explicit `environ` mapping bypasses the cache.
    """
    global _CACHED
    if environ is not None:
        return StatsViewEnv.from_environ(environ)
    if _CACHED is None or force_reload:
        _CACHED = StatsViewEnv.from_environ(os.environ)
    return _CACHED
