"""Prometheus metrics for the stats client.

Metrics Exposed:
  - statsview_messages_total{result}          (Counter; ok | decode_error)
  - statsview_channel_errors_total             (Counter)
  - statsview_reconnects_scheduled_total       (Counter)
  - statsview_connection_state                 (Gauge; 0=disconnected,1=connecting,2=connected)
  - statsview_snapshot_apply_seconds           (Histogram)

Each `StatsViewMetrics` owns a private CollectorRegistry so tests can build
fresh instances without duplicate-registration errors. The process-wide
instance is created lazily by `get_metrics()`.
"""
from __future__ import annotations

import logging
import threading

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server

from .model import ConnectivityState

logger = logging.getLogger(__name__)

_STATE_CODES = {
    ConnectivityState.DISCONNECTED: 0,
    ConnectivityState.CONNECTING: 1,
    ConnectivityState.CONNECTED: 2,
}


class StatsViewMetrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.messages = Counter(
            "statsview_messages_total",
            "Push messages received",
            ["result"],
            registry=self.registry,
        )
        self.channel_errors = Counter(
            "statsview_channel_errors_total",
            "Push channel errors (open failures and mid-stream errors)",
            registry=self.registry,
        )
        self.reconnects = Counter(
            "statsview_reconnects_scheduled_total",
            "Reconnect attempts scheduled",
            registry=self.registry,
        )
        self.connection_state = Gauge(
            "statsview_connection_state",
            "Connectivity state (enum: 0=disconnected,1=connecting,2=connected)",
            registry=self.registry,
        )
        self.apply_seconds = Histogram(
            "statsview_snapshot_apply_seconds",
            "Latency decoding and rendering one snapshot",
            buckets=[0.0005, 0.001, 0.002, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
            registry=self.registry,
        )

    def record_state(self, state: ConnectivityState) -> None:
        self.connection_state.set(_STATE_CODES[state])

    def value(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Current sample value (0.0 when the sample has not been created yet)."""
        v = self.registry.get_sample_value(name, labels or {})
        return float(v) if v is not None else 0.0


_lock = threading.Lock()
_metrics: StatsViewMetrics | None = None
_server_started = False


def get_metrics() -> StatsViewMetrics:
    global _metrics
    with _lock:
        if _metrics is None:
            _metrics = StatsViewMetrics()
        return _metrics


def start_metrics_server(port: int, *, addr: str = "127.0.0.1") -> bool:
    """Expose the process metrics registry over HTTP. Idempotent.

    Returns True when the exporter is running after the call.
    """
    global _server_started
    m = get_metrics()
    with _lock:
        if _server_started:
            return True
        try:
            start_http_server(port, addr=addr, registry=m.registry)
        except OSError as e:
            logger.warning("metrics exporter not started on %s:%s: %s", addr, port, e)
            return False
        _server_started = True
    logger.info("metrics exporter listening on %s:%s", addr, port)
    return True


__all__ = ["StatsViewMetrics", "get_metrics", "start_metrics_server"]
