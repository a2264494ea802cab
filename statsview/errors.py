"""statsview exception hierarchy.

Small exception tree used to communicate intent up the stack: decode
failures are dropped locally, channel failures feed the reconnect loop and
environment failures stop the client before any connection is attempted.
"""
from __future__ import annotations


class StatsViewError(Exception):
    """Base class for all statsview exceptions."""


class ConfigError(StatsViewError):
    """Configuration-related issues (invalid values, bad CLI overrides)."""


class SnapshotDecodeError(StatsViewError):
    """Inbound push message is not a valid stats snapshot."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ChannelError(StatsViewError):
    """Push channel could not be opened or failed mid-stream."""


class UnsupportedEnvironmentError(StatsViewError):
    """Hosting environment cannot provide a push channel for the given origin."""


__all__ = [
    "StatsViewError",
    "ConfigError",
    "SnapshotDecodeError",
    "ChannelError",
    "UnsupportedEnvironmentError",
]
