"""Logging setup for the stats client."""
from __future__ import annotations

import json
import logging
import os
import sys
import time

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
# Minimal console format (level + message) keeps the terminal readable next to the live view.
MINIMAL_CONSOLE_FORMAT = '%(levelname)s %(message)s'

SUPPRESSED_LOGGERS = [
    'websockets', 'asyncio',
]


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'ts': getattr(record, 'created', time.time()),
            'level': record.levelname,
            'logger': record.name,
            'msg': record.getMessage(),
        }
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(
    level: str = 'INFO',
    log_file: str | None = None,
    *,
    json_console: bool = False,
    verbose_console: bool = False,
) -> logging.Logger:
    """Configure root logging.

    Console handler writes to stderr so log lines do not interleave with the
    frames painted on stdout. The file handler (if enabled) always uses the
    full DEFAULT_FORMAT for diagnostics. Calling again replaces handlers.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(log_level)
    # Remove existing handlers to avoid duplication on re-init
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(log_level)
    if json_console:
        console.setFormatter(_JsonFormatter())
    else:
        console.setFormatter(logging.Formatter(DEFAULT_FORMAT if verbose_console else MINIMAL_CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file:
        try:
            parent = os.path.dirname(log_file)
            if parent:
                os.makedirs(parent, exist_ok=True)
            fh = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            root.error("Failed to create log file handler %s: %s", log_file, e)
        else:
            fh.setLevel(log_level)
            fh.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            root.addHandler(fh)

    for name in SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


__all__ = ["setup_logging", "DEFAULT_FORMAT", "MINIMAL_CONSOLE_FORMAT"]
