"""Command line entry point: `python -m statsview` / `statsview`.

Wires the pieces together: environment config + CLI overrides, logging,
optional metrics exporter, rendering sink, dashboard and connection manager,
then runs the asyncio loop until interrupted.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .channel import websocket_opener
from .connection import ConnectionManager
from .dashboard import RenderSink, StatsDashboard
from .endpoint import endpoint_url
from .env_config import StatsViewEnv, load_env
from .errors import UnsupportedEnvironmentError
from .logging_utils import setup_logging
from .metrics import start_metrics_server
from .plain_renderer import PlainRenderer
from .rich_renderer import RichRenderer

logger = logging.getLogger(__name__)

EXIT_UNSUPPORTED = 2


def _positive_float(raw: str) -> float:
    try:
        v = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from None
    if v <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {raw!r}")
    return v


def build_parser(env: StatsViewEnv) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live Googol stats dashboard")
    parser.add_argument("--url", default=env.page_url, help="Page origin whose host and transport the channel mirrors")
    parser.add_argument("--path", default=env.path, help="Channel path on the origin")
    parser.add_argument(
        "--reconnect-delay",
        type=_positive_float,
        default=env.reconnect_delay_sec,
        help="Fixed delay in seconds before reopening a lost channel",
    )
    parser.add_argument("--no-rich", action="store_true", default=not env.rich_enabled, help="Plain text output")
    parser.add_argument("--low-contrast", action="store_true", default=env.low_contrast, help="Neutral borders/colors")
    parser.add_argument("--log-level", default=env.log_level)
    parser.add_argument("--log-file", default=env.log_file)
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=(env.metrics_http_port if env.metrics_http_enabled else None),
        help="Expose Prometheus metrics on this port",
    )
    return parser


def make_sink(args: argparse.Namespace, env: StatsViewEnv, *, endpoint: str | None = None) -> RenderSink:
    if args.no_rich:
        return PlainRenderer(diff=env.plain_diff_enabled)
    return RichRenderer(endpoint=endpoint, low_contrast=args.low_contrast)


async def serve(manager: ConnectionManager, *, until: asyncio.Event | None = None) -> None:
    """Run the manager until `until` is set (forever when None), then stop it."""
    stop_event = until if until is not None else asyncio.Event()
    manager.start()
    try:
        await stop_event.wait()
    finally:
        await manager.stop()


def run(argv: list[str] | None = None) -> int:
    env = load_env(force_reload=True)
    args = build_parser(env).parse_args(argv)
    setup_logging(args.log_level, args.log_file, json_console=env.json_logs, verbose_console=env.verbose_console)
    logger.debug("effective config: %s", env.describe())

    try:
        url = endpoint_url(args.url, args.path)
    except UnsupportedEnvironmentError as e:
        sink = make_sink(args, env)
        StatsDashboard(sink).show_unsupported()
        sink.close()
        logger.error("%s", e)
        return EXIT_UNSUPPORTED

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    sink = make_sink(args, env, endpoint=url)
    dashboard = StatsDashboard(sink)
    manager = ConnectionManager(
        url,
        on_snapshot=dashboard.on_snapshot,
        on_state_change=dashboard.on_state_change,
        opener=websocket_opener(open_timeout=env.open_timeout_sec),
        reconnect_delay=args.reconnect_delay,
    )
    logger.info("stats client starting url=%s reconnect_delay=%.1fs", manager.url, manager.reconnect_delay)
    try:
        asyncio.run(serve(manager))
    except KeyboardInterrupt:
        logger.info("interrupted; stopping")
    finally:
        sink.close()
    return 0


def main() -> None:  # pragma: no cover - console script shim
    sys.exit(run())


__all__ = ["build_parser", "make_sink", "serve", "run", "main"]
