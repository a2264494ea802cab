from __future__ import annotations

import asyncio
import json

import pytest

from statsview import app
from statsview.connection import ConnectionManager
from statsview.dashboard import StatsDashboard
from statsview.env_config import StatsViewEnv
from statsview.metrics import StatsViewMetrics
from statsview.model import ConnectivityState
from statsview.plain_renderer import PlainRenderer
from statsview.rich_renderer import RichRenderer
from tests._helpers import FakeOpener, RecordingSink, wait_for


@pytest.fixture()
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(app, "setup_logging", lambda *a, **k: None)


def test_parser_defaults_follow_env():
    env = StatsViewEnv.from_environ({"STATSVIEW_RECONNECT_DELAY_SEC": "3", "STATSVIEW_RICH": "0"})
    args = app.build_parser(env).parse_args([])
    assert args.reconnect_delay == 3.0
    assert args.no_rich is True
    assert args.path == "/stats"
    assert args.metrics_port is None


@pytest.mark.parametrize("bad", ["0", "-1", "abc"])
def test_invalid_reconnect_delay_rejected(bad):
    env = StatsViewEnv.from_environ({})
    with pytest.raises(SystemExit):
        app.build_parser(env).parse_args(["--reconnect-delay", bad])


def test_make_sink_selects_renderer():
    env = StatsViewEnv.from_environ({})
    parser = app.build_parser(env)
    assert isinstance(app.make_sink(parser.parse_args(["--no-rich"]), env), PlainRenderer)
    assert isinstance(app.make_sink(parser.parse_args([]), env), RichRenderer)


def test_unsupported_origin_renders_message_and_exits(no_logging_setup, capsys):
    rc = app.run(["--url", "file:///tmp/index.html", "--no-rich"])
    assert rc == app.EXIT_UNSUPPORTED == 2
    assert "Ambiente não suportado." in capsys.readouterr().out


def test_run_wires_manager_and_stops_on_interrupt(no_logging_setup, monkeypatch, capsys):
    seen = {}

    class _Manager:
        def __init__(self, url, **kw):
            seen["url"] = url
            seen["kw"] = kw
            self.url = url
            self.reconnect_delay = kw["reconnect_delay"]

    def fake_asyncio_run(coro):
        coro.close()
        raise KeyboardInterrupt

    monkeypatch.setattr(app.asyncio, "run", fake_asyncio_run)
    monkeypatch.setattr(app, "ConnectionManager", _Manager)
    rc = app.run(["--url", "https://search.example.org/app", "--no-rich", "--reconnect-delay", "0.5"])
    assert rc == 0
    assert seen["url"] == "wss://search.example.org/stats"
    assert seen["kw"]["reconnect_delay"] == 0.5
    assert callable(seen["kw"]["opener"])


def test_serve_runs_until_event_then_stops():
    async def _run():
        opener = FakeOpener()
        sink = RecordingSink()
        dash = StatsDashboard(sink)
        mgr = ConnectionManager(
            "ws://h/stats",
            on_snapshot=dash.on_snapshot,
            on_state_change=dash.on_state_change,
            opener=opener,
            reconnect_delay=0.05,
            metrics=StatsViewMetrics(),
        )
        done = asyncio.Event()
        server = asyncio.ensure_future(app.serve(mgr, until=done))
        await wait_for(lambda: mgr.state is ConnectivityState.CONNECTED)
        opener.current.push(json.dumps({"topSearchTerms": {"porto": 25}}))
        await wait_for(lambda: len(sink.views) == 1)
        done.set()
        await server
        assert mgr.state is ConnectivityState.DISCONNECTED
        assert opener.current.closed
        assert sink.indicator == [True, False]

    asyncio.run(_run())
