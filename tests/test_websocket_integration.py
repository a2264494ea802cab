"""End-to-end: real websockets server, real opener, reconnect after the peer hangs up."""
from __future__ import annotations

import asyncio
import json

from websockets.asyncio.server import serve

from statsview.channel import websocket_opener
from statsview.connection import ConnectionManager
from statsview.dashboard import StatsDashboard
from statsview.errors import ChannelError
from statsview.metrics import StatsViewMetrics
from statsview.model import ConnectivityState
from tests._helpers import RecordingSink, wait_for

PAYLOAD = json.dumps(
    {
        "topSearchTerms": {"lisboa": 10, "porto": 25, "faro": 3},
        "barrelDetails": [{"name": "B1", "status": "Active", "avgResponseTime": 12.34}],
    }
)


def test_live_feed_survives_bad_message_and_peer_close():
    async def _run():
        connections = []

        async def handler(ws):
            connections.append(ws.request.path)
            await ws.send(PAYLOAD)
            if len(connections) == 1:
                await ws.send("not json")
                return  # server closes the first connection cleanly
            await ws.wait_closed()

        async with serve(handler, "127.0.0.1", 0) as server:
            port = next(iter(server.sockets)).getsockname()[1]
            sink = RecordingSink()
            dash = StatsDashboard(sink)
            metrics = StatsViewMetrics()
            mgr = ConnectionManager(
                f"ws://127.0.0.1:{port}/stats",
                on_snapshot=dash.on_snapshot,
                on_state_change=dash.on_state_change,
                opener=websocket_opener(open_timeout=5.0),
                reconnect_delay=0.05,
                metrics=metrics,
            )
            mgr.start()
            await wait_for(lambda: len(connections) == 2 and len(sink.views) == 2, timeout=5.0)
            await wait_for(lambda: mgr.state is ConnectivityState.CONNECTED)
            assert connections == ["/stats", "/stats"]
            assert sink.views[0].top_terms[0] == ("porto", 25)
            assert metrics.value("statsview_messages_total", {"result": "decode_error"}) == 1
            assert metrics.value("statsview_reconnects_scheduled_total") == 1
            await mgr.stop()

    asyncio.run(_run())


def test_opener_wraps_refused_connection():
    async def _run():
        # bind then release a port so nothing is listening on it
        async with serve(lambda ws: ws.wait_closed(), "127.0.0.1", 0) as server:
            port = next(iter(server.sockets)).getsockname()[1]
        opener = websocket_opener(open_timeout=2.0)
        try:
            await opener(f"ws://127.0.0.1:{port}/stats")
        except ChannelError as e:
            return str(e)
        raise AssertionError("expected ChannelError")

    assert "cannot open" in asyncio.run(_run())
