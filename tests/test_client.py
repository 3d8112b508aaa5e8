from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from pyhyperapp.client import HyperappClient
from pyhyperapp.config import HyperappConfig
from pyhyperapp.exceptions import HyperappApiError, HyperappError, HyperappTransportError
from pyhyperapp.models.requests import SendMode


@dataclass
class FakeCounterApp:
    """Minimal HTTP stand-in for the counter process behind ``/api``."""

    counters: dict[str, Any] = field(
        default_factory=lambda: {
            "http_count": 0,
            "http_last_message": None,
            "local_count": 0,
            "local_last_message": None,
            "remote_count": 0,
            "remote_last_message": None,
        }
    )
    bodies: list[dict[str, Any]] = field(default_factory=list)
    canned: dict[str, tuple[int, bytes]] = field(default_factory=dict)

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.bodies.append(body)
        ((variant, value),) = body.items()

        if variant in self.canned:
            status, raw = self.canned[variant]
            return web.Response(status=status, body=raw, content_type="text/plain", charset="utf-8")

        if variant == "GetCounters":
            return web.json_response(self.counters)

        if variant == "PingHttp":
            message = json.loads(value)["message"]
            self.counters["http_count"] += 1
            self.counters["http_last_message"] = message
            return web.json_response({"Ok": self.counters})

        if variant == "SendMessage":
            payload = json.loads(value)
            if payload["mode"] != "local":
                return web.json_response({"Err": f"cannot reach {payload['target_node']}"})
            self.counters["local_count"] += 1
            self.counters["local_last_message"] = payload["message"]
            return web.json_response({"Ok": self.counters})

        return web.Response(status=400, text=f"Failed to deserialize HTTP request into {variant}")


@pytest_asyncio.fixture
async def fake_app() -> AsyncIterator[tuple[FakeCounterApp, HyperappConfig]]:
    counter_app = FakeCounterApp()
    app = web.Application()
    app.router.add_post("/skeleton-app/api", counter_app.handle)
    async with test_utils.TestServer(app) as server:
        config = HyperappConfig(
            base_url=f"http://{server.host}:{server.port}/skeleton-app",
            node_id="fake.os",
            request_timeout=5.0,
            api_trace_enabled=True,
        )
        yield counter_app, config


@pytest.mark.asyncio
async def test_typed_operations(fake_app: tuple[FakeCounterApp, HyperappConfig]) -> None:
    counter_app, config = fake_app

    async with HyperappClient(config) as client:
        assert (await client.get_counters()).http_count == 0
        assert (await client.ping_http("hello")).http == (1, "hello")
        assert (await client.send_message("note")).local == (1, "note")

        with pytest.raises(HyperappApiError) as exc_info:
            await client.send_message("note", mode=SendMode.REMOTE, target_node="other.os")

    assert exc_info.value.details == "cannot reach other.os"
    assert counter_app.bodies[0] == {"GetCounters": '""'}
    assert counter_app.bodies[1] == {"PingHttp": '{"message":"hello"}'}


@pytest.mark.asyncio
async def test_store_flows_against_http_app(fake_app: tuple[FakeCounterApp, HyperappConfig]) -> None:
    counter_app, config = fake_app

    async with HyperappClient(config) as client:
        store = client.create_store()
        await store.initialize()
        assert store.state.is_connected is True
        assert store.state.counters is not None

        store.set_ping_message("hi")
        await store.send_ping()
        assert store.state.counters.http == (1, "hi")

        await store.trigger_ping_mismatch()
        assert store.state.error == "Failed to deserialize HTTP request into PingLocal"
        assert counter_app.bodies[-2] == {"PingLocal": "mismatch-trigger"}
        assert counter_app.bodies[-1] == {"GetCounters": '""'}

        store.set_mismatch_node("other.os")
        store.set_mismatch_message("wrong")
        await store.trigger_mismatch()
        assert store.state.error == "cannot reach other.os"
        assert store.state.mismatch_message == "wrong"

        store.dismiss_error()
        store.set_message("local note")
        await store.send_message()
        assert store.state.error is None
        assert store.state.counters.local == (1, "local note")
        assert store.state.is_busy is False


@pytest.mark.asyncio
async def test_client_requires_context() -> None:
    client = HyperappClient(HyperappConfig())
    with pytest.raises(HyperappError):
        await client.get_counters()


@pytest.mark.asyncio
async def test_undecodable_error_body_stays_in_library_errors(
    fake_app: tuple[FakeCounterApp, HyperappConfig],
) -> None:
    counter_app, config = fake_app
    counter_app.canned["GetCounters"] = (500, b"\xff\xfe bad")
    counter_app.canned["PingHttp"] = (200, b"\xff\xfe")

    async with HyperappClient(config) as client:
        with pytest.raises(HyperappApiError) as exc_info:
            await client.get_counters()
        with pytest.raises(HyperappTransportError):
            await client.ping_http("hi")

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == "\ufffd\ufffd bad"


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [b'{"Ok": {}}', b'{"counter": 3, "message_count": 1, "node": "x.os"}'])
async def test_refresh_keeps_counters_when_reply_is_not_a_snapshot(
    fake_app: tuple[FakeCounterApp, HyperappConfig],
    reply: bytes,
) -> None:
    counter_app, config = fake_app
    counter_app.counters["http_count"] = 4

    async with HyperappClient(config) as client:
        store = client.create_store()
        await store.initialize()
        previous = store.state.counters
        assert previous is not None and previous.http_count == 4

        counter_app.canned["GetCounters"] = (200, reply)
        await store.refresh()

    assert store.state.counters == previous
    assert store.state.error is not None
    assert store.state.error.startswith("get_counters returned an invalid counter snapshot")
    assert store.state.is_refreshing is False
