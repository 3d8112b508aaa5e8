from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import pytest

from pyhyperapp._transport import RawResponse
from pyhyperapp.config import HyperappConfig
from pyhyperapp.exceptions import HyperappApiError, HyperappTransportError
from pyhyperapp.models.counters import CounterSnapshot
from pyhyperapp.remote import HyperappRemoteClient

_COUNTERS = {
    "http_count": 1,
    "http_last_message": "hi",
    "local_count": 0,
    "local_last_message": None,
    "remote_count": 0,
    "remote_last_message": None,
}


class _ScriptedTransport:
    def __init__(self, response: RawResponse) -> None:
        self._response = response
        self.requests: list[tuple[str, dict[str, Any]]] = []

    async def post_json(self, path: str, body: Mapping[str, Any]) -> RawResponse:
        self.requests.append((path, dict(body)))
        return self._response


def _client(response: RawResponse) -> tuple[HyperappRemoteClient, _ScriptedTransport]:
    transport = _ScriptedTransport(response)
    return HyperappRemoteClient(HyperappConfig(), transport), transport


@pytest.mark.asyncio
async def test_call_wraps_payload_in_variant() -> None:
    client, transport = _client(RawResponse(200, json.dumps(_COUNTERS)))

    snapshot = await client.call("ping_http", '{"message":"hi"}')

    assert transport.requests == [("/api", {"PingHttp": '{"message":"hi"}'})]
    assert snapshot == CounterSnapshot.model_validate(_COUNTERS)


@pytest.mark.asyncio
async def test_call_unwraps_ok_result() -> None:
    client, _ = _client(RawResponse(200, json.dumps({"Ok": _COUNTERS})))

    snapshot = await client.call("send_message", "{}")

    assert snapshot.http == (1, "hi")


@pytest.mark.asyncio
async def test_call_decodes_json_string_result() -> None:
    client, _ = _client(RawResponse(200, json.dumps(json.dumps(_COUNTERS))))

    snapshot = await client.call("get_counters", '""')

    assert snapshot.http_count == 1


@pytest.mark.asyncio
async def test_err_result_raises_api_error_with_details() -> None:
    client, _ = _client(RawResponse(200, json.dumps({"Err": "unknown target node"})))

    with pytest.raises(HyperappApiError) as exc_info:
        await client.call("send_message", "{}")

    exc = exc_info.value
    assert exc.details == "unknown target node"
    assert exc.operation == "send_message"


@pytest.mark.asyncio
async def test_non_2xx_raises_api_error_with_body_as_details() -> None:
    client, _ = _client(RawResponse(500, "handler panicked"))

    with pytest.raises(HyperappApiError) as exc_info:
        await client.call("get_counters", '""')

    exc = exc_info.value
    assert exc.status_code == 500
    assert exc.details == "handler panicked"
    assert str(exc) == "HTTP request failed with status 500"


@pytest.mark.asyncio
async def test_non_2xx_with_empty_body_has_no_details() -> None:
    client, _ = _client(RawResponse(404, ""))

    with pytest.raises(HyperappApiError) as exc_info:
        await client.call("get_counters", '""')

    assert exc_info.value.details is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        json.dumps({**_COUNTERS, "http_count": "many"}),
        json.dumps({"Ok": {}}),
        json.dumps({"counter": 3, "message_count": 1, "node": "x.os"}),
    ],
)
async def test_unusable_reply_raises_transport_error(text: str) -> None:
    client, _ = _client(RawResponse(200, text))

    with pytest.raises(HyperappTransportError):
        await client.call("get_counters", '""')


@pytest.mark.asyncio
async def test_post_raw_returns_response_unchanged() -> None:
    client, transport = _client(RawResponse(400, "Failed to deserialize"))

    response = await client.post_raw({"PingLocal": "wrong-variant"})

    assert response == RawResponse(400, "Failed to deserialize")
    assert response.ok is False
    assert transport.requests == [("/api", {"PingLocal": "wrong-variant"})]
