"""HttpLogChannel against httpx.MockTransport."""

import json

import httpx
import pytest

from log_social.errors import TransportError
from log_social.transport.http import HttpLogChannel

URL = "https://log.example/api/log"


def make_channel(handler) -> HttpLogChannel:
    return HttpLogChannel(URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_read_all_parses_items_and_drops_malformed():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"items": [
            {"from": "bob", "msg": "ONLINE", "time": 1700000000000},
            {"msg": "no sender", "time": 1},
            {"from": "carol", "msg": json.dumps({"to": "alice", "msg": "hi"}), "time": "2023-11-14T22:13:21Z"},
        ]})

    channel = make_channel(handler)
    records = await channel.read_all("room")
    await channel.close()

    assert seen["params"] == {"dest": "room"}
    assert [r.sender for r in records] == ["bob", "carol"]
    assert records[0].time < records[1].time


@pytest.mark.asyncio
async def test_read_all_tolerates_missing_items():
    channel = make_channel(lambda request: httpx.Response(200, json={}))
    assert await channel.read_all("room") == []
    await channel.close()


@pytest.mark.asyncio
async def test_read_all_accepts_jsonp_body():
    body = 'onRead({"items": [{"from": "bob", "msg": "ONLINE", "time": 5}]});'
    channel = make_channel(lambda request: httpx.Response(200, text=body))
    records = await channel.read_all("room")
    await channel.close()
    assert [r.sender for r in records] == ["bob"]


@pytest.mark.asyncio
async def test_append_sends_query_and_returns_ack():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True})

    channel = make_channel(handler)
    ack = await channel.append("room", "alice", '{"to": "bob", "msg": "hi & bye"}')
    await channel.close()

    assert ack == {"success": True}
    assert seen["params"] == {"dest": "room", "src": "alice", "msg": '{"to": "bob", "msg": "hi & bye"}'}


@pytest.mark.asyncio
async def test_append_rejected_by_log():
    channel = make_channel(lambda request: httpx.Response(200, json={"success": False}))
    with pytest.raises(TransportError):
        await channel.append("room", "alice", "ONLINE")
    await channel.close()


@pytest.mark.asyncio
async def test_http_error_status_raises():
    channel = make_channel(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(TransportError) as exc:
        await channel.read_all("room")
    await channel.close()
    assert exc.value.details == {"status": 503}


@pytest.mark.asyncio
async def test_network_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    channel = make_channel(handler)
    with pytest.raises(TransportError):
        await channel.append("room", "alice", "ONLINE")
    await channel.close()


@pytest.mark.asyncio
async def test_non_json_body_raises():
    channel = make_channel(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(TransportError):
        await channel.read_all("room")
    await channel.close()
