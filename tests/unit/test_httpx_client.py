"""Unit tests for HttpxTopggClient against httpx.MockTransport (no network)."""
from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from topgg.config.settings import Settings
from topgg.domain.models import Stats
from topgg.domain.query import Filter, Query
from topgg.infrastructure.http.factory import create_topgg_client
from topgg.infrastructure.http.httpx_client import HttpxTopggClient
from topgg.ports.topgg_client import (
    InternalClientError,
    InternalServerError,
    NotFoundError,
    RatelimitedError,
    StatsPoster,
    TopggClient,
    UnauthorizedError,
)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> HttpxTopggClient:
    return HttpxTopggClient(
        httpx.AsyncClient(
            base_url="https://top.gg/api",
            headers={"Authorization": "Bearer test-token"},
            transport=httpx.MockTransport(handler),
        )
    )


class _Recorder:
    def __init__(self, response: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._response = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response


def test_httpx_client_satisfies_ports():
    client = _client(lambda request: httpx.Response(200))
    assert isinstance(client, TopggClient)
    assert isinstance(client, StatsPoster)


@pytest.mark.asyncio
async def test_post_stats_sends_payload_with_auth():
    recorder = _Recorder(httpx.Response(200))
    client = _client(recorder)

    await client.post_stats(Stats.from_shards([3, 4]))

    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.url == "https://top.gg/api/bots/stats"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert json.loads(request.content) == {"server_count": 7, "shard_count": 2, "shards": [3, 4]}
    await client.close()


@pytest.mark.asyncio
async def test_post_stats_rejects_empty_server_count_without_request():
    recorder = _Recorder(httpx.Response(200))
    client = _client(recorder)

    with pytest.raises(ValueError, match="server count"):
        await client.post_stats(Stats())
    with pytest.raises(ValueError):
        await client.post_stats(Stats.from_server_count(0))

    assert recorder.requests == []
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"),
    [
        (401, UnauthorizedError),
        (403, UnauthorizedError),
        (404, NotFoundError),
        (500, InternalServerError),
        (503, InternalServerError),
        (400, InternalClientError),
    ],
)
async def test_error_statuses_map_to_errors(status, error):
    client = _client(lambda request: httpx.Response(status))
    with pytest.raises(error):
        await client.get_bot(1)
    await client.close()


@pytest.mark.asyncio
async def test_ratelimit_reads_retry_after_from_body():
    client = _client(lambda request: httpx.Response(429, json={"retry-after": 3600}))
    with pytest.raises(RatelimitedError) as excinfo:
        await client.post_stats(Stats.from_server_count(1))
    assert excinfo.value.retry_after == 3600.0
    await client.close()


@pytest.mark.asyncio
async def test_ratelimit_falls_back_to_header():
    client = _client(lambda request: httpx.Response(429, headers={"Retry-After": "12"}))
    with pytest.raises(RatelimitedError) as excinfo:
        await client.is_weekend()
    assert excinfo.value.retry_after == 12.0
    await client.close()


@pytest.mark.asyncio
async def test_transport_failure_is_internal_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(InternalClientError) as excinfo:
        await client.get_stats()
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    await client.close()


@pytest.mark.asyncio
async def test_timeout_is_internal_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = _client(handler)
    with pytest.raises(InternalClientError, match="timeout"):
        await client.get_user(1)
    await client.close()


@pytest.mark.asyncio
async def test_undecodable_body_is_internal_server_error():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(InternalServerError):
        await client.get_stats()
    await client.close()


@pytest.mark.asyncio
async def test_unexpected_payload_shape_is_internal_server_error():
    client = _client(lambda request: httpx.Response(200, json={"username": "no id"}))
    with pytest.raises(InternalServerError):
        await client.get_bot(1)
    await client.close()


@pytest.mark.asyncio
async def test_get_bots_sends_query_params_and_parses_results():
    recorder = _Recorder(
        httpx.Response(
            200,
            json={"results": [{"id": "1", "username": "a"}, {"id": "2", "username": "b"}]},
        )
    )
    client = _client(recorder)

    bots = await client.get_bots(Query().limit(10).filter(Filter().username("a")))

    assert [bot.id for bot in bots] == [1, 2]
    params = recorder.requests[0].url.params
    assert params["limit"] == "10"
    assert params["search"] == "username: a"
    await client.close()


@pytest.mark.asyncio
async def test_get_voters_and_has_voted_and_is_weekend():
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/bots/votes":
            assert request.url.params["page"] == "2"
            return httpx.Response(200, json=[{"id": "5", "username": "voter"}])
        if path == "/api/bots/check":
            assert request.url.params["userId"] == "5"
            return httpx.Response(200, json={"voted": 1})
        if path == "/api/weekend":
            return httpx.Response(200, json={"is_weekend": False})
        return httpx.Response(404)

    client = _client(handler)

    voters = await client.get_voters(page=2)
    assert voters[0].id == 5
    assert await client.has_voted("5") is True
    assert await client.is_weekend() is False
    await client.close()


@pytest.mark.asyncio
async def test_get_stats_parses_bot_stats():
    client = _client(lambda request: httpx.Response(200, json={"server_count": 42}))
    stats = await client.get_stats()
    assert stats.server_count == 42
    await client.close()


@pytest.mark.asyncio
async def test_factory_configures_auth_base_url_and_timeouts():
    settings = Settings(
        TOPGG_TOKEN="secret",
        TOPGG_BASE_URL="https://example.test/api",
        TOPGG_CONNECT_TIMEOUT_SECONDS=2.0,
        TOPGG_READ_TIMEOUT_SECONDS=8.0,
    )
    client = create_topgg_client(settings)
    assert isinstance(client, HttpxTopggClient)

    inner = client._client
    assert inner.headers["Authorization"] == "Bearer secret"
    assert str(inner.base_url) == "https://example.test/api/"
    assert inner.timeout.connect == 2.0
    assert inner.timeout.read == 8.0
    await client.close()


@pytest.mark.asyncio
async def test_bot_id_targets_another_bot():
    recorder = _Recorder(httpx.Response(200, json={"server_count": 1, "voted": 0}))
    client = _client(recorder)

    await client.get_stats(bot_id="264811613708746752")
    assert await client.has_voted(5, bot_id=264811613708746752) is False

    paths = [request.url.path for request in recorder.requests]
    assert paths == [
        "/api/bots/264811613708746752/stats",
        "/api/bots/264811613708746752/check",
    ]
    assert recorder.requests[1].url.params["userId"] == "5"
    await client.close()


@pytest.mark.asyncio
async def test_get_voters_for_another_bot():
    recorder = _Recorder(httpx.Response(200, json=[]))
    client = _client(recorder)

    assert await client.get_voters(bot_id=42) == []
    assert recorder.requests[0].url.path == "/api/bots/42/votes"
    assert recorder.requests[0].url.params["page"] == "1"
    await client.close()
