"""Concrete top.gg client implementation using httpx (injected where TopggClient is needed)."""
from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from topgg.core import SERVICE_NAME
from topgg.domain.models import Bot, BotStats, Stats, User, Voter
from topgg.domain.query import QueryLike, to_query_params
from topgg.domain.snowflake import SnowflakeLike, as_snowflake
from topgg.ports.topgg_client import (
    InternalClientError,
    InternalServerError,
    NotFoundError,
    RatelimitedError,
    TopggClient,
    UnauthorizedError,
)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def _retry_after(response: httpx.Response) -> float:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("retry-after", "retry_after", "retryAfter"):
            if key in body:
                try:
                    return float(body[key])
                except (TypeError, ValueError):
                    break
    try:
        return float(response.headers.get("retry-after", 0))
    except ValueError:
        return 0.0


def _bot_path(bot_id: SnowflakeLike | None, endpoint: str) -> str:
    """Path for the token's own bot, or for any bot when an id is given."""
    if bot_id is None:
        return f"/bots/{endpoint}"
    return f"/bots/{as_snowflake(bot_id)}/{endpoint}"


class HttpxTopggClient(TopggClient):
    """TopggClient implementation using httpx.AsyncClient.

    The AsyncClient is expected to carry the base URL, auth header and timeouts;
    see ``create_topgg_client``.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as exc:
            _log("http_request_failed", method=method, path=path, reason="timeout")
            raise InternalClientError(f"timeout while requesting {path}") from exc
        except httpx.HTTPError as exc:
            _log("http_request_failed", method=method, path=path, reason=str(exc))
            raise InternalClientError(f"http request failed for {path}: {exc}") from exc

        self._raise_for_status(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise InternalServerError(f"undecodable response body for {path}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        path = response.request.url.path
        _log("http_request_failed", path=path, status_code=status)
        if status in (401, 403):
            raise UnauthorizedError(f"http status {status} for {path}: invalid top.gg token")
        if status == 404:
            raise NotFoundError(f"http status 404 for {path}")
        if status == 429:
            raise RatelimitedError(_retry_after(response))
        if status >= 500:
            raise InternalServerError(f"http status {status} for {path}")
        raise InternalClientError(f"http status {status} for {path}")

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise InternalServerError(f"unexpected {model.__name__} payload: {exc}") from exc

    async def post_stats(self, stats: Stats) -> None:
        if not stats.server_count or stats.server_count <= 0:
            raise ValueError("required server count property is still empty or zero")
        await self._request("POST", "/bots/stats", json=stats.to_payload())

    async def get_stats(self, bot_id: SnowflakeLike | None = None) -> BotStats:
        data = await self._request("GET", _bot_path(bot_id, "stats"))
        return self._parse(BotStats, data)

    async def get_bot(self, bot_id: SnowflakeLike) -> Bot:
        data = await self._request("GET", f"/bots/{as_snowflake(bot_id)}")
        return self._parse(Bot, data)

    async def get_bots(self, query: QueryLike) -> list[Bot]:
        data = await self._request("GET", "/bots", params=to_query_params(query))
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise InternalServerError("unexpected bot search payload")
        return [self._parse(Bot, item) for item in data["results"]]

    async def get_user(self, user_id: SnowflakeLike) -> User:
        data = await self._request("GET", f"/users/{as_snowflake(user_id)}")
        return self._parse(User, data)

    async def get_voters(
        self, page: int = 1, *, bot_id: SnowflakeLike | None = None
    ) -> list[Voter]:
        data = await self._request(
            "GET", _bot_path(bot_id, "votes"), params={"page": max(1, int(page))}
        )
        if not isinstance(data, list):
            raise InternalServerError("unexpected voters payload")
        return [self._parse(Voter, item) for item in data]

    async def has_voted(
        self, user_id: SnowflakeLike, *, bot_id: SnowflakeLike | None = None
    ) -> bool:
        data = await self._request(
            "GET", _bot_path(bot_id, "check"), params={"userId": as_snowflake(user_id)}
        )
        if not isinstance(data, dict) or "voted" not in data:
            raise InternalServerError("unexpected vote check payload")
        return bool(data["voted"])

    async def is_weekend(self) -> bool:
        data = await self._request("GET", "/weekend")
        if not isinstance(data, dict) or "is_weekend" not in data:
            raise InternalServerError("unexpected weekend payload")
        return bool(data["is_weekend"])

    async def close(self) -> None:
        await self._client.aclose()
