"""top.gg client port: contract for talking to the top.gg REST API.

Application code (the autoposter, the composition root) depends on this port;
infrastructure (e.g. httpx) implements it.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from topgg.domain.models import Bot, BotStats, Stats, User, Voter
from topgg.domain.query import QueryLike
from topgg.domain.snowflake import SnowflakeLike


class TopggError(Exception):
    """Base for every failure reported by a top.gg client."""


class InternalClientError(TopggError):
    """The request never reached top.gg (connection, TLS, timeout, ...)."""


class InternalServerError(TopggError):
    """top.gg answered with a 5xx or with a body that could not be decoded."""


class NotFoundError(TopggError):
    """The requested resource does not exist (404)."""


class UnauthorizedError(TopggError):
    """The token was rejected (401/403)."""


class RatelimitedError(TopggError):
    """The client is being ratelimited (429)."""

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"ratelimited, try again in {retry_after:g} seconds")
        self.retry_after = retry_after


@runtime_checkable
class StatsPoster(Protocol):
    """The one capability the autoposter needs."""

    async def post_stats(self, stats: Stats) -> None:
        """Post stats for the token's bot; raise TopggError on failure."""
        ...


@runtime_checkable
class TopggClient(StatsPoster, Protocol):
    """Port: the full top.gg API surface. Implementations live in infrastructure."""

    async def get_bot(self, bot_id: SnowflakeLike) -> Bot: ...

    async def get_bots(self, query: QueryLike) -> list[Bot]: ...

    async def get_stats(self, bot_id: SnowflakeLike | None = None) -> BotStats: ...

    async def get_user(self, user_id: SnowflakeLike) -> User: ...

    async def get_voters(
        self, page: int = 1, *, bot_id: SnowflakeLike | None = None
    ) -> list[Voter]: ...

    async def has_voted(
        self, user_id: SnowflakeLike, *, bot_id: SnowflakeLike | None = None
    ) -> bool: ...

    async def is_weekend(self) -> bool: ...

    async def close(self) -> None:
        """Release resources (e.g. connection pool). No-op allowed if nothing to close."""
        ...
