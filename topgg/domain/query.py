"""Search query builders for GET /bots.

``Filter`` collects ``key: value`` search terms; ``Query`` adds paging, sorting
and field selection and renders everything as request params.
"""
from __future__ import annotations

from typing import Union

from topgg.constants import MAX_QUERY_LIMIT, MAX_QUERY_OFFSET
from topgg.domain.snowflake import SnowflakeLike, as_snowflake


class Filter:
    def __init__(self) -> None:
        self._terms: list[str] = []

    def _add(self, key: str, value: object) -> "Filter":
        self._terms.append(f"{key}: {value}")
        return self

    def username(self, username: str) -> "Filter":
        return self._add("username", username)

    def discriminator(self, discriminator: str) -> "Filter":
        return self._add("discriminator", discriminator)

    def prefix(self, prefix: str) -> "Filter":
        return self._add("prefix", prefix)

    def id(self, bot_id: SnowflakeLike) -> "Filter":
        return self._add("id", as_snowflake(bot_id))

    def votes(self, votes: int) -> "Filter":
        return self._add("points", int(votes))

    def monthly_votes(self, monthly_votes: int) -> "Filter":
        return self._add("monthlyPoints", int(monthly_votes))

    def certified(self, is_certified: bool) -> "Filter":
        return self._add("certifiedBot", "true" if is_certified else "false")

    def vanity(self, vanity: str) -> "Filter":
        return self._add("vanity", vanity)

    def render(self) -> str:
        return " ".join(self._terms)

    def __bool__(self) -> bool:
        return bool(self._terms)


class Query:
    def __init__(self) -> None:
        self._params: dict[str, str] = {}

    def limit(self, limit: int) -> "Query":
        self._params["limit"] = str(max(0, min(int(limit), MAX_QUERY_LIMIT)))
        return self

    def skip(self, offset: int) -> "Query":
        self._params["offset"] = str(max(0, min(int(offset), MAX_QUERY_OFFSET)))
        return self

    def sort(self, field: str) -> "Query":
        self._params["sort"] = field
        return self

    def fields(self, *names: str) -> "Query":
        self._params["fields"] = ",".join(names)
        return self

    def filter(self, search: Filter) -> "Query":
        if search:
            self._params["search"] = search.render()
        return self

    def to_params(self) -> dict[str, str]:
        return dict(self._params)


QueryLike = Union[Query, str]


def to_query_params(query: QueryLike) -> dict[str, str]:
    """A bare string searches by username."""
    if isinstance(query, Query):
        return query.to_params()
    if isinstance(query, str):
        return Query().filter(Filter().username(query)).to_params()
    raise TypeError(f"expected Query or str, got {type(query).__name__}")
