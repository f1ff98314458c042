"""Vote webhook payloads, independent of any web framework.

Bind a route with whatever framework the bot already uses, then hand the
``Authorization`` header and the body to ``IncomingVote.from_payload``.
"""
from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from pydantic import AliasChoices, Field, field_validator

from topgg.domain.models import _ApiModel
from topgg.domain.snowflake import as_snowflake


def parse_query_string(raw: str) -> dict[str, str]:
    """Split ``a=1&b=x%20y`` into a dict with URL-decoded values.

    Pairs without a value, and values that aren't valid UTF-8 once decoded, are skipped.
    """
    output: dict[str, str] = {}
    for pair in raw.split("&"):
        parts = pair.split("=")
        if len(parts) < 2:
            continue
        try:
            output[parts[0]] = unquote(parts[1], errors="strict")
        except UnicodeDecodeError:
            continue
    return output


class Vote(_ApiModel):
    """A vote for a bot or a server, as dispatched to a webhook."""

    receiver_id: int = Field(validation_alias=AliasChoices("bot", "guild", "receiver_id"))
    voter_id: int = Field(validation_alias=AliasChoices("user", "voter_id"))
    is_test: bool = Field(validation_alias=AliasChoices("type", "is_test"))
    # always False for server votes
    is_weekend: bool = Field(False, validation_alias=AliasChoices("isWeekend", "is_weekend"))
    query: dict[str, str] | None = None

    @field_validator("receiver_id", "voter_id", mode="before")
    @classmethod
    def coerce_snowflake(cls, value: Any) -> int:
        return as_snowflake(value)

    @field_validator("is_test", mode="before")
    @classmethod
    def type_is_test(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value == "test"
        return value

    @field_validator("is_weekend", mode="before")
    @classmethod
    def tolerant_weekend(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else False

    @field_validator("query", mode="before")
    @classmethod
    def split_query(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_query_string(value)
        if isinstance(value, dict):
            return value
        return None


@dataclass(frozen=True)
class IncomingVote:
    """A vote request that has not been checked against the webhook password yet."""

    authorization: str
    vote: Vote

    @classmethod
    def from_payload(cls, authorization: str, payload: dict[str, Any] | str | bytes) -> "IncomingVote":
        """Raises pydantic.ValidationError if the body isn't a vote."""
        if isinstance(payload, (str, bytes)):
            vote = Vote.model_validate_json(payload)
        else:
            vote = Vote.model_validate(payload)
        return cls(authorization=authorization, vote=vote)

    def authenticate(self, password: str) -> Vote | None:
        """Return the vote if the request carried ``password``, otherwise None."""
        if hmac.compare_digest(self.authorization.encode(), password.encode()):
            return self.vote
        return None
