"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from topgg.domain.snowflake import as_snowflake, avatar_url, created_at


@dataclass(frozen=True)
class Stats:
    """Bot statistics snapshot posted to top.gg (value object).

    ``Stats()`` is the empty placeholder; it is never posted on its own.
    """

    server_count: int | None = None
    shard_count: int | None = None
    shards: tuple[int, ...] | None = None
    shard_id: int | None = None

    def __post_init__(self) -> None:
        if self.server_count is not None and self.server_count < 0:
            raise ValueError("server_count must not be negative")
        if self.shard_count is not None and self.shard_count < 0:
            raise ValueError("shard_count must not be negative")
        if self.shards is not None:
            if not isinstance(self.shards, tuple):
                object.__setattr__(self, "shards", tuple(self.shards))
            if self.shard_count is not None and self.shard_count != len(self.shards):
                raise ValueError("shard_count doesn't match the length of shards")
            if self.shard_id is not None and not 0 <= self.shard_id < len(self.shards):
                raise ValueError("shard index out of range")

    @classmethod
    def from_server_count(cls, server_count: int, shard_count: int | None = None) -> "Stats":
        return cls(server_count=int(server_count), shard_count=shard_count)

    @classmethod
    def from_shards(cls, shards: Iterable[int], shard_index: int | None = None) -> "Stats":
        """Build stats from per-shard server counts; server_count is their sum."""
        counts = tuple(int(count) for count in shards)
        return cls(
            server_count=sum(counts),
            shard_count=len(counts),
            shards=counts,
            shard_id=shard_index,
        )

    def with_server_count(self, server_count: int) -> "Stats":
        return replace(self, server_count=int(server_count))

    def with_shard_count(self, shard_count: int) -> "Stats":
        if self.shards is not None and len(self.shards) != shard_count:
            raise ValueError(
                "new shard count doesn't match the shards array's length - use from_shards() instead"
            )
        return replace(self, shard_count=int(shard_count))

    def to_payload(self) -> dict[str, Any]:
        """JSON body for POST /bots/stats; unset fields are omitted."""
        payload: dict[str, Any] = {}
        if self.server_count is not None:
            payload["server_count"] = self.server_count
        if self.shard_count is not None:
            payload["shard_count"] = self.shard_count
        if self.shards is not None:
            payload["shards"] = list(self.shards)
        if self.shard_id is not None:
            payload["shard_id"] = self.shard_id
        return payload


def _empty_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class BotStats(_ApiModel):
    server_count: int | None = None
    shard_count: int | None = None
    shards: list[int] = Field(default_factory=list)

    @field_validator("shards", mode="before")
    @classmethod
    def null_shards(cls, value: Any) -> Any:
        return value or []


class Bot(_ApiModel):
    """A bot listed on top.gg."""

    id: int
    username: str
    discriminator: str = "0"
    avatar: str | None = None
    prefix: str = ""
    short_description: str = Field("", alias="shortdesc")
    long_description: str | None = Field(None, alias="longdesc")
    tags: list[str] = Field(default_factory=list)
    website: str | None = None
    support: str | None = None
    github: str | None = None
    owners: list[int] = Field(default_factory=list)
    guilds: list[int] = Field(default_factory=list)
    invite: str | None = None
    date: datetime | None = None
    is_certified: bool = Field(False, alias="certifiedBot")
    vanity: str | None = None
    votes: int = Field(0, alias="points")
    monthly_votes: int = Field(0, alias="monthlyPoints")
    server_count: int | None = None
    shard_count: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> int:
        return as_snowflake(value)

    @field_validator("owners", "guilds", mode="before")
    @classmethod
    def coerce_snowflakes(cls, value: Any) -> list[int]:
        return [as_snowflake(item) for item in value or []]

    @field_validator(
        "avatar", "long_description", "website", "support", "github", "invite", "vanity",
        mode="before",
    )
    @classmethod
    def blank_is_none(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @property
    def avatar_url(self) -> str:
        return avatar_url(self.id, self.avatar)

    @property
    def url(self) -> str:
        return f"https://top.gg/bot/{self.vanity or self.id}"

    @property
    def created_at(self) -> datetime:
        return created_at(self.id)


class Socials(_ApiModel):
    github: str | None = None
    instagram: str | None = None
    reddit: str | None = None
    twitter: str | None = None
    youtube: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_none(cls, value: Any) -> Any:
        return _empty_to_none(value)


class User(_ApiModel):
    """A user logged into top.gg."""

    id: int
    username: str
    avatar: str | None = None
    bio: str | None = None
    banner: str | None = None
    socials: Socials | None = Field(None, alias="social")
    is_supporter: bool = Field(False, alias="supporter")
    is_certified_dev: bool = Field(False, alias="certifiedDev")
    is_moderator: bool = Field(False, alias="mod")
    is_web_moderator: bool = Field(False, alias="webMod")
    is_admin: bool = Field(False, alias="admin")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> int:
        return as_snowflake(value)

    @field_validator("avatar", "bio", "banner", mode="before")
    @classmethod
    def blank_is_none(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @property
    def avatar_url(self) -> str:
        return avatar_url(self.id, self.avatar)

    @property
    def created_at(self) -> datetime:
        return created_at(self.id)


class Voter(_ApiModel):
    """A user who voted for the bot."""

    id: int
    username: str
    avatar: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> int:
        return as_snowflake(value)

    @property
    def avatar_url(self) -> str:
        return avatar_url(self.id, self.avatar)

    @property
    def created_at(self) -> datetime:
        return created_at(self.id)
