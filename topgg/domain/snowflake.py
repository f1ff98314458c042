"""Discord snowflake helpers: coercion, creation time, avatar URLs."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Union

DISCORD_EPOCH_MS = 1_420_070_400_000
CDN_BASE_URL = "https://cdn.discordapp.com"

SnowflakeLike = Union[int, str]


def as_snowflake(value: SnowflakeLike) -> int:
    """Coerce an int or decimal string into a snowflake; raise ValueError otherwise."""
    if isinstance(value, bool):
        raise ValueError(f"invalid snowflake: {value!r}")
    if isinstance(value, int):
        snowflake = value
    elif isinstance(value, str) and value.strip().isdigit():
        snowflake = int(value.strip())
    else:
        raise ValueError(f"invalid snowflake: {value!r}")
    if snowflake < 0 or snowflake >= 1 << 64:
        raise ValueError(f"snowflake out of range: {value!r}")
    return snowflake


def created_at(snowflake: int) -> datetime:
    timestamp_ms = (snowflake >> 22) + DISCORD_EPOCH_MS
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def avatar_url(snowflake: int, avatar_hash: str | None) -> str:
    if avatar_hash:
        ext = "gif" if avatar_hash.startswith("a_") else "png"
        return f"{CDN_BASE_URL}/avatars/{snowflake}/{avatar_hash}.{ext}?size=1024"
    return f"{CDN_BASE_URL}/embed/avatars/{(snowflake >> 22) % 6}.png"
