"""Server-count tracking for any Discord library.

Forward the library's ready / guild-create / guild-delete events here and the
tracker feeds the resulting server count to an autoposter handle.
"""
from __future__ import annotations

import threading
from typing import Iterable

from topgg.application.autoposter import Handle
from topgg.domain.models import Stats
from topgg.domain.snowflake import SnowflakeLike, as_snowflake


class GuildCountTracker:
    """Feeds happen under the tracker lock so counts reach the mailbox in event order."""

    def __init__(self, handle: Handle) -> None:
        self._handle = handle
        self._lock = threading.Lock()
        self._guilds: set[int] = set()

    @property
    def server_count(self) -> int:
        with self._lock:
            return len(self._guilds)

    def on_ready(self, guild_ids: Iterable[SnowflakeLike]) -> None:
        """Replace the known guilds with the ready payload's list."""
        guilds = {as_snowflake(guild_id) for guild_id in guild_ids}
        with self._lock:
            self._guilds = guilds
            self._handle.feed(Stats.from_server_count(len(guilds)))

    def on_guild_create(self, guild_id: SnowflakeLike) -> None:
        snowflake = as_snowflake(guild_id)
        with self._lock:
            if snowflake in self._guilds:
                return
            self._guilds.add(snowflake)
            self._handle.feed(Stats.from_server_count(len(self._guilds)))

    def on_guild_delete(self, guild_id: SnowflakeLike) -> None:
        snowflake = as_snowflake(guild_id)
        with self._lock:
            if snowflake not in self._guilds:
                return
            self._guilds.discard(snowflake)
            self._handle.feed(Stats.from_server_count(len(self._guilds)))
