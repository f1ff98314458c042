"""
Autoposter: periodically posts the latest fed stats to top.gg.

Roles:
  Mailbox  - single overwritable slot (latest Stats + ready flag) and a wake signal.
  Handle   - cheap, cloneable feeder; any number of producers, any thread.
  Flusher  - the sole consumer, one asyncio task:
             WAITING_FOR_SIGNAL -> POSTING -> SLEEPING -> WAITING_FOR_SIGNAL ...
             The first feed is posted promptly; consecutive posts are at least
             `interval` apart. Feeds that arrive in between overwrite each other
             and only the last one is posted.
  Autoposter - validates the interval, spawns the flusher, owns one Handle and
             hard-cancels the flusher on disposal.

Post failures are logged and swallowed; the next cycle posts whatever is latest.
"""
from __future__ import annotations

import asyncio
import math
import threading
from datetime import timedelta
from typing import Any

from loguru import logger

from topgg.constants import MIN_AUTOPOST_INTERVAL_SECONDS, FlusherState
from topgg.core import SERVICE_NAME
from topgg.domain.models import Stats
from topgg.ports.topgg_client import StatsPoster


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class Mailbox:
    """Latest unposted Stats plus its readiness flag, shared by feeders and the flusher.

    The lock is a threading.Lock so feeds may come from any thread; it is only
    held to swap references, never across I/O.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._current = Stats()
        self._ready = False
        self._signal = asyncio.Event()

    def put(self, stats: Stats) -> None:
        with self._lock:
            self._current = stats
            self._ready = True
        self._wake()

    def take(self) -> Stats | None:
        """Consume the pending snapshot, or return None if nothing new arrived.

        Only the flusher calls this, from the event loop thread.
        """
        with self._lock:
            self._signal.clear()
            if not self._ready:
                return None
            self._ready = False
            return self._current

    async def wait(self) -> None:
        await self._signal.wait()

    def _wake(self) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._signal.set()
            return
        if self._loop.is_closed():
            return
        try:
            self._loop.call_soon_threadsafe(self._signal.set)
        except RuntimeError:
            # loop closed between the check and the call; nothing left to wake
            return


class Handle:
    """Feeds stats to an autoposter. Clone it to hand out to other producers."""

    __slots__ = ("_mailbox",)

    def __init__(self, mailbox: Mailbox) -> None:
        self._mailbox = mailbox

    def feed(self, stats: Stats) -> None:
        """Replace the pending stats. Never blocks beyond a short lock."""
        self._mailbox.put(stats)

    def clone(self) -> "Handle":
        return Handle(self._mailbox)

    __copy__ = clone


class Flusher:
    """Background loop: wait for a feed, post it, sleep out the interval."""

    def __init__(self, client: StatsPoster, mailbox: Mailbox, interval_seconds: float) -> None:
        self._client = client
        self._mailbox = mailbox
        self._interval = interval_seconds
        self.state = FlusherState.WAITING_FOR_SIGNAL

    async def run(self) -> None:
        try:
            while True:
                self.state = FlusherState.WAITING_FOR_SIGNAL
                await self._mailbox.wait()

                stats = self._mailbox.take()
                if stats is None:
                    continue

                self.state = FlusherState.POSTING
                await self._post(stats)

                self.state = FlusherState.SLEEPING
                await self._sleep_interval()
        finally:
            self.state = FlusherState.CANCELLED

    async def _post(self, stats: Stats) -> None:
        try:
            await self._client.post_stats(stats)
        except Exception as exc:
            logger.bind(
                service_name=SERVICE_NAME,
                event="stats_post_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            ).warning("")
            return
        _log("stats_posted", interval_seconds=self._interval)

    async def _sleep_interval(self) -> None:
        await asyncio.sleep(self._interval)


class Autoposter:
    """
    Posts fed stats to top.gg every `interval` (at least 15 minutes).

    Must be created inside a running event loop; the flusher task starts
    immediately and runs until `cancel()` / `aclose()` / `async with` exit or
    until the Autoposter is garbage collected.

    Only one Autoposter should be active per bot token, otherwise each one
    posts on its own schedule.
    """

    def __init__(self, client: StatsPoster, interval: float | timedelta) -> None:
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        if not math.isfinite(seconds) or seconds < MIN_AUTOPOST_INTERVAL_SECONDS:
            raise ValueError("The interval mustn't be shorter than 15 minutes.")

        loop = asyncio.get_running_loop()
        mailbox = Mailbox(loop)
        self._interval = seconds
        self._handle = Handle(mailbox)
        self._flusher = Flusher(client, mailbox, seconds)
        self._closed = False
        self._task: asyncio.Task[None] = loop.create_task(
            self._flusher.run(), name="topgg-autoposter"
        )
        _log("autoposter_started", interval_seconds=seconds)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> str:
        if self._closed:
            return FlusherState.CANCELLED
        return self._flusher.state

    def feed(self, stats: Stats) -> None:
        self._handle.feed(stats)

    def handle(self) -> Handle:
        return self._handle.clone()

    def cancel(self) -> None:
        """Abort the flusher now, even mid-post. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._task.cancel()
        _log("autoposter_stopped")

    async def aclose(self) -> None:
        self.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "Autoposter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __del__(self) -> None:
        task = getattr(self, "_task", None)
        if task is None or task.done():
            return
        loop = task.get_loop()
        if loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            task.cancel()
        else:
            loop.call_soon_threadsafe(task.cancel)
