from __future__ import annotations

import asyncio
from typing import Any

import pytest

from topgg.application.autoposter import Flusher
from topgg.domain.models import Stats


class RecordingPoster:
    """Implements StatsPoster for tests; records every stats object it is asked to post."""

    def __init__(
        self,
        *,
        raise_on_post: Exception | None = None,
        block_forever: bool = False,
    ) -> None:
        self.posted: list[Stats] = []
        self.timestamps: list[float] = []
        self._raise_on_post = raise_on_post
        self._block_forever = block_forever

    async def post_stats(self, stats: Stats) -> None:
        self.posted.append(stats)
        self.timestamps.append(asyncio.get_running_loop().time())
        if self._block_forever:
            await asyncio.Event().wait()
        if self._raise_on_post is not None:
            raise self._raise_on_post


class IntervalGate:
    """Stands in for the flusher's interval sleep; the test decides when the interval elapses."""

    def __init__(self) -> None:
        self.calls: list[float] = []
        self.sleeping = asyncio.Event()
        self._release = asyncio.Event()

    async def sleep(self, interval: float) -> None:
        self.calls.append(interval)
        self.sleeping.set()
        try:
            await self._release.wait()
        finally:
            self._release.clear()
            self.sleeping.clear()

    def elapse(self) -> None:
        self._release.set()


class FakeHandle:
    """Duck-typed Handle recording feeds."""

    def __init__(self) -> None:
        self.fed: list[Stats] = []

    def feed(self, stats: Stats) -> None:
        self.fed.append(stats)


async def settle(turns: int = 10) -> None:
    """Let pending callbacks and woken tasks run."""
    for _ in range(turns):
        await asyncio.sleep(0)


async def wait_for_posts(poster: RecordingPoster, count: int, timeout: float = 1.0) -> None:
    async def _poll() -> None:
        while len(poster.posted) < count:
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture()
def interval_gate(monkeypatch: pytest.MonkeyPatch) -> IntervalGate:
    gate = IntervalGate()

    async def _sleep_interval(self: Any) -> None:
        await gate.sleep(self._interval)

    monkeypatch.setattr(Flusher, "_sleep_interval", _sleep_interval)
    return gate


@pytest.fixture()
def poster() -> RecordingPoster:
    return RecordingPoster()
