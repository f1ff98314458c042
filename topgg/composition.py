"""SDK composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from topgg.application.autoposter import Autoposter
from topgg.application.guild_tracker import GuildCountTracker
from topgg.config.settings import Settings
from topgg.core import SERVICE_NAME
from topgg.infrastructure.http.factory import create_topgg_client
from topgg.ports.topgg_client import TopggClient


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class TopggDependencies:
    """Holds the wired client and autoposter and their lifecycle."""

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._client: TopggClient | None = None
        self._autoposter: Autoposter | None = None
        self._connected = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def client(self) -> TopggClient:
        if self._client is None:
            raise RuntimeError("client is not initialized")
        return self._client

    @property
    def autoposter(self) -> Autoposter:
        if self._autoposter is None:
            raise RuntimeError("autoposter is not initialized")
        return self._autoposter

    def guild_tracker(self) -> GuildCountTracker:
        return GuildCountTracker(self.autoposter.handle())

    async def connect(self) -> None:
        """Must be awaited inside the event loop the autoposter should run on."""
        self._client = create_topgg_client(self._settings)
        if self._settings.autoposter_enabled:
            self._autoposter = Autoposter(
                self._client,
                self._settings.autoposter_interval_seconds,
            )
        self._connected = True
        _log("dependencies_connected", autoposter_enabled=self._settings.autoposter_enabled)

    async def close(self) -> None:
        if self._autoposter is not None:
            try:
                await self._autoposter.aclose()
            except Exception as exc:
                logger.warning("autoposter close failed: {}", exc)
            self._autoposter = None

        if self._client is not None:
            try:
                await self._client.close()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._client = None

        self._connected = False
        _log("dependencies_closed")

    async def __aenter__(self) -> "TopggDependencies":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def create_topgg_dependencies(settings: Settings | None = None) -> TopggDependencies:
    return TopggDependencies(settings=settings or Settings())
