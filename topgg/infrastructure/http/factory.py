"""top.gg client factory: builds TopggClient from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from topgg.config.settings import Settings
from topgg.infrastructure.http.httpx_client import HttpxTopggClient
from topgg.ports.topgg_client import TopggClient


def create_topgg_client(settings: Settings) -> TopggClient:
    """Build a client from settings. Auth, user agent and timeouts live on the AsyncClient."""
    async_client = httpx.AsyncClient(
        base_url=settings.base_url,
        headers={
            "Authorization": f"Bearer {settings.token}",
            "Content-Type": "application/json",
            "User-Agent": settings.user_agent,
        },
        timeout=httpx.Timeout(
            connect=settings.connect_timeout_seconds,
            read=settings.read_timeout_seconds,
            write=settings.read_timeout_seconds,
            pool=settings.connect_timeout_seconds,
        ),
    )
    return HttpxTopggClient(async_client)
