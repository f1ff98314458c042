"""Python SDK for the top.gg API with a background stats autoposter."""
from topgg.application.autoposter import Autoposter, Handle
from topgg.application.guild_tracker import GuildCountTracker
from topgg.composition import TopggDependencies, create_topgg_dependencies
from topgg.config.settings import Settings
from topgg.domain.models import Bot, BotStats, Socials, Stats, User, Voter
from topgg.domain.query import Filter, Query
from topgg.domain.vote import IncomingVote, Vote
from topgg.infrastructure.http.factory import create_topgg_client
from topgg.infrastructure.http.httpx_client import HttpxTopggClient
from topgg.ports.topgg_client import (
    InternalClientError,
    InternalServerError,
    NotFoundError,
    RatelimitedError,
    StatsPoster,
    TopggClient,
    TopggError,
    UnauthorizedError,
)

__version__ = "0.1.0"

__all__ = [
    "Autoposter",
    "Bot",
    "BotStats",
    "Filter",
    "GuildCountTracker",
    "Handle",
    "HttpxTopggClient",
    "IncomingVote",
    "InternalClientError",
    "InternalServerError",
    "NotFoundError",
    "Query",
    "RatelimitedError",
    "Settings",
    "Socials",
    "Stats",
    "StatsPoster",
    "TopggClient",
    "TopggDependencies",
    "TopggError",
    "UnauthorizedError",
    "User",
    "Vote",
    "Voter",
    "create_topgg_client",
    "create_topgg_dependencies",
]
