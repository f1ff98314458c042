"""SDK-level constants shared across modules."""
from __future__ import annotations

API_BASE_URL = "https://top.gg/api"
USER_AGENT = "topgg (https://github.com/top-gg/python-sdk) Python/httpx"

# top.gg rejects stats posted more often than every 15 minutes.
MIN_AUTOPOST_INTERVAL_SECONDS = 900.0
DEFAULT_AUTOPOST_INTERVAL_SECONDS = 1800.0

MAX_QUERY_LIMIT = 500
MAX_QUERY_OFFSET = 499


class FlusherState:
    WAITING_FOR_SIGNAL = "WAITING_FOR_SIGNAL"
    POSTING = "POSTING"
    SLEEPING = "SLEEPING"
    CANCELLED = "CANCELLED"
