"""
Enrichment helpers - decorative data that must never fail a request.

Each lookup either returns its value or raises one of ENRICHMENT_ERRORS;
best_effort turns those errors into the caller's default and logs them.
"""

import logging
from typing import Awaitable, Iterable, TypeVar

from pymongo.errors import PyMongoError

from pokemon_bingo.services.live_status_service import (
    LiveStatus,
    LiveStatusError,
    LiveStatusNotConfiguredError,
    get_live_status_service,
    twitch_login_from_url,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENRICHMENT_ERRORS = (LiveStatusError, PyMongoError)


async def best_effort(awaitable: Awaitable[T], default: T, what: str) -> T:
    """Await an enrichment lookup; on a known enrichment error return default."""
    try:
        return await awaitable
    except LiveStatusNotConfiguredError:
        logger.debug(f"{what}: live status not configured, using defaults")
        return default
    except ENRICHMENT_ERRORS as e:
        logger.warning(f"{what} unavailable ({e.__class__.__name__}: {e}), using defaults")
        return default


async def fetch_live_statuses(twitch_urls: Iterable[str | None]) -> dict[str, LiveStatus]:
    """Live status keyed by Twitch login; empty dict when the lookup fails."""
    logins = [login for login in (twitch_login_from_url(u) for u in twitch_urls) if login]
    if not logins:
        return {}

    service = get_live_status_service()
    return await best_effort(service.get_statuses(logins), {}, "Live status")


def live_status_for(statuses: dict[str, LiveStatus], twitch_url: str | None) -> LiveStatus:
    login = twitch_login_from_url(twitch_url)
    return statuses.get(login, LiveStatus()) if login else LiveStatus()
