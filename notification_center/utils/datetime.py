"""Timestamps in the store's local timezone.

Notification rows are written as naive local times (the legacy schema and
SQLite have no timezone-aware columns) and re-localized when read back, so
throttle windows and list ordering compare like with like.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notification_center.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE: Final[str] = "Africa/Dar_es_Salaam"


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``, or the store's home zone."""

    tz_name = (get_settings().app_timezone or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r; using %s", tz_name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Return the current local time as stored in notification columns."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach the app zone to a stored naive value, or convert an aware one."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None
