from datetime import datetime, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ohw_sentinel.core.config import settings


def get_zoneinfo(tz_name: Optional[str] = None) -> ZoneInfo:
    name = tz_name or settings.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def now_local(tz_name: Optional[str] = None) -> datetime:
    return datetime.now(get_zoneinfo(tz_name))


def to_utc_aware(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-aware (tzinfo=UTC).
    - Aware datetimes are converted to UTC
    - Naive datetimes are assumed UTC and tz attached
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def to_local(dt: datetime | None, tz_name: Optional[str] = None) -> datetime | None:
    """
    Convert any datetime to the local timezone (settings.DEFAULT_TIMEZONE).
    Naive datetimes are assumed UTC.
    """
    if dt is None:
        return None
    return to_utc_aware(dt).astimezone(get_zoneinfo(tz_name))
