"""
Calendar helpers for the pregnancy timeline.

All arithmetic happens on timezone-aware datetimes in local wall-clock time
via ``relativedelta``, so adding weeks keeps the local time of day even across
DST transitions.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from dateutil.relativedelta import relativedelta

PREGNANCY_WEEKS = 40
WEEK_SECONDS = 7 * 24 * 60 * 60


class TimeUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"


@dataclass(frozen=True)
class PregnancyTimeline:
    lmp_date: datetime
    expected_date: datetime


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(dt: datetime, week_start: int = 0) -> datetime:
    """Midnight of the first day of the week containing ``dt``.

    ``week_start`` follows ``datetime.weekday()``: 0 is Monday, 6 is Sunday.
    """
    day = start_of_day(dt)
    return day - relativedelta(days=(day.weekday() - week_start) % 7)


def add_offset(dt: datetime, value: int, unit: TimeUnit) -> datetime:
    if unit == TimeUnit.WEEKS:
        return dt + relativedelta(weeks=value)
    return dt + relativedelta(days=value)


def compute_timeline(now: datetime, weeks_since_lmp: int, week_start: int = 0) -> PregnancyTimeline:
    lmp = start_of_week(now, week_start) - relativedelta(weeks=weeks_since_lmp)
    return PregnancyTimeline(
        lmp_date=lmp,
        expected_date=lmp + relativedelta(weeks=PREGNANCY_WEEKS),
    )


def weeks_until(now: datetime, due: datetime) -> int:
    """Whole weeks from ``now`` to ``due``, rounded half up."""
    return math.floor((due - now).total_seconds() / WEEK_SECONDS + 0.5)
