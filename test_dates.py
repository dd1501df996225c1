"""
Tests for the pregnancy timeline date helpers
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from ohw_sentinel.utils.dates import (
    TimeUnit,
    add_offset,
    compute_timeline,
    start_of_week,
    weeks_until,
)

UTC = timezone.utc


def test_start_of_week_defaults_to_monday():
    # Thursday afternoon
    dt = datetime(2024, 1, 18, 15, 30, tzinfo=UTC)
    assert start_of_week(dt) == datetime(2024, 1, 15, tzinfo=UTC)


def test_start_of_week_on_week_start_day_is_midnight_same_day():
    dt = datetime(2024, 1, 15, 23, 59, tzinfo=UTC)
    assert start_of_week(dt) == datetime(2024, 1, 15, tzinfo=UTC)


def test_start_of_week_sunday_convention():
    dt = datetime(2024, 1, 18, tzinfo=UTC)
    assert start_of_week(dt, week_start=6) == datetime(2024, 1, 14, tzinfo=UTC)


def test_timeline_example():
    timeline = compute_timeline(datetime(2024, 1, 15, 9, 0, tzinfo=UTC), 10)
    assert timeline.lmp_date == datetime(2023, 11, 6, tzinfo=UTC)
    assert timeline.expected_date == datetime(2024, 8, 12, tzinfo=UTC)


@pytest.mark.parametrize("weeks", [0, 1, 10, 25, 39, 42])
@pytest.mark.parametrize("tz_name", ["UTC", "Africa/Nairobi", "America/New_York"])
def test_expected_date_is_always_280_days_after_lmp(weeks, tz_name):
    tz = ZoneInfo(tz_name)
    start = datetime(2023, 1, 1, 10, 0, tzinfo=tz)
    for day in range(0, 365, 11):
        timeline = compute_timeline(start + timedelta(days=day), weeks)
        assert timeline.expected_date.date() - timeline.lmp_date.date() == timedelta(days=280)
        assert timeline.lmp_date.weekday() == 0
        assert (timeline.lmp_date.hour, timeline.lmp_date.minute) == (0, 0)


def test_add_offset_weeks_keeps_local_wall_clock_across_dst():
    tz = ZoneInfo("America/New_York")
    # DST starts 2024-03-10
    lmp = datetime(2024, 3, 4, tzinfo=tz)
    due = add_offset(lmp, 1, TimeUnit.WEEKS)
    assert due == datetime(2024, 3, 11, tzinfo=tz)
    assert due.hour == 0


def test_add_offset_days():
    lmp = datetime(2024, 1, 1, tzinfo=UTC)
    assert add_offset(lmp, 39, TimeUnit.DAYS) == datetime(2024, 2, 9, tzinfo=UTC)


def test_weeks_until_rounds_half_up():
    now = datetime(2024, 1, 15, tzinfo=UTC)
    assert weeks_until(now, now + timedelta(weeks=3)) == 3
    assert weeks_until(now, now + timedelta(days=24)) == 3   # 3.43 weeks
    assert weeks_until(now, now + timedelta(days=17, hours=12)) == 3   # exactly 2.5 weeks
    assert weeks_until(now, now + timedelta(days=17)) == 2
