"""
Clock sources for the registration transition.

The transition never calls ``datetime.now`` directly; it asks its clock, so
tests can pin "now" to a fixed instant.
"""
from datetime import datetime
from typing import Optional, Protocol

from ohw_sentinel.utils.timezone import now_local, to_local


class ClockSource(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in the configured default timezone."""

    def __init__(self, tz_name: Optional[str] = None):
        self.tz_name = tz_name

    def now(self) -> datetime:
        return now_local(self.tz_name)


class FixedClock:
    """Clock pinned to a single instant."""

    def __init__(self, instant: datetime, tz_name: Optional[str] = None):
        self._instant = to_local(instant, tz_name)

    def now(self) -> datetime:
        return self._instant
