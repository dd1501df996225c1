"""
Shared pytest fixtures.

Provides an in-memory SQLite session, a fixed clock, a fake record store and
helpers to build rule sets.
"""
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure test environment before the settings object is created
os.environ["OHW_ENVIRONMENT"] = "test"
os.environ["OHW_SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["OHW_DEFAULT_TIMEZONE"] = "UTC"

from ohw_sentinel.core.clock import FixedClock  # noqa: E402
from ohw_sentinel.db.base import Base  # noqa: E402
from ohw_sentinel import models  # noqa: E402,F401
from ohw_sentinel.registrations.errors import StoreUnavailableError  # noqa: E402
from ohw_sentinel.registrations.records import Registration  # noqa: E402
from ohw_sentinel.registrations.renderer import MessageRenderer  # noqa: E402
from ohw_sentinel.registrations.rules import ReminderRuleSet  # noqa: E402


NOW = datetime(2024, 1, 15, tzinfo=timezone.utc)  # a Monday


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def db_session():
    """Session bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


# ============================================================================
# COLLABORATOR FIXTURES
# ============================================================================


class FakeStore:
    """In-memory stand-in for the registration store"""

    def __init__(self, matches: int = 0, existing_ids: Optional[Set[str]] = None, fail: bool = False):
        self.matches = matches
        self.existing_ids = set(existing_ids or ())
        self.fail = fail
        self.count_calls: List[Dict[str, Any]] = []
        self.id_checks: List[str] = []

    def count_registrations(self, serial_number, clinic_id, start, end, exclude_id=None) -> int:
        self.count_calls.append({
            "serial_number": serial_number,
            "clinic_id": clinic_id,
            "start": start,
            "end": end,
            "exclude_id": exclude_id,
        })
        if self.fail:
            raise StoreUnavailableError("store is down")
        return self.matches

    def patient_id_exists(self, patient_id: str) -> bool:
        self.id_checks.append(patient_id)
        if self.fail:
            raise StoreUnavailableError("store is down")
        return patient_id in self.existing_ids


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(NOW, tz_name="UTC")


@pytest.fixture
def renderer() -> MessageRenderer:
    return MessageRenderer()


@pytest.fixture
def make_rule_set():
    def _make(**settings_lists: Any) -> ReminderRuleSet:
        return ReminderRuleSet.from_mapping(settings_lists)
    return _make


@pytest.fixture
def make_registration():
    def _make(**overrides: Any) -> Registration:
        data: Dict[str, Any] = {
            "serial_number": "abc123",
            "last_menstrual_period": "10",
            "reported_date": NOW,
            "clinic_id": "clinic-1",
            "clinic_name": "Mwana Clinic",
            "contact_name": "Sam",
            "from_phone": "+255123456789",
        }
        data.update(overrides)
        return Registration(**data)
    return _make
