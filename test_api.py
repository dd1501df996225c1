"""
Tests for the registrations HTTP API
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import NOW
from ohw_sentinel.core.clock import FixedClock
from ohw_sentinel.core.config import settings
from ohw_sentinel.db.session import get_db
from ohw_sentinel.registrations.api import get_registration_service
from ohw_sentinel.registrations.errors import StoreUnavailableError
from ohw_sentinel.registrations.registration_service import RegistrationService
from ohw_sentinel.registrations.rules import ReminderRuleSet
from ohw_sentinel.registrations.service import create_app

BASE = "/api/v1/registrations"

EVENT = {
    "serial_number": "abc123",
    "last_menstrual_period": 10,
    "reported_date": NOW.isoformat(),
    "clinic_id": "clinic-1",
    "contact_name": "Sam",
    "from": "+255123456789",
}


@pytest.fixture
def app(db_session):
    app = create_app()
    rule_set = ReminderRuleSet.from_mapping({"REMINDER_SCHEDULE_WEEKS": [13, 24]})
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_registration_service] = lambda: RegistrationService(
        db_session, clock=FixedClock(NOW, tz_name="UTC"), rule_set=rule_set
    )
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def test_health(client):
    response = client.get(f"{BASE}/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "registrations"}


def test_create_and_fetch_registration(client):
    response = client.post(f"{BASE}/", json=EVENT)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "registered"
    assert body["patient_id"]
    assert [t["type"] for t in body["scheduled_tasks"]] == ["anc_visit", "anc_visit"]
    assert "ANC visit is needed in 3 weeks." in body["tasks"][0]["message"]

    fetched = client.get(f"{BASE}/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["patient_id"] == body["patient_id"]

    listed = client.get(f"{BASE}/", params={"serial_number": "abc123"})
    assert [r["id"] for r in listed.json()] == [body["id"]]


def test_duplicate_is_returned_as_rejected(client):
    client.post(f"{BASE}/", json=EVENT)
    response = client.post(f"{BASE}/", json=EVENT)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "rejected"
    assert body["patient_id"] is None
    assert body["errors"][0]["code"] == "duplicate_serial_number"


def test_unknown_registration_is_404(client):
    assert client.get(f"{BASE}/does-not-exist").status_code == 404


def test_store_unavailable_is_503(app):
    service = MagicMock()
    service.register.side_effect = StoreUnavailableError("database is down")
    app.dependency_overrides[get_registration_service] = lambda: service
    response = TestClient(app).post(f"{BASE}/", json=EVENT)
    assert response.status_code == 503


def test_enqueue_sends_celery_task(client):
    with patch("ohw_sentinel.registrations.api.celery_app.send_task") as send_task:
        send_task.return_value = MagicMock(id="task-1")
        response = client.post(f"{BASE}/enqueue", json=EVENT)

    assert response.status_code == 202
    assert response.json()["task_id"] == "task-1"
    name = send_task.call_args.args[0]
    payload = send_task.call_args.kwargs["args"][0]
    assert name == "registrations.process"
    assert payload["serial_number"] == "abc123"
    assert payload["from_phone"] == "+255123456789"


def test_api_key_required_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_API_KEY", True)
    monkeypatch.setattr(settings, "VALID_API_KEYS", ["secret"])

    assert client.get(f"{BASE}/health").status_code == 401
    assert client.get(f"{BASE}/health", headers={"X-API-Key": "wrong"}).status_code == 401
    assert client.get(f"{BASE}/health", headers={"X-API-Key": "secret"}).status_code == 200
    assert client.get(f"{BASE}/health", headers={"Authorization": "Bearer secret"}).status_code == 200
