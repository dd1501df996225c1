"""
In-memory shape of a registration while the transition works on it.

The transition mutates a ``Registration`` in place: it assigns the patient id,
adds the computed dates, the reminder schedule, immediate outbound messages
and error annotations. Persisting it is the caller's job.
"""
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ScheduledMessage:
    due: datetime
    message: str
    phone: Optional[str]
    type: str
    group: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["due"] = self.due.isoformat()
        return data


@dataclass
class OutboundMessage:
    to: Optional[str]
    message: str
    state: str = "pending"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Registration:
    reported_date: datetime
    serial_number: Optional[str] = None
    last_menstrual_period: Any = None
    clinic_id: Optional[str] = None
    clinic_name: Optional[str] = None
    contact_name: Optional[str] = None
    from_phone: Optional[str] = None
    record_id: Optional[str] = None

    # Filled in by the transition
    patient_id: Optional[str] = None
    lmp_date: Optional[datetime] = None
    expected_date: Optional[datetime] = None
    scheduled_tasks: List[ScheduledMessage] = field(default_factory=list)
    tasks: List[OutboundMessage] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)


def add_message(registration: Registration, message: str, phone: Optional[str] = None) -> OutboundMessage:
    """Queue an immediate message, by default to the reporting phone."""
    outbound = OutboundMessage(to=phone or registration.from_phone, message=message)
    registration.tasks.append(outbound)
    return outbound


def add_error(registration: Registration, code: str, message: str) -> None:
    registration.errors.append({"code": code, "message": message})


def add_scheduled_message(registration: Registration, scheduled: ScheduledMessage) -> None:
    registration.scheduled_tasks.append(scheduled)


def sort_scheduled_messages(registration: Registration) -> None:
    # list.sort is stable, so ties keep their insertion order
    registration.scheduled_tasks.sort(key=lambda m: m.due)


def find_scheduled_message(registration: Registration, message_type: str) -> Optional[ScheduledMessage]:
    for scheduled in registration.scheduled_tasks:
        if scheduled.type == message_type:
            return scheduled
    return None
