"""
Schemas for inbound registration events and registration records
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


RegistrationStatus = Literal["received", "registered", "rejected"]


class RegistrationCreate(BaseModel):
    """An OHW registration form as reported by a health worker"""
    serial_number: Optional[str] = None
    # Weeks since last menstrual period; validated by the transition so that a
    # bad value is answered with an SMS rather than an HTTP 422
    last_menstrual_period: Optional[Union[int, float, str]] = None
    reported_date: datetime
    clinic_id: Optional[str] = None
    clinic_name: Optional[str] = None
    contact_name: Optional[str] = None
    from_phone: Optional[str] = Field(default=None, alias="from")

    model_config = ConfigDict(populate_by_name=True)


class ScheduledMessageRead(BaseModel):
    due: datetime
    message: str
    phone: Optional[str] = None
    type: str
    group: Optional[Any] = None


class OutboundMessageRead(BaseModel):
    to: Optional[str] = None
    message: str
    state: str = "pending"


class RegistrationRead(BaseModel):
    """Schema for reading a registration record"""
    id: str
    serial_number: Optional[str]
    clinic_id: Optional[str]
    from_phone: Optional[str]
    reported_date: datetime
    status: RegistrationStatus
    patient_id: Optional[str] = None
    lmp_date: Optional[datetime] = None
    expected_date: Optional[datetime] = None
    scheduled_tasks: List[ScheduledMessageRead] = Field(default_factory=list)
    tasks: List[OutboundMessageRead] = Field(default_factory=list)
    errors: List[Dict[str, str]] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class RegistrationQueued(BaseModel):
    """Schema returned when a registration is enqueued for processing"""
    task_id: str
    queued_at: datetime
