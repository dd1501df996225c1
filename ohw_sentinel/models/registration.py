"""
OHW registration records
"""
from sqlalchemy import Column, String, DateTime, Index, JSON
from sqlalchemy.sql import func
import uuid

from ohw_sentinel.db.base import Base

STATUS_RECEIVED = "received"
STATUS_REGISTERED = "registered"
STATUS_REJECTED = "rejected"


class RegistrationRecord(Base):
    """A reported pregnancy registration and the transition output for it"""
    __tablename__ = "ohw_registrations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    serial_number = Column(String, nullable=True)
    clinic_id = Column(String, nullable=True)
    clinic_name = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)
    from_phone = Column(String, nullable=True)
    last_menstrual_period = Column(String, nullable=True)  # Raw value as reported
    reported_date = Column(DateTime(timezone=True), nullable=False)

    # Set by the transition
    status = Column(String, nullable=False, default=STATUS_RECEIVED)  # received, registered, rejected
    patient_id = Column(String, nullable=True, unique=True)
    lmp_date = Column(DateTime(timezone=True), nullable=True)
    expected_date = Column(DateTime(timezone=True), nullable=True)
    scheduled_tasks = Column(JSON, nullable=False, default=list)
    tasks = Column(JSON, nullable=False, default=list)
    errors = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_ohw_registrations_serial_clinic_reported", "serial_number", "clinic_id", "reported_date"),
    )
