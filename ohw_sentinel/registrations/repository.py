from datetime import datetime
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ohw_sentinel.models.registration import (
    STATUS_RECEIVED,
    STATUS_REGISTERED,
    STATUS_REJECTED,
    RegistrationRecord,
)
from ohw_sentinel.utils.timezone import to_utc_aware
from .errors import StoreUnavailableError
from .records import Registration


class RegistrationRepository:
    """SQLAlchemy-backed record store for OHW registrations.

    Every database error is raised as StoreUnavailableError.
    """

    def __init__(self, db: Session):
        self.db = db

    def count_registrations(
        self,
        serial_number: str,
        clinic_id: Optional[str],
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> int:
        """Registered records of ``serial_number`` at ``clinic_id`` reported within [start, end].

        Received and rejected records never count, nor does ``exclude_id``.
        """
        stmt = (
            select(func.count(RegistrationRecord.id))
            .where(RegistrationRecord.serial_number == serial_number)
            .where(RegistrationRecord.clinic_id == clinic_id)
            .where(RegistrationRecord.status == STATUS_REGISTERED)
            .where(RegistrationRecord.reported_date >= to_utc_aware(start))
            .where(RegistrationRecord.reported_date <= to_utc_aware(end))
        )
        if exclude_id is not None:
            stmt = stmt.where(RegistrationRecord.id != exclude_id)
        try:
            return int(self.db.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Serial number lookup failed: {e}") from e

    def patient_id_exists(self, patient_id: str) -> bool:
        stmt = select(RegistrationRecord.id).where(RegistrationRecord.patient_id == patient_id).limit(1)
        try:
            return self.db.execute(stmt).first() is not None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Patient id lookup failed: {e}") from e

    def create(self, registration: Registration) -> RegistrationRecord:
        """Store the inbound registration before the transition runs."""
        record = RegistrationRecord(
            serial_number=registration.serial_number,
            clinic_id=registration.clinic_id,
            clinic_name=registration.clinic_name,
            contact_name=registration.contact_name,
            from_phone=registration.from_phone,
            last_menstrual_period=(
                None if registration.last_menstrual_period is None else str(registration.last_menstrual_period)
            ),
            reported_date=to_utc_aware(registration.reported_date),
            status=STATUS_RECEIVED,
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Failed to store registration: {e}") from e
        registration.record_id = record.id
        return record

    def save_result(self, record: RegistrationRecord, registration: Registration, registered: bool) -> RegistrationRecord:
        """Write the transition output back onto ``record``."""
        record.status = STATUS_REGISTERED if registered else STATUS_REJECTED
        record.patient_id = registration.patient_id
        record.lmp_date = to_utc_aware(registration.lmp_date)
        record.expected_date = to_utc_aware(registration.expected_date)
        record.scheduled_tasks = [m.to_dict() for m in registration.scheduled_tasks]
        record.tasks = [m.to_dict() for m in registration.tasks]
        record.errors = list(registration.errors)
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Failed to save registration result: {e}") from e
        return record

    def get(self, record_id: str) -> Optional[RegistrationRecord]:
        try:
            return self.db.get(RegistrationRecord, record_id)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Registration lookup failed: {e}") from e

    def list_by_serial(self, serial_number: str, clinic_id: Optional[str] = None, limit: int = 100) -> List[RegistrationRecord]:
        stmt = (
            select(RegistrationRecord)
            .where(RegistrationRecord.serial_number == serial_number)
            .order_by(RegistrationRecord.reported_date.desc())
            .limit(limit)
        )
        if clinic_id:
            stmt = stmt.where(RegistrationRecord.clinic_id == clinic_id)
        try:
            return list(self.db.execute(stmt).scalars())
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Registration lookup failed: {e}") from e
