import logging
from datetime import datetime, timezone as dt_timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ohw_sentinel.api.deps import verify_api_key_dependency
from ohw_sentinel.db.session import get_db
from .celery_app import celery_app
from .errors import ConfigurationError, IdAllocationError, StoreUnavailableError
from .registration_service import RegistrationService
from .repository import RegistrationRepository
from .schemas import RegistrationCreate, RegistrationQueued, RegistrationRead

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_api_key_dependency)])


def get_registration_service(db: Session = Depends(get_db)) -> RegistrationService:
    try:
        return RegistrationService(db)
    except ConfigurationError as e:
        logger.error(f"Reminder configuration is invalid: {e}")
        raise HTTPException(status_code=500, detail="Reminder configuration is invalid")


@router.get("/health")
def health_check():
    return {"status": "healthy", "service": "registrations"}


@router.post("/", response_model=RegistrationRead)
def create_registration_endpoint(
    payload: RegistrationCreate,
    service: RegistrationService = Depends(get_registration_service),
):
    """Process a registration now. Rejected registrations are returned with their errors."""
    try:
        record = service.register(payload)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except IdAllocationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RegistrationRead.model_validate(record)


@router.post("/enqueue", response_model=RegistrationQueued, status_code=202)
def enqueue_registration_endpoint(payload: RegistrationCreate):
    """Hand the registration to the worker queue."""
    result = celery_app.send_task(
        "registrations.process",
        args=[payload.model_dump(mode="json")],
    )
    return RegistrationQueued(task_id=str(result.id), queued_at=datetime.now(dt_timezone.utc))


@router.get("/", response_model=List[RegistrationRead])
def list_registrations_endpoint(
    serial_number: str,
    clinic_id: Optional[str] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    try:
        records = RegistrationRepository(db).list_by_serial(serial_number, clinic_id=clinic_id, limit=limit)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [RegistrationRead.model_validate(r) for r in records]


@router.get("/{record_id}", response_model=RegistrationRead)
def get_registration_endpoint(record_id: str, db: Session = Depends(get_db)):
    try:
        record = RegistrationRepository(db).get(record_id)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not record:
        raise HTTPException(status_code=404, detail="Registration not found")
    return RegistrationRead.model_validate(record)
