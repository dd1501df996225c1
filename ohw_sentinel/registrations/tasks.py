from celery import shared_task
from celery.utils.log import get_logger
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ohw_sentinel.db.session import SessionLocal
from .celery_app import celery_app  # noqa: F401  (binds shared tasks to this app)
from .registration_service import RegistrationService
from .schemas import RegistrationCreate

logger = get_logger(__name__)


@shared_task(name="registrations.process")
def process_registration_task(event: dict) -> str | None:
    """Run the OHW registration transition for one inbound event.

    Returns the registration record id, or None when the event is not a
    registration form at all. Store and configuration errors are raised so the
    worker reports them; retry policy belongs to whoever sent the task.
    """
    try:
        data = RegistrationCreate(**event)
    except ValidationError as e:
        logger.warning(f"Dropping malformed registration event: {e}")
        return None

    db: Session = SessionLocal()
    try:
        record = RegistrationService(db).register(data)
        logger.info(f"Registration {record.id} processed with status {record.status}")
        return record.id
    finally:
        db.close()
