"""
Service that runs the OHW registration transition against the database
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from ohw_sentinel.core.clock import ClockSource, SystemClock
from ohw_sentinel.core.config import Settings, settings as default_settings
from ohw_sentinel.models.registration import RegistrationRecord
from ohw_sentinel.utils.timezone import to_utc_aware
from .records import Registration
from .renderer import MessageRenderer
from .repository import RegistrationRepository
from .rules import ReminderRuleSet, get_rule_set
from .schemas import RegistrationCreate
from .transition import OHWRegistrationTransition

logger = logging.getLogger(__name__)


def registration_from_event(data: RegistrationCreate) -> Registration:
    return Registration(
        serial_number=data.serial_number,
        last_menstrual_period=data.last_menstrual_period,
        reported_date=to_utc_aware(data.reported_date),
        clinic_id=data.clinic_id,
        clinic_name=data.clinic_name,
        contact_name=data.contact_name,
        from_phone=data.from_phone,
    )


class RegistrationService:
    """Persists an inbound registration, runs the transition and stores its output"""

    def __init__(
        self,
        db: Session,
        clock: Optional[ClockSource] = None,
        rule_set: Optional[ReminderRuleSet] = None,
        renderer: Optional[MessageRenderer] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.settings = settings or default_settings
        self.repository = RegistrationRepository(db)
        self.transition = OHWRegistrationTransition(
            store=self.repository,
            clock=clock or SystemClock(self.settings.DEFAULT_TIMEZONE),
            renderer=renderer or MessageRenderer(self.settings.TRANSLATIONS, locale=self.settings.LOCALE),
            # Raises ConfigurationError when a configured rule is malformed
            rule_set=rule_set or get_rule_set(),
            week_start=self.settings.WEEK_START,
            serial_window_months=self.settings.SERIAL_NUMBER_WINDOW_MONTHS,
            id_max_attempts=self.settings.ID_MAX_ATTEMPTS,
        )

    def register(self, data: RegistrationCreate) -> RegistrationRecord:
        registration = registration_from_event(data)
        record = self.repository.create(registration)
        try:
            registered = self.transition.run(registration)
        except Exception:
            logger.exception(f"Registration {record.id} failed; left in status 'received'")
            raise
        return self.repository.save_result(record, registration, registered)

    def get(self, record_id: str) -> Optional[RegistrationRecord]:
        return self.repository.get(record_id)
