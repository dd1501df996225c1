"""
OHW registration transition.

Runs once per inbound pregnancy registration:
validate -> assign patient id -> compute LMP / expected delivery dates ->
schedule reminders -> acknowledge.

Rejections (bad LMP, missing or duplicate serial number) annotate the
registration, queue an explanation to the reporter and return False. Store
and configuration failures raise and are left to the caller.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from dateutil.relativedelta import relativedelta

from ohw_sentinel.configurations.ohw_config import (
    ACKNOWLEDGEMENT_MESSAGE,
    ACKNOWLEDGEMENT_WITH_VISIT_MESSAGE,
    DUPLICATE_ERROR_MESSAGE,
    DUPLICATE_REPORTER_MESSAGE,
    INVALID_LMP_REPORTER_MESSAGE,
    MISSING_SERIAL_REPORTER_MESSAGE,
)
from ohw_sentinel.core.clock import ClockSource
from ohw_sentinel.utils.dates import PregnancyTimeline, compute_timeline, weeks_until
from .errors import (
    DuplicateRegistrationError,
    LMPValidationError,
    MissingSerialNumberError,
    RegistrationRejected,
    RenderError,
)
from .ids import IdAllocator
from .metrics import registrations_received_total, registrations_registered_total, registrations_rejected_total
from .records import Registration, add_error, add_message, find_scheduled_message
from .renderer import MessageRenderer
from .rules import MessageType, ReminderRuleSet
from .scheduler import ReminderScheduler, message_context

logger = logging.getLogger(__name__)

# Longest plausible gap since the last menstrual period
MAX_LMP_WEEKS = 52


class RegistrationStore(Protocol):
    def count_registrations(
        self,
        serial_number: str,
        clinic_id: Optional[str],
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> int:
        ...

    def patient_id_exists(self, patient_id: str) -> bool:
        ...


def parse_lmp_weeks(value: Any) -> int:
    """Weeks since last menstrual period as a whole number in [0, MAX_LMP_WEEKS].

    Raises LMPValidationError for anything else.
    """
    weeks: Any = value
    if isinstance(weeks, bool) or weeks is None:
        raise LMPValidationError(f"Failed to parse LMP: {value!r}")
    if isinstance(weeks, str):
        try:
            weeks = float(weeks.strip())
        except ValueError:
            raise LMPValidationError(f"Failed to parse LMP: {value!r}") from None
    if isinstance(weeks, float):
        if not weeks.is_integer():
            raise LMPValidationError(f"LMP weeks must be a whole number: {value!r}")
        weeks = int(weeks)
    if not isinstance(weeks, int):
        raise LMPValidationError(f"Failed to parse LMP: {value!r}")
    if weeks < 0:
        raise LMPValidationError(f"LMP weeks cannot be negative: {value!r}")
    if weeks > MAX_LMP_WEEKS:
        raise LMPValidationError(f"LMP weeks must be at most {MAX_LMP_WEEKS}: {value!r}")
    return weeks


class OHWRegistrationTransition:
    def __init__(
        self,
        store: RegistrationStore,
        clock: ClockSource,
        renderer: MessageRenderer,
        rule_set: ReminderRuleSet,
        week_start: int = 0,
        serial_window_months: int = 12,
        id_max_attempts: int = 100,
    ):
        self.store = store
        self.clock = clock
        self.renderer = renderer
        self.week_start = week_start
        self.serial_window_months = serial_window_months
        self.ids = IdAllocator(store, max_attempts=id_max_attempts)
        self.scheduler = ReminderScheduler(rule_set, renderer)

    def run(self, registration: Registration) -> bool:
        """Process ``registration`` in place. Returns True once it is scheduled."""
        registrations_received_total.inc()
        try:
            weeks = self.validate(registration)
        except RegistrationRejected as e:
            self._reject(registration, e)
            return False

        registration.patient_id = self.ids.allocate(registration.serial_number)

        now = self.clock.now()
        timeline = self.compute_timeline(now, weeks)
        registration.lmp_date = timeline.lmp_date
        registration.expected_date = timeline.expected_date

        self.scheduler.schedule(registration, timeline.lmp_date, now)
        self.add_acknowledgement(registration, now)

        registrations_registered_total.inc()
        logger.info(
            f"Registered serial {registration.serial_number} as patient {registration.patient_id} "
            f"(lmp={timeline.lmp_date.date()}, expected={timeline.expected_date.date()})"
        )
        return True

    def compute_timeline(self, now: datetime, weeks: int) -> PregnancyTimeline:
        return compute_timeline(now, weeks, self.week_start)

    def validate(self, registration: Registration) -> int:
        try:
            weeks = parse_lmp_weeks(registration.last_menstrual_period)
        except LMPValidationError as e:
            e.reporter_message = self._render(
                INVALID_LMP_REPORTER_MESSAGE, {"serial_number": registration.serial_number or ""}
            )
            raise
        self.check_serial_number(registration)
        return weeks

    def check_serial_number(self, registration: Registration) -> None:
        """A serial number must be unique per clinic within the window."""
        serial_number = (registration.serial_number or "").strip()
        if not serial_number:
            raise MissingSerialNumberError(
                "Serial number missing",
                reporter_message=self._render(MISSING_SERIAL_REPORTER_MESSAGE, {}),
            )

        end = registration.reported_date
        start = end - relativedelta(months=self.serial_window_months)
        matches = self.store.count_registrations(
            serial_number, registration.clinic_id, start, end, exclude_id=registration.record_id
        )
        if matches == 0:
            return

        context = {"serial_number": serial_number, "months": self.serial_window_months}
        raise DuplicateRegistrationError(
            self._render(DUPLICATE_ERROR_MESSAGE, context, translate=False),
            reporter_message=self._render(DUPLICATE_REPORTER_MESSAGE, context),
        )

    def add_acknowledgement(self, registration: Registration, now: datetime) -> None:
        context = message_context(registration)
        visit = find_scheduled_message(registration, MessageType.ANC_VISIT.value)
        if visit:
            context["weeks"] = weeks_until(now, visit.due)
            message = self._render(ACKNOWLEDGEMENT_WITH_VISIT_MESSAGE, context)
        else:
            message = self._render(ACKNOWLEDGEMENT_MESSAGE, context)
        add_message(registration, message)

    def _reject(self, registration: Registration, error: RegistrationRejected) -> None:
        registrations_rejected_total.labels(reason=error.code).inc()
        logger.info(f"Rejected registration serial={registration.serial_number!r}: {error.message}")
        add_error(registration, error.code, error.message)
        if error.reporter_message:
            add_message(registration, error.reporter_message)

    def _render(self, template: str, context: Dict[str, Any], translate: bool = True) -> str:
        try:
            return self.renderer.render(template, context, translate=translate)
        except RenderError as e:
            if not translate:
                raise
            logger.warning(f"Translated message failed to render, using source text: {e}")
            return self.renderer.render(template, context, translate=False)
