"""
Reminder schedule generation for a registered pregnancy.

Every configured rule is turned into a due date relative to the LMP date.
Rules that fall before "now" are dropped; the rest are rendered and added to
the registration's schedule, which is then sorted by due date.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List

from ohw_sentinel.utils.dates import add_offset
from .errors import RenderError
from .metrics import reminders_past_due_total, reminders_render_failed_total, reminders_scheduled_total
from .records import Registration, ScheduledMessage, add_scheduled_message, sort_scheduled_messages
from .renderer import MessageRenderer
from .rules import ReminderRuleSet

logger = logging.getLogger(__name__)


def message_context(registration: Registration) -> Dict[str, Any]:
    """Substitution values every reminder template may use"""
    return {
        "contact_name": registration.contact_name or "",
        "clinic_name": registration.clinic_name or "",
        "serial_number": registration.serial_number or "",
        "patient_id": registration.patient_id or "",
    }


class ReminderScheduler:
    def __init__(self, rule_set: ReminderRuleSet, renderer: MessageRenderer):
        self.rule_set = rule_set
        self.renderer = renderer

    def schedule(self, registration: Registration, lmp_date: datetime, now: datetime) -> List[ScheduledMessage]:
        """Add the reminders for ``registration`` and return the ones added.

        The full ``registration.scheduled_tasks`` list is left sorted by due date.
        """
        context = message_context(registration)
        added: List[ScheduledMessage] = []

        for category, rule in self.rule_set:
            due = add_offset(lmp_date, rule.offset, rule.unit)
            if due < now:
                reminders_past_due_total.inc()
                continue

            try:
                text = self.renderer.render(rule.message, context)
            except RenderError as e:
                reminders_render_failed_total.inc()
                logger.warning(
                    f"Skipping {category.name} reminder due {due.isoformat()} "
                    f"for serial {registration.serial_number}: {e}"
                )
                continue

            scheduled = ScheduledMessage(
                due=due,
                message=text,
                phone=registration.from_phone,
                type=rule.type.value,
                group=rule.group,
            )
            add_scheduled_message(registration, scheduled)
            added.append(scheduled)

        sort_scheduled_messages(registration)
        reminders_scheduled_total.inc(len(added))
        logger.info(
            f"Scheduled {len(added)} of {len(self.rule_set)} reminders for serial {registration.serial_number}"
        )
        added.sort(key=lambda m: m.due)
        return added
