from prometheus_client import Counter


registrations_received_total = Counter(
    "ohw_registrations_received_total",
    "Total registration events received",
)

registrations_registered_total = Counter(
    "ohw_registrations_registered_total",
    "Total registrations that were assigned a patient id and schedule",
)

registrations_rejected_total = Counter(
    "ohw_registrations_rejected_total",
    "Total registrations rejected, by reason",
    ["reason"],
)

reminders_scheduled_total = Counter(
    "ohw_reminders_scheduled_total",
    "Total reminder messages added to a schedule",
)

reminders_past_due_total = Counter(
    "ohw_reminders_past_due_total",
    "Total reminder rules skipped because the due date had already passed",
)

reminders_render_failed_total = Counter(
    "ohw_reminders_render_failed_total",
    "Total reminder messages dropped because the template failed to render",
)

patient_id_collisions_total = Counter(
    "ohw_patient_id_collisions_total",
    "Total candidate patient ids that were already taken",
)
