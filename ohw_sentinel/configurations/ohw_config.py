# OHW registration message templates.
# Templates use {{name}} placeholders and double as i18n keys: a translation
# catalog maps this exact source text to the localized text.

ANC_VISIT_MESSAGE = (
    "Greetings, {{contact_name}}. {{serial_number}} is due for an ANC visit this week."
)

MISO_REMINDER_MESSAGE = (
    "Greetings, {{contact_name}}. It's now {{serial_number}}'s 8th month of pregnancy."
    " If you haven't given Miso, please distribute. Make birth plan now. Thank you!"
)

UPCOMING_DELIVERY_MESSAGE = (
    "Greetings, {{contact_name}}. {{serial_number}} is due to deliver soon."
)

OUTCOME_REQUEST_MESSAGE = (
    "Greetings, {{contact_name}}. Please submit the birth report for {{serial_number}}."
)

ACKNOWLEDGEMENT_WITH_VISIT_MESSAGE = (
    "Thank you {{contact_name}} for registering {{serial_number}}."
    " Patient ID is {{patient_id}}. ANC visit is needed in {{weeks}} weeks."
)

ACKNOWLEDGEMENT_MESSAGE = (
    "Thank you for registering {{serial_number}}. Patient ID is {{patient_id}}."
)

DUPLICATE_ERROR_MESSAGE = (
    "Duplicate record found; {{serial_number}} already registered within {{months}} months."
)

DUPLICATE_REPORTER_MESSAGE = (
    "{{serial_number}} is already registered. Please enter a new serial number"
    " and submit registration form again."
)

MISSING_SERIAL_REPORTER_MESSAGE = (
    "Serial number is missing. Please enter a serial number and submit registration form again."
)

INVALID_LMP_REPORTER_MESSAGE = (
    "Could not read the weeks since last menstrual period for {{serial_number}}."
    " Please correct it and submit registration form again."
)


__all__ = [
    "ANC_VISIT_MESSAGE",
    "MISO_REMINDER_MESSAGE",
    "UPCOMING_DELIVERY_MESSAGE",
    "OUTCOME_REQUEST_MESSAGE",
    "ACKNOWLEDGEMENT_WITH_VISIT_MESSAGE",
    "ACKNOWLEDGEMENT_MESSAGE",
    "DUPLICATE_ERROR_MESSAGE",
    "DUPLICATE_REPORTER_MESSAGE",
    "MISSING_SERIAL_REPORTER_MESSAGE",
    "INVALID_LMP_REPORTER_MESSAGE",
]
