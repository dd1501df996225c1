"""
Patient id generation.

Ids are derived from the serial number so that the first attempt for a serial
is always the same id. A collision moves on to the next attempt number.
"""
import hashlib
import logging
from typing import Protocol

from .errors import IdAllocationError
from .metrics import patient_id_collisions_total

logger = logging.getLogger(__name__)

ID_DIGITS = 5


class PatientIdStore(Protocol):
    def patient_id_exists(self, patient_id: str) -> bool:
        ...


def luhn_check_digit(digits: str) -> str:
    total = 0
    # Double every second digit starting from the rightmost payload digit
    for index, char in enumerate(reversed(digits)):
        value = int(char)
        if index % 2 == 0:
            value *= 2
            if value > 9:
                value -= 9
        total += value
    return str((10 - total % 10) % 10)


def generate_patient_id(serial_number: str, attempt: int = 0) -> str:
    """Candidate id for ``serial_number``: ID_DIGITS digits plus a Luhn check digit."""
    digest = hashlib.sha1(f"{serial_number}:{attempt}".encode("utf-8")).hexdigest()
    payload = str(int(digest, 16) % 10 ** ID_DIGITS).zfill(ID_DIGITS)
    return payload + luhn_check_digit(payload)


class IdAllocator:
    def __init__(self, store: PatientIdStore, max_attempts: int = 100):
        self.store = store
        self.max_attempts = max_attempts

    def allocate(self, serial_number: str) -> str:
        """Return the first candidate id the store does not know yet.

        Store errors propagate unchanged.
        """
        for attempt in range(self.max_attempts):
            candidate = generate_patient_id(serial_number, attempt)
            if not self.store.patient_id_exists(candidate):
                return candidate
            patient_id_collisions_total.inc()
            logger.info(f"Patient id {candidate} already taken (serial={serial_number}, attempt={attempt})")
        raise IdAllocationError(
            f"No free patient id for serial number {serial_number!r} after {self.max_attempts} attempts"
        )
