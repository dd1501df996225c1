"""Errors raised while processing an OHW registration."""
from typing import Optional


class RegistrationError(Exception):
    """Base class for registration processing errors"""
    pass


class RegistrationRejected(RegistrationError):
    """The report cannot be registered; the reporter is told why.

    Rejections are final for the inbound event: it is handled, not retried.
    """

    code = "registration_rejected"

    def __init__(self, message: str, reporter_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reporter_message = reporter_message


class LMPValidationError(RegistrationRejected):
    code = "invalid_lmp"


class MissingSerialNumberError(RegistrationRejected):
    code = "missing_serial_number"


class DuplicateRegistrationError(RegistrationRejected):
    code = "duplicate_serial_number"


class StoreUnavailableError(RegistrationError):
    """The record store could not be queried"""
    pass


class ConfigurationError(RegistrationError):
    """A reminder rule in configuration is malformed"""
    pass


class IdAllocationError(RegistrationError):
    """No free patient id was found within the attempt limit"""
    pass


class RenderError(RegistrationError):
    """A message template could not be rendered"""
    pass
