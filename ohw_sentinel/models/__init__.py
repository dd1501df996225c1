from .registration import RegistrationRecord

__all__ = ["RegistrationRecord"]
