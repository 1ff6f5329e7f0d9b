"""Event handlers for the credit analysis worker."""

from credit_scoring.handlers.registration import RegistrationEventHandler, validate_registration

__all__ = ["RegistrationEventHandler", "validate_registration"]
