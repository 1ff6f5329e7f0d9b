"""Custom exception hierarchy for credit-scoring."""


class CreditScoringError(Exception):
    """Base exception for all credit-scoring errors."""


class ValidationError(CreditScoringError):
    """Raised when an inbound registration event is malformed or out of range."""


class ProcessingError(CreditScoringError):
    """Raised when scoring, policy evaluation or publication fails unexpectedly."""

    def __init__(self, message: str, customer_id: str = "") -> None:
        super().__init__(message)
        self.customer_id = customer_id


class PublicationError(CreditScoringError):
    """Raised when an event cannot be published to the bus."""

    def __init__(self, message: str, topic: str = "") -> None:
        super().__init__(message)
        self.topic = topic


class ConfigurationError(CreditScoringError):
    """Raised when configuration is invalid or missing."""
