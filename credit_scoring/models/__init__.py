"""Domain models for credit analysis."""

from credit_scoring.models.enums import HistoryCategory, Outcome
from credit_scoring.models.events import (
    CustomerRegisteredEvent,
    ScoringCompleteEvent,
    ScoringFailedEvent,
    ScoringResult,
)

__all__ = [
    "CustomerRegisteredEvent",
    "HistoryCategory",
    "Outcome",
    "ScoringCompleteEvent",
    "ScoringFailedEvent",
    "ScoringResult",
]
