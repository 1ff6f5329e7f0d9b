"""Enumeration types for credit analysis."""

from enum import Enum


class HistoryCategory(str, Enum):
    GOOD = "GOOD"
    REGULAR = "REGULAR"
    BAD = "BAD"

    @classmethod
    def parse(cls, value: "HistoryCategory | str | None") -> "HistoryCategory | None":
        """Return the matching category, or None for unknown values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Outcome(str, Enum):
    """Terminal outcome of handling one registration event."""

    SCORED = "SCORED"
    FAILED = "FAILED"
