"""Credit scoring engine and eligibility policy."""

from credit_scoring.scoring.engine import ScoringEngine
from credit_scoring.scoring.policy import EligibilityPolicy

__all__ = ["EligibilityPolicy", "ScoringEngine"]
