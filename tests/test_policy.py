"""Tests for the eligibility policy."""

import pytest

from credit_scoring.models import HistoryCategory
from credit_scoring.scoring import EligibilityPolicy


@pytest.fixture
def policy() -> EligibilityPolicy:
    return EligibilityPolicy()


class TestIsEligible:
    """Both thresholds are hard gates."""

    @pytest.mark.parametrize(
        "score,ranking,expected",
        [
            (600, 3, True),
            (1000, 5, True),
            (599, 5, False),
            (900, 2, False),
            (600, 2, False),
            (0, 1, False),
        ],
    )
    def test_gates(self, policy: EligibilityPolicy, score: int, ranking: int, expected: bool) -> None:
        assert policy.is_eligible(score, ranking) is expected


class TestDetermineReason:
    """Tests for decision reasons and their priority order."""

    def test_score_reported_before_ranking_and_history(self, policy: EligibilityPolicy) -> None:
        """All three conditions fail: the score deficiency wins."""
        reason = policy.determine_reason(False, 150, 1, HistoryCategory.BAD)
        assert reason == "Insufficient score (150/1000)"

    def test_ranking_reported_before_history(self, policy: EligibilityPolicy) -> None:
        """Score passes, ranking and history fail: ranking wins."""
        reason = policy.determine_reason(False, 650, 2, "BAD")
        assert reason == "Insufficient ranking (2/5)"

    def test_bad_history_reported(self, policy: EligibilityPolicy) -> None:
        reason = policy.determine_reason(False, 700, 4, "BAD")
        assert reason == "Inadequate credit history"

    def test_generic_denial(self, policy: EligibilityPolicy) -> None:
        reason = policy.determine_reason(False, 700, 4, "GOOD")
        assert reason == "Not eligible for credit card"

    @pytest.mark.parametrize(
        "ranking,expected",
        [
            (5, "Excellent credit rating"),
            (4, "Good credit rating"),
            (3, "Adequate credit rating"),
            (2, "Customer approved for credit card"),
        ],
    )
    def test_approval_messages(self, policy: EligibilityPolicy, ranking: int, expected: str) -> None:
        assert policy.determine_reason(True, 900, ranking, "GOOD") == expected

    def test_approval_ignores_bad_history(self, policy: EligibilityPolicy) -> None:
        assert policy.determine_reason(True, 700, 4, "BAD") == "Good credit rating"
