"""Credit card eligibility rules."""

from __future__ import annotations

from credit_scoring.models.enums import HistoryCategory


class EligibilityPolicy:
    """Decide card eligibility and explain the decision."""

    MIN_SCORE = 600
    MIN_RANKING = 3

    APPROVAL_REASONS = {
        5: "Excellent credit rating",
        4: "Good credit rating",
        3: "Adequate credit rating",
    }
    GENERIC_APPROVAL = "Customer approved for credit card"
    BAD_HISTORY_REASON = "Inadequate credit history"
    GENERIC_DENIAL = "Not eligible for credit card"

    def is_eligible(self, score: int, ranking: int) -> bool:
        return score >= self.MIN_SCORE and ranking >= self.MIN_RANKING

    def determine_reason(
        self,
        eligible: bool,
        score: int,
        ranking: int,
        history_category: HistoryCategory | str,
    ) -> str:
        """Explain the decision.

        Denials report the first failing check in this order: score,
        ranking, bad history, then a generic denial.
        """
        if not eligible:
            if score < self.MIN_SCORE:
                return f"Insufficient score ({score}/1000)"
            if ranking < self.MIN_RANKING:
                return f"Insufficient ranking ({ranking}/5)"
            if HistoryCategory.parse(history_category) is HistoryCategory.BAD:
                return self.BAD_HISTORY_REASON
            return self.GENERIC_DENIAL

        return self.APPROVAL_REASONS.get(ranking, self.GENERIC_APPROVAL)
