"""Credit score, ranking and limit computation.

Every method is a pure function of its arguments, so one engine can be
shared by any number of consumer workers.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal

from credit_scoring.models.enums import HistoryCategory

_CURRENCY = Decimal("0.01")
_DOCUMENT_SEPARATORS = re.compile(r"[.\-]")
_ELEVEN_DIGITS = re.compile(r"[0-9]{11}")


class ScoringEngine:
    """Compute a 0-1000 credit score and the values derived from it."""

    MIN_SCORE = 0
    MAX_SCORE = 1000

    HISTORY_POINTS = {
        HistoryCategory.GOOD: 400,
        HistoryCategory.REGULAR: 200,
        HistoryCategory.BAD: 0,
    }

    # (minimum monthly income, points), highest tier first
    INCOME_TIERS = [
        (Decimal("10000"), 300),
        (Decimal("5000"), 225),
        (Decimal("2000"), 150),
        (Decimal("1000"), 75),
    ]

    DOCUMENT_POINTS = 100

    # (inclusive upper score bound, ranking)
    RANKING_BOUNDS = [(200, 1), (400, 2), (600, 3), (800, 4)]
    TOP_RANKING = 5

    # Multiples of monthly income
    LIMIT_MULTIPLIERS = {
        HistoryCategory.GOOD: Decimal("5"),
        HistoryCategory.REGULAR: Decimal("2"),
        HistoryCategory.BAD: Decimal("1"),
    }
    EXCELLENT_SCORE = 800
    EXCELLENT_MULTIPLIER = Decimal("10")
    MIN_LIMIT = Decimal("500")
    MAX_LIMIT = Decimal("100000")

    MAX_CARDS = {1: 1, 2: 2, 3: 2, 4: 3, 5: 5}

    def compute_score(
        self,
        income: Decimal,
        history_category: HistoryCategory | str,
        age: int,
        birth_date: date | None,
        national_id: str,
    ) -> int:
        """Sum the four sub-scores and clamp to [0, 1000].

        ``birth_date`` is accepted for parity with the registration event;
        the age band uses ``age`` directly.
        """
        score = (
            self.history_points(history_category)
            + self.income_points(income)
            + self.age_points(age)
            + self.document_points(national_id)
        )
        return min(max(score, self.MIN_SCORE), self.MAX_SCORE)

    def history_points(self, history_category: HistoryCategory | str) -> int:
        category = HistoryCategory.parse(history_category)
        return self.HISTORY_POINTS.get(category, 0) if category else 0

    def income_points(self, income: Decimal) -> int:
        income = Decimal(income)
        for threshold, points in self.INCOME_TIERS:
            if income >= threshold:
                return points
        return 0

    def age_points(self, age: int) -> int:
        if 25 <= age <= 45:
            return 200
        if 22 <= age < 25 or 45 < age <= 55:
            return 150
        if 18 <= age < 22 or 55 < age <= 65:
            return 100
        return 50

    def document_points(self, national_id: str | None) -> int:
        """Award points when the national ID looks like an 11-digit CPF.

        Only the format is checked, not the CPF check digits.
        """
        if not national_id or not national_id.strip():
            return 0
        digits = _DOCUMENT_SEPARATORS.sub("", national_id)
        return self.DOCUMENT_POINTS if _ELEVEN_DIGITS.fullmatch(digits) else 0

    def compute_ranking(self, score: int) -> int:
        """Bucket a score into rankings 1-5, upper bounds inclusive."""
        for upper, ranking in self.RANKING_BOUNDS:
            if score <= upper:
                return ranking
        return self.TOP_RANKING

    def compute_credit_limit(
        self,
        score: int,
        income: Decimal,
        history_category: HistoryCategory | str,
    ) -> Decimal:
        """Derive the per-card limit as a multiple of monthly income.

        Scores of 800 or more get the excellent multiplier whatever the
        history. The result is clamped to [500, 100000].
        """
        category = HistoryCategory.parse(history_category)
        multiplier = self.LIMIT_MULTIPLIERS.get(category, Decimal("0")) if category else Decimal("0")
        if score >= self.EXCELLENT_SCORE:
            multiplier = self.EXCELLENT_MULTIPLIER

        # Income capped first so the product stays inside the decimal context
        limit = min(Decimal(income), self.MAX_LIMIT) * multiplier
        limit = min(max(limit, self.MIN_LIMIT), self.MAX_LIMIT)
        return limit.quantize(_CURRENCY)

    def compute_max_cards(self, ranking: int) -> int:
        return self.MAX_CARDS.get(ranking, 0)
