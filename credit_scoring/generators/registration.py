"""Synthetic "customer registered" events for exercising the worker."""

from __future__ import annotations

import random
from dataclasses import replace
from decimal import Decimal
from typing import Iterator

from faker import Faker

from credit_scoring.models import CustomerRegisteredEvent, HistoryCategory


class RegistrationEventGenerator:
    """Generate registration events like the customer service emits.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``pt_BR`` so national IDs are CPFs).
    invalid_rate : float
        Fraction of events that break one validation rule.
    """

    HISTORY_CATEGORIES = list(HistoryCategory)
    HISTORY_WEIGHTS = [0.50, 0.35, 0.15]

    MIN_INCOME = 800
    MAX_INCOME = 40000

    # Each breaks exactly one handler validation rule
    INVALID_KINDS = ["underage", "zero_income", "missing_national_id", "unknown_history"]

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "pt_BR",
        invalid_rate: float = 0.0,
    ) -> None:
        if not 0.0 <= invalid_rate <= 1.0:
            raise ValueError("invalid_rate must be between 0 and 1")
        self.fake = Faker(locale)
        self.invalid_rate = invalid_rate
        self._random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate(self) -> CustomerRegisteredEvent:
        """Generate a single registration event."""
        if self.invalid_rate and self._random.random() < self.invalid_rate:
            return self.generate_invalid(self._random.choice(self.INVALID_KINDS))
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[CustomerRegisteredEvent]:
        """Generate multiple registration events.

        Parameters
        ----------
        count : int
            Number of events to generate.

        Yields
        ------
        CustomerRegisteredEvent
            Generated events.
        """
        for _ in range(count):
            yield self.generate()

    def generate_invalid(self, kind: str) -> CustomerRegisteredEvent:
        """Generate an event that fails validation in the given way."""
        event = self._generate_one()
        overrides: dict = {}
        if kind == "underage":
            overrides = {"age": self._random.randint(10, 17)}
        elif kind == "zero_income":
            overrides = {"income": Decimal("0")}
        elif kind == "missing_national_id":
            overrides = {"national_id": ""}
        elif kind == "unknown_history":
            overrides = {"history_category": "UNKNOWN"}
        else:
            raise ValueError(f"Unknown invalid kind: {kind!r}")
        return replace(event, **overrides)

    def _generate_one(self) -> CustomerRegisteredEvent:
        history = self._random.choices(
            self.HISTORY_CATEGORIES, weights=self.HISTORY_WEIGHTS, k=1
        )[0]

        # Log-normal income, roughly 5,000 median
        income = self._random.lognormvariate(mu=8.5, sigma=0.8)
        income = max(self.MIN_INCOME, min(income, self.MAX_INCOME))

        age = self._random.randint(18, 80)

        return CustomerRegisteredEvent(
            customer_id=self.fake.uuid4(),
            name=self.fake.name(),
            national_id=self.fake.cpf(),
            email=self.fake.email(),
            income=Decimal(str(round(income, 2))),
            age=age,
            history_category=history.value,
            birth_date=self.fake.date_of_birth(minimum_age=age, maximum_age=age),
        )
