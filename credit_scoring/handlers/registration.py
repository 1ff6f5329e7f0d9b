"""Credit analysis for newly registered customers.

The handler consumes "customer registered" events and always tries to
leave exactly one outcome on the bus:

* valid input, scoring succeeds  -> ``ScoringCompleteEvent``
* invalid input                  -> ``ScoringFailedEvent``; message consumed
* unexpected error               -> ``ScoringFailedEvent``; ``ProcessingError``
                                    raised so the transport redelivers
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from credit_scoring.bus.base import EventBus
from credit_scoring.config import TopicConfig
from credit_scoring.exceptions import ProcessingError, ValidationError
from credit_scoring.models import (
    CustomerRegisteredEvent,
    HistoryCategory,
    Outcome,
    ScoringCompleteEvent,
    ScoringFailedEvent,
    ScoringResult,
)
from credit_scoring.scoring import EligibilityPolicy, ScoringEngine

logger = logging.getLogger(__name__)

MIN_AGE = 18
MAX_AGE = 120
INTERNAL_ERROR_REASON = "Internal error while processing credit analysis"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_registration(event: CustomerRegisteredEvent) -> None:
    """Check an inbound registration against the scoring preconditions.

    Raises
    ------
    ValidationError
        On the first violated rule.
    """
    if not event.customer_id:
        raise ValidationError("customerId must not be empty")
    if not event.name.strip():
        raise ValidationError("name must not be empty")
    if not event.national_id.strip():
        raise ValidationError("nationalId must not be empty")
    if event.income <= 0:
        raise ValidationError("income must be positive")
    if event.age < MIN_AGE or event.age > MAX_AGE:
        raise ValidationError(f"age must be between {MIN_AGE} and {MAX_AGE}, got {event.age}")
    if not event.history_category.strip():
        raise ValidationError("historyCategory must not be empty")
    if HistoryCategory.parse(event.history_category) is None:
        allowed = ", ".join(c.value for c in HistoryCategory)
        raise ValidationError(f"historyCategory must be one of {allowed}")


class RegistrationEventHandler:
    """Score registered customers and publish the outcome.

    Parameters
    ----------
    bus : EventBus
        Transport used to publish outcome events.
    topics : TopicConfig | None
        Topic names; defaults to the standard ones.
    engine : ScoringEngine | None
        Score computation.
    policy : EligibilityPolicy | None
        Eligibility rules.
    clock : Callable[[], datetime] | None
        Source of analysis/attempt timestamps (UTC by default).
    """

    def __init__(
        self,
        bus: EventBus,
        topics: TopicConfig | None = None,
        engine: ScoringEngine | None = None,
        policy: EligibilityPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.bus = bus
        self.topics = topics or TopicConfig()
        self.engine = engine or ScoringEngine()
        self.policy = policy or EligibilityPolicy()
        self.clock = clock or _utcnow

    def __call__(self, payload: dict[str, Any] | CustomerRegisteredEvent) -> Outcome:
        return self.handle(payload)

    def handle(self, payload: dict[str, Any] | CustomerRegisteredEvent) -> Outcome:
        """Process one registration event.

        Returns
        -------
        Outcome
            ``SCORED`` or ``FAILED`` (validation). Either way the inbound
            message may be acknowledged.

        Raises
        ------
        ProcessingError
            On any unexpected error, after a failure event was attempted.
        """
        customer_id = self._customer_id(payload)

        try:
            event = (
                payload
                if isinstance(payload, CustomerRegisteredEvent)
                else CustomerRegisteredEvent.from_payload(payload)
            )
            logger.info("Starting credit analysis for customer %s", customer_id)
            validate_registration(event)
        except ValidationError as exc:
            logger.warning("Validation failed for customer %s: %s", customer_id, exc)
            self._publish_failure(customer_id, str(exc))
            return Outcome.FAILED

        try:
            result = self.score(event)
            complete = ScoringCompleteEvent.from_result(customer_id, result, self.clock())
            self.bus.publish(self.topics.complete, complete)
        except Exception as exc:
            logger.exception("Error processing credit analysis for customer %s", customer_id)
            self._publish_failure(customer_id, INTERNAL_ERROR_REASON)
            raise ProcessingError(
                f"Credit analysis failed for customer {customer_id}: {exc}",
                customer_id=customer_id,
            ) from exc

        logger.info("Published scoring result for customer %s", customer_id)
        return Outcome.SCORED

    def score(self, event: CustomerRegisteredEvent) -> ScoringResult:
        """Run score -> ranking -> eligibility -> limit -> max cards -> reason."""
        score = self.engine.compute_score(
            income=event.income,
            history_category=event.history_category,
            age=event.age,
            birth_date=event.birth_date,
            national_id=event.national_id,
        )
        logger.info("Score computed for customer %s: %d", event.customer_id, score)

        ranking = self.engine.compute_ranking(score)
        eligible = self.policy.is_eligible(score, ranking)
        credit_limit = self.engine.compute_credit_limit(score, event.income, event.history_category)
        max_cards = self.engine.compute_max_cards(ranking)
        reason = self.policy.determine_reason(eligible, score, ranking, event.history_category)

        logger.info(
            "Analysis complete for customer %s: eligible=%s, ranking=%d",
            event.customer_id,
            eligible,
            ranking,
        )
        return ScoringResult(
            score=score,
            ranking=ranking,
            eligible=eligible,
            reason=reason,
            credit_limit=credit_limit,
            max_cards=max_cards,
        )

    def _publish_failure(self, customer_id: str, reason: str) -> None:
        """Publish a failure event; errors are logged, never raised."""
        try:
            now = self.clock()
            failed = ScoringFailedEvent(
                customer_id=customer_id,
                reason=reason,
                attempt_date=now,
                created_at=now,
                retryable=True,
            )
            self.bus.publish(self.topics.failed, failed)
            logger.info("Published scoring failure for customer %s", customer_id)
        except Exception:
            logger.exception("Error publishing failure event for customer %s", customer_id)

    @staticmethod
    def _customer_id(payload: dict[str, Any] | CustomerRegisteredEvent) -> str:
        if isinstance(payload, CustomerRegisteredEvent):
            return payload.customer_id
        if isinstance(payload, dict):
            value = payload.get("customerId")
            return "" if value is None else str(value).strip()
        return ""
