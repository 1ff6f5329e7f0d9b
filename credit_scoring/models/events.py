"""Integration events exchanged with the customer service."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from credit_scoring.bus.serialization import serialize_value
from credit_scoring.exceptions import ValidationError

EVENT_VERSION = 1


def _new_event_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an ISO 8601 timestamp")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"{field_name} is not a valid timestamp: {value!r}") from exc


def _parse_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    return amount


def _parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be an integer, got {value!r}")


def _parse_date(value: Any, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            if len(value) > 10:
                return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"{field_name} is not a valid date: {value!r}") from exc
    raise ValidationError(f"{field_name} must be an ISO 8601 date")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_created_at(payload: dict[str, Any]) -> datetime:
    value = payload.get("createdAt")
    return _utcnow() if value is None else _parse_datetime(value, "createdAt")


@dataclass(frozen=True)
class CustomerRegisteredEvent:
    """Customer registration published by the customer service.

    Range checks live in the registration handler; this class only
    coerces wire values into Python types.
    """

    customer_id: str
    name: str
    national_id: str
    email: str
    income: Decimal
    age: int
    history_category: str
    birth_date: date | None = None
    event_id: str = field(default_factory=_new_event_id)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CustomerRegisteredEvent":
        """Build an event from its camelCase wire representation.

        Raises
        ------
        ValidationError
            If a field has the wrong type.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Registration event must be a JSON object")
        return cls(
            customer_id=_text(payload.get("customerId")).strip(),
            name=_text(payload.get("name")),
            national_id=_text(payload.get("nationalId")),
            email=_text(payload.get("email")),
            income=_parse_decimal(payload.get("income"), "income"),
            age=_parse_int(payload.get("age"), "age"),
            history_category=_text(payload.get("historyCategory")),
            birth_date=_parse_date(payload.get("birthDate"), "birthDate"),
            event_id=_text(payload.get("eventId")) or _new_event_id(),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "customerId": self.customer_id,
            "name": self.name,
            "nationalId": self.national_id,
            "email": self.email,
            "income": serialize_value(self.income),
            "age": self.age,
            "historyCategory": self.history_category,
            "birthDate": serialize_value(self.birth_date),
        }


@dataclass(frozen=True)
class ScoringResult:
    """Outcome of the scoring engine and eligibility policy for one customer."""

    score: int
    ranking: int
    eligible: bool
    reason: str
    credit_limit: Decimal
    max_cards: int


@dataclass(frozen=True)
class ScoringCompleteEvent:
    """Published when a customer's credit analysis finishes."""

    customer_id: str
    score: int
    ranking: int
    eligible: bool
    reason: str
    analysis_date: datetime
    credit_limit: Decimal
    max_cards: int
    created_at: datetime = field(default_factory=_utcnow)
    event_id: str = field(default_factory=_new_event_id)
    version: int = EVENT_VERSION

    @classmethod
    def from_result(
        cls,
        customer_id: str,
        result: ScoringResult,
        analysis_date: datetime,
    ) -> "ScoringCompleteEvent":
        return cls(
            customer_id=customer_id,
            score=result.score,
            ranking=result.ranking,
            eligible=result.eligible,
            reason=result.reason,
            analysis_date=analysis_date,
            credit_limit=result.credit_limit,
            max_cards=result.max_cards,
            created_at=analysis_date,
        )

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ScoringCompleteEvent":
        return cls(
            customer_id=_text(payload.get("customerId")),
            score=_parse_int(payload.get("score"), "score"),
            ranking=_parse_int(payload.get("ranking"), "ranking"),
            eligible=bool(payload.get("eligible")),
            reason=_text(payload.get("reason")),
            analysis_date=_parse_datetime(payload.get("analysisDate"), "analysisDate"),
            credit_limit=_parse_decimal(payload.get("creditLimit"), "creditLimit"),
            max_cards=_parse_int(payload.get("maxCards"), "maxCards"),
            created_at=_parse_created_at(payload),
            event_id=_text(payload.get("eventId")) or _new_event_id(),
            version=_parse_int(payload.get("version", EVENT_VERSION), "version"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "version": self.version,
            "createdAt": serialize_value(self.created_at),
            "customerId": self.customer_id,
            "score": self.score,
            "ranking": self.ranking,
            "eligible": self.eligible,
            "reason": self.reason,
            "analysisDate": serialize_value(self.analysis_date),
            "creditLimit": serialize_value(self.credit_limit),
            "maxCards": self.max_cards,
        }


@dataclass(frozen=True)
class ScoringFailedEvent:
    """Published when a customer's credit analysis could not be completed."""

    customer_id: str
    reason: str
    attempt_date: datetime
    retryable: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    event_id: str = field(default_factory=_new_event_id)
    version: int = EVENT_VERSION

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ScoringFailedEvent":
        return cls(
            customer_id=_text(payload.get("customerId")),
            reason=_text(payload.get("reason")),
            attempt_date=_parse_datetime(payload.get("attemptDate"), "attemptDate"),
            retryable=bool(payload.get("retryable", True)),
            created_at=_parse_created_at(payload),
            event_id=_text(payload.get("eventId")) or _new_event_id(),
            version=_parse_int(payload.get("version", EVENT_VERSION), "version"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "version": self.version,
            "createdAt": serialize_value(self.created_at),
            "customerId": self.customer_id,
            "reason": self.reason,
            "attemptDate": serialize_value(self.attempt_date),
            "retryable": self.retryable,
        }
