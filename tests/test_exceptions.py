"""Tests for custom exception hierarchy."""

from credit_scoring.exceptions import (
    ConfigurationError,
    CreditScoringError,
    ProcessingError,
    PublicationError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_credit_scoring_error_is_exception(self) -> None:
        assert isinstance(CreditScoringError("test"), Exception)

    def test_validation_error_is_credit_scoring_error(self) -> None:
        assert isinstance(ValidationError("test"), CreditScoringError)

    def test_processing_error_carries_customer(self) -> None:
        err = ProcessingError("failed", customer_id="cust-001")
        assert isinstance(err, CreditScoringError)
        assert err.customer_id == "cust-001"

    def test_publication_error_carries_topic(self) -> None:
        err = PublicationError("rejected", topic="credit.scoring.failed")
        assert isinstance(err, CreditScoringError)
        assert err.topic == "credit.scoring.failed"

    def test_configuration_error_is_credit_scoring_error(self) -> None:
        assert isinstance(ConfigurationError("test"), CreditScoringError)

    def test_validation_is_not_processing(self) -> None:
        assert not isinstance(ValidationError("test"), ProcessingError)

    def test_exception_message(self) -> None:
        err = ValidationError("age must be between 18 and 120, got 15")
        assert str(err) == "age must be between 18 and 120, got 15"
