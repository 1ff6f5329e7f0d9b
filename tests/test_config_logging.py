"""Tests for config and logging."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from credit_scoring.config import CreditScoringConfig, KafkaConfig, TopicConfig
from credit_scoring.exceptions import ConfigurationError
from credit_scoring.logging import JsonFormatter, setup_logging


@pytest.fixture
def restore_logging():
    """Undo setup_logging changes to the root and package loggers."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    package_level = logging.getLogger("credit_scoring").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("credit_scoring").setLevel(package_level)


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.group_id == "credit-scoring"
        assert config.auto_offset_reset == "earliest"
        assert config.poll_timeout == 1.0

    def test_to_producer_dict(self) -> None:
        result = KafkaConfig(bootstrap_servers="kafka:9092", acks="1", retries=5).to_producer_dict()

        assert result["bootstrap.servers"] == "kafka:9092"
        assert result["acks"] == "1"
        assert result["retries"] == 5

    def test_to_consumer_dict(self) -> None:
        """Offsets are never committed automatically."""
        result = KafkaConfig(group_id="scoring", auto_offset_reset="latest").to_consumer_dict()

        assert result["group.id"] == "scoring"
        assert result["auto.offset.reset"] == "latest"
        assert result["enable.auto.commit"] is False

    def test_invalid_offset_reset(self) -> None:
        with pytest.raises(ConfigurationError):
            KafkaConfig(auto_offset_reset="middle")

    @pytest.mark.parametrize("field", ["poll_timeout", "flush_timeout"])
    def test_non_positive_timeouts(self, field: str) -> None:
        with pytest.raises(ConfigurationError):
            KafkaConfig(**{field: 0})


class TestTopicConfig:
    """Tests for TopicConfig."""

    def test_defaults(self) -> None:
        topics = TopicConfig()

        assert topics.inbound == "customer.registered"
        assert topics.complete == "credit.scoring.complete"
        assert topics.failed == "credit.scoring.failed"

    def test_prefix(self) -> None:
        topics = TopicConfig(prefix="prod")

        assert topics.inbound == "prod.customer.registered"
        assert topics.failed == "prod.credit.scoring.failed"

    def test_topics_must_be_distinct(self) -> None:
        with pytest.raises(ConfigurationError):
            TopicConfig(scoring_complete="same", scoring_failed="same")


class TestCreditScoringConfig:
    """Tests for the aggregate config."""

    def test_defaults(self) -> None:
        config = CreditScoringConfig()

        assert isinstance(config.kafka, KafkaConfig)
        assert isinstance(config.topics, TopicConfig)
        assert config.log_level == "INFO"
        assert config.log_format == "standard"

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ConfigurationError):
            CreditScoringConfig(log_format="xml")

    def test_from_env_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = CreditScoringConfig.from_env()

        assert config.kafka.bootstrap_servers == "localhost:9092"
        assert config.topics.inbound == "customer.registered"
        assert config.log_level == "INFO"

    def test_from_env(self) -> None:
        env = {
            "KAFKA_BOOTSTRAP_SERVERS": "kafka:29092",
            "KAFKA_ACKS": "1",
            "KAFKA_GROUP_ID": "scoring-prod",
            "KAFKA_AUTO_OFFSET_RESET": "latest",
            "KAFKA_POLL_TIMEOUT": "0.5",
            "TOPIC_PREFIX": "prod",
            "TOPIC_CUSTOMER_REGISTERED": "clientes.cadastrado",
            "TOPIC_SCORING_COMPLETE": "credito.analise.completa",
            "TOPIC_SCORING_FAILED": "credito.analise.falha",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
        }
        with patch.dict(os.environ, env, clear=True):
            config = CreditScoringConfig.from_env()

        assert config.kafka.bootstrap_servers == "kafka:29092"
        assert config.kafka.acks == "1"
        assert config.kafka.group_id == "scoring-prod"
        assert config.kafka.auto_offset_reset == "latest"
        assert config.kafka.poll_timeout == 0.5
        assert config.topics.inbound == "prod.clientes.cadastrado"
        assert config.topics.complete == "prod.credito.analise.completa"
        assert config.topics.failed == "prod.credito.analise.falha"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_env_bad_poll_timeout(self) -> None:
        with patch.dict(os.environ, {"KAFKA_POLL_TIMEOUT": "soon"}, clear=True):
            with pytest.raises(ConfigurationError):
                CreditScoringConfig.from_env()


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("credit_scoring").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Unknown level names fall back to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError):
            setup_logging(format_type="xml")

    def test_setup_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root.handlers) == 1

    def test_kafka_logger_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    @staticmethod
    def _record(level: int = logging.INFO, msg: str = "Test message", exc_info=None) -> logging.LogRecord:
        return logging.LogRecord(
            name="credit_scoring.handlers.registration",
            level=level,
            pathname="/path/to/file.py",
            lineno=42,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "credit_scoring.handlers.registration"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(logging.ERROR, "Error", exc_info)))

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_extra(self) -> None:
        record = self._record()
        record.extra = {"customer_id": "cust-001"}

        data = json.loads(JsonFormatter().format(record))

        assert data["customer_id"] == "cust-001"


class TestPackageInit:
    """Tests for credit_scoring __init__.py."""

    def test_version_exported(self) -> None:
        from credit_scoring import __version__

        assert isinstance(__version__, str)
