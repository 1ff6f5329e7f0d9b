"""Configuration management for credit-scoring."""

from dataclasses import dataclass, field
from typing import Any

from credit_scoring.exceptions import ConfigurationError

AUTO_OFFSET_RESETS = ("earliest", "latest")
LOG_FORMATS = ("standard", "json")


@dataclass
class KafkaConfig:
    """Kafka producer and consumer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    group_id: str = "credit-scoring"
    auto_offset_reset: str = "earliest"
    linger_ms: int = 0
    retries: int = 3
    poll_timeout: float = 1.0
    flush_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.auto_offset_reset not in AUTO_OFFSET_RESETS:
            raise ConfigurationError(
                f"auto_offset_reset must be one of {AUTO_OFFSET_RESETS}, "
                f"got {self.auto_offset_reset!r}"
            )
        if self.poll_timeout <= 0:
            raise ConfigurationError("poll_timeout must be positive")
        if self.flush_timeout <= 0:
            raise ConfigurationError("flush_timeout must be positive")

    def to_producer_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka producer config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "retries": self.retries,
        }

    def to_consumer_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka consumer config dict.

        Offsets are committed by the bus after each handled message,
        never automatically.
        """
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "group.id": self.group_id,
            "auto.offset.reset": self.auto_offset_reset,
            "enable.auto.commit": False,
        }


@dataclass
class TopicConfig:
    """Topic names for the scoring request/response protocol."""

    customer_registered: str = "customer.registered"
    scoring_complete: str = "credit.scoring.complete"
    scoring_failed: str = "credit.scoring.failed"
    prefix: str = ""

    def __post_init__(self) -> None:
        names = {self.customer_registered, self.scoring_complete, self.scoring_failed}
        if len(names) != 3:
            raise ConfigurationError("Inbound, complete and failed topics must be distinct")

    def qualified(self, name: str) -> str:
        """Return the topic name with the configured prefix applied."""
        return f"{self.prefix}.{name}" if self.prefix else name

    @property
    def inbound(self) -> str:
        return self.qualified(self.customer_registered)

    @property
    def complete(self) -> str:
        return self.qualified(self.scoring_complete)

    @property
    def failed(self) -> str:
        return self.qualified(self.scoring_failed)


@dataclass
class CreditScoringConfig:
    """Main configuration for the credit-scoring worker."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    topics: TopicConfig = field(default_factory=TopicConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}"
            )

    @classmethod
    def from_env(cls) -> "CreditScoringConfig":
        """Create config from environment variables."""
        import os

        try:
            poll_timeout = float(os.getenv("KAFKA_POLL_TIMEOUT", "1.0"))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid KAFKA_POLL_TIMEOUT: {exc}") from exc

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            group_id=os.getenv("KAFKA_GROUP_ID", "credit-scoring"),
            auto_offset_reset=os.getenv("KAFKA_AUTO_OFFSET_RESET", "earliest"),
            poll_timeout=poll_timeout,
        )

        topics = TopicConfig(
            customer_registered=os.getenv("TOPIC_CUSTOMER_REGISTERED", "customer.registered"),
            scoring_complete=os.getenv("TOPIC_SCORING_COMPLETE", "credit.scoring.complete"),
            scoring_failed=os.getenv("TOPIC_SCORING_FAILED", "credit.scoring.failed"),
            prefix=os.getenv("TOPIC_PREFIX", ""),
        )

        return cls(
            kafka=kafka,
            topics=topics,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
