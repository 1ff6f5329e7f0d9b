"""Kafka transport for the scoring request/response protocol."""

import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import Consumer, KafkaError, KafkaException, Producer, TopicPartition

from credit_scoring.bus.base import EventBus, MessageHandler
from credit_scoring.bus.serialization import decode, encode, to_dict
from credit_scoring.config import KafkaConfig
from credit_scoring.exceptions import PublicationError, ValidationError

logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = ("content-type", b"application/json")
KEY_FIELD = "customerId"


@dataclass
class KafkaBusStats:
    """Track producer and consumer statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    consumed: int = 0
    committed: int = 0
    redelivered: int = 0
    skipped: int = 0


class KafkaEventBus(EventBus):
    """Event bus backed by confluent-kafka.

    Publications are flushed before ``publish`` returns so an outcome is
    on the broker before the inbound message is acknowledged. Offsets are
    committed manually: a handled message is committed, a failed one is
    sought back so the next poll redelivers it.
    """

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize the Kafka bus.

        Parameters
        ----------
        config : KafkaConfig | str
            Kafka configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_producer_dict())
        self.consumer: Consumer | None = None
        self.stats = KafkaBusStats()
        self._handlers: dict[str, MessageHandler] = {}
        self._delivery_errors: list[Any] = []

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            self._delivery_errors.append(err)
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def publish(self, topic: str, payload: Any) -> None:
        data = to_dict(payload)
        key = data.get(KEY_FIELD)
        self._delivery_errors.clear()

        try:
            self.producer.produce(
                topic=topic,
                key=str(key).encode("utf-8") if key else None,
                value=encode(data),
                headers=[CONTENT_TYPE_HEADER],
                callback=self._delivery_callback,
            )
            self.stats.sent += 1
            remaining = self.producer.flush(self.config.flush_timeout)
        except (BufferError, KafkaException) as exc:
            raise PublicationError(f"Could not publish to '{topic}': {exc}", topic=topic) from exc

        if remaining:
            raise PublicationError(
                f"Timed out publishing to '{topic}' ({remaining} message(s) pending)",
                topic=topic,
            )
        if self._delivery_errors:
            raise PublicationError(
                f"Broker rejected message for '{topic}': {self._delivery_errors[0]}",
                topic=topic,
            )

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        if topic in self._handlers:
            raise ValueError(f"Topic '{topic}' already has a subscriber")
        self._handlers[topic] = handler
        if self.consumer is None:
            self.consumer = Consumer(self.config.to_consumer_dict())
        self.consumer.subscribe(list(self._handlers))
        logger.info("Subscribed to %s (group=%s)", topic, self.config.group_id)

    def poll(self, timeout: float | None = None) -> bool:
        if self.consumer is None:
            raise RuntimeError("poll() called before subscribe()")

        msg = self.consumer.poll(self.config.poll_timeout if timeout is None else timeout)
        if msg is None:
            return False
        if msg.error():
            if msg.error().code() != KafkaError._PARTITION_EOF:
                logger.error("Consumer error: %s", msg.error())
            return False

        self.stats.consumed += 1
        topic = msg.topic()

        try:
            payload = decode(msg.value())
        except ValidationError:
            # Redelivering an undecodable message can never succeed
            logger.exception(
                "Skipping undecodable message on %s[%d]@%d",
                topic,
                msg.partition(),
                msg.offset(),
            )
            self._ack(msg)
            self.stats.skipped += 1
            return True

        handler = self._handlers[topic]
        try:
            handler(payload)
        except Exception:
            logger.warning(
                "Handler failed on %s[%d]@%d, seeking back for redelivery",
                topic,
                msg.partition(),
                msg.offset(),
                exc_info=True,
            )
            self._nack(msg)
        else:
            self._ack(msg)
        return True

    def _ack(self, msg: Any) -> None:
        self.consumer.commit(message=msg, asynchronous=False)
        self.stats.committed += 1

    def _nack(self, msg: Any) -> None:
        self.consumer.seek(TopicPartition(msg.topic(), msg.partition(), msg.offset()))
        self.stats.redelivered += 1

    def close(self) -> None:
        """Flush the producer and close the consumer."""
        self.producer.flush(self.config.flush_timeout)
        if self.consumer is not None:
            self.consumer.close()
            self.consumer = None
        logger.info(
            "Kafka bus closed: sent=%d, delivered=%d, failed=%d, consumed=%d, "
            "committed=%d, redelivered=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
            self.stats.consumed,
            self.stats.committed,
            self.stats.redelivered,
        )
