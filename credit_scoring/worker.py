"""Credit scoring consumer worker and command-line entry points."""

from __future__ import annotations

import argparse
import logging
import signal
import time
from dataclasses import replace
from typing import Sequence

from credit_scoring.bus import EventBus, KafkaEventBus
from credit_scoring.config import CreditScoringConfig, TopicConfig
from credit_scoring.generators import RegistrationEventGenerator
from credit_scoring.handlers import RegistrationEventHandler
from credit_scoring.logging import setup_logging

logger = logging.getLogger(__name__)


class ScoringWorker:
    """Consume registration events one at a time and publish outcomes.

    Parameters
    ----------
    bus : EventBus
        Transport to consume from and publish to.
    topics : TopicConfig | None
        Topic names.
    handler : RegistrationEventHandler | None
        Handler to run per message; built from ``bus`` and ``topics`` if omitted.
    """

    def __init__(
        self,
        bus: EventBus,
        topics: TopicConfig | None = None,
        handler: RegistrationEventHandler | None = None,
    ) -> None:
        self.bus = bus
        self.topics = topics or TopicConfig()
        self.handler = handler or RegistrationEventHandler(bus, self.topics)
        self.processed = 0
        self._started = False
        self._stop_requested = False

    def start(self) -> None:
        if self._started:
            return
        self.bus.subscribe(self.topics.inbound, self.handler)
        self._started = True
        logger.info("Worker consuming %s", self.topics.inbound)

    def stop(self) -> None:
        """Ask the run loop to exit after the message in flight."""
        self._stop_requested = True

    def run(
        self,
        max_messages: int | None = None,
        stop_when_idle: bool = False,
        poll_timeout: float = 1.0,
    ) -> int:
        """Poll until stopped, ``max_messages`` is reached, or idle.

        Returns
        -------
        int
            Number of messages delivered during this run.
        """
        self.start()
        delivered = 0
        start_time = time.monotonic()

        while not self._stop_requested:
            if max_messages is not None and delivered >= max_messages:
                break
            if self.bus.poll(poll_timeout):
                delivered += 1
            elif stop_when_idle:
                break

        self.processed += delivered
        logger.info(
            "Worker loop finished: delivered=%d in %.1fs",
            delivered,
            time.monotonic() - start_time,
        )
        return delivered

    def close(self) -> None:
        self.bus.close()


def _build_config(args: argparse.Namespace) -> CreditScoringConfig:
    config = CreditScoringConfig.from_env()
    if args.bootstrap_servers:
        config.kafka = replace(config.kafka, bootstrap_servers=args.bootstrap_servers)
    if getattr(args, "group_id", None):
        config.kafka.group_id = args.group_id
    if args.log_level:
        config.log_level = args.log_level
    if args.log_format:
        config.log_format = args.log_format
    return config


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--bootstrap-servers",
        default=None,
        help="Kafka bootstrap servers (default: $KAFKA_BOOTSTRAP_SERVERS or localhost:9092)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: $LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default=None,
        help="Log format (default: $LOG_FORMAT or standard)",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Run the scoring worker against Kafka."""
    parser = argparse.ArgumentParser(description="Credit scoring worker")
    _add_common_arguments(parser)
    parser.add_argument("--group-id", default=None, help="Kafka consumer group id")
    parser.add_argument(
        "--max-messages",
        type=int,
        default=None,
        help="Exit after this many messages (default: run until interrupted)",
    )
    args = parser.parse_args(argv)

    config = _build_config(args)
    setup_logging(config.log_level, config.log_format)

    worker = ScoringWorker(KafkaEventBus(config.kafka), config.topics)

    def _signal_handler(signum: int, frame: object) -> None:
        logger.info("Shutdown requested (signal %d), finishing current message...", signum)
        worker.stop()

    original_sigint = signal.getsignal(signal.SIGINT)
    original_sigterm = signal.getsignal(signal.SIGTERM)
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    logger.info("=" * 60)
    logger.info("Credit Scoring Worker")
    logger.info("=" * 60)
    logger.info("Kafka: %s (group=%s)", config.kafka.bootstrap_servers, config.kafka.group_id)
    logger.info("Inbound: %s", config.topics.inbound)
    logger.info("Complete: %s", config.topics.complete)
    logger.info("Failed: %s", config.topics.failed)
    logger.info("=" * 60)

    try:
        worker.run(max_messages=args.max_messages, poll_timeout=config.kafka.poll_timeout)
    finally:
        signal.signal(signal.SIGINT, original_sigint)
        signal.signal(signal.SIGTERM, original_sigterm)
        worker.close()


def publish_sample_main(argv: Sequence[str] | None = None) -> None:
    """Publish synthetic registration events to the inbound topic."""
    parser = argparse.ArgumentParser(
        description="Publish synthetic customer registration events"
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--count",
        type=int,
        default=10,
        help="Number of events to publish (default: 10)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--invalid-rate",
        type=float,
        default=0.0,
        help="Fraction of events that fail validation (default: 0.0)",
    )
    args = parser.parse_args(argv)

    if args.count < 0:
        parser.error("--count must not be negative")
    if not 0.0 <= args.invalid_rate <= 1.0:
        parser.error("--invalid-rate must be between 0 and 1")

    config = _build_config(args)
    setup_logging(config.log_level, config.log_format)

    bus = KafkaEventBus(config.kafka)
    generator = RegistrationEventGenerator(seed=args.seed, invalid_rate=args.invalid_rate)
    try:
        for event in generator.generate_batch(args.count):
            bus.publish(config.topics.inbound, event)
        logger.info("Published %d registration events to %s", args.count, config.topics.inbound)
    finally:
        bus.close()


if __name__ == "__main__":
    main()
