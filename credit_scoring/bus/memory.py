"""In-process event bus for tests and local runs."""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable

from credit_scoring.bus.base import EventBus, MessageHandler
from credit_scoring.bus.serialization import decode, encode
from credit_scoring.exceptions import PublicationError

logger = logging.getLogger(__name__)


@dataclass
class Delivery:
    """A queued message and how many times it has been handed out."""

    topic: str
    payload: dict[str, Any]
    attempts: int = 0


@dataclass
class BusStats:
    """Track delivery outcomes."""

    published: int = 0
    acked: int = 0
    nacked: int = 0
    dead_lettered: int = 0


class InMemoryEventBus(EventBus):
    """Synchronous bus with at-least-once redelivery semantics.

    Payloads are round-tripped through JSON on publish so handlers see
    exactly what a real transport would deliver. A message whose handler
    raises is put back at the head of its queue until it has been tried
    ``max_deliveries`` times, then moved to ``dead_letters``.

    Parameters
    ----------
    max_deliveries : int
        Delivery attempts per message before dead-lettering.
    fail_topics : Iterable[str] | None
        Topics whose publications raise ``PublicationError``.
    """

    def __init__(
        self,
        max_deliveries: int = 3,
        fail_topics: Iterable[str] | None = None,
    ) -> None:
        self.max_deliveries = max_deliveries
        self.fail_topics = set(fail_topics or ())
        self.stats = BusStats()
        self.dead_letters: list[Delivery] = []
        self._published: dict[str, list[dict[str, Any]]] = {}
        self._queues: dict[str, deque[Delivery]] = {}
        self._handlers: dict[str, MessageHandler] = {}
        self._closed = False

    def publish(self, topic: str, payload: Any) -> None:
        if self._closed:
            raise PublicationError("Bus is closed", topic=topic)
        if topic in self.fail_topics:
            raise PublicationError(f"Publication to '{topic}' rejected", topic=topic)

        data = decode(encode(payload))
        self._published.setdefault(topic, []).append(data)
        self._queues.setdefault(topic, deque()).append(Delivery(topic, data))
        self.stats.published += 1
        logger.debug("Published to %s: %s", topic, json.dumps(data, default=str))

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        if topic in self._handlers:
            raise ValueError(f"Topic '{topic}' already has a subscriber")
        self._handlers[topic] = handler
        self._queues.setdefault(topic, deque())

    def poll(self, timeout: float = 1.0) -> bool:
        for topic, handler in self._handlers.items():
            queue = self._queues[topic]
            if queue:
                self._deliver(queue, handler)
                return True
        return False

    def drain(self, max_messages: int | None = None) -> int:
        """Deliver queued messages until every subscribed queue is empty.

        Returns
        -------
        int
            Number of deliveries made, redeliveries included.
        """
        delivered = 0
        while max_messages is None or delivered < max_messages:
            if not self.poll():
                break
            delivered += 1
        return delivered

    def messages(self, topic: str) -> list[dict[str, Any]]:
        """Return every payload published to ``topic``, in order."""
        return list(self._published.get(topic, []))

    def pending(self, topic: str) -> int:
        return len(self._queues.get(topic, ()))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.info(
            "In-memory bus closed: published=%d, acked=%d, nacked=%d, dead_lettered=%d",
            self.stats.published,
            self.stats.acked,
            self.stats.nacked,
            self.stats.dead_lettered,
        )

    def _deliver(self, queue: deque[Delivery], handler: MessageHandler) -> None:
        delivery = queue.popleft()
        delivery.attempts += 1
        try:
            handler(delivery.payload)
        except Exception:
            self.stats.nacked += 1
            if delivery.attempts < self.max_deliveries:
                logger.warning(
                    "Handler failed on %s (attempt %d/%d), requeueing",
                    delivery.topic,
                    delivery.attempts,
                    self.max_deliveries,
                    exc_info=True,
                )
                queue.appendleft(delivery)
            else:
                logger.error(
                    "Handler failed on %s after %d attempts, dead-lettering",
                    delivery.topic,
                    delivery.attempts,
                    exc_info=True,
                )
                self.dead_letters.append(delivery)
                self.stats.dead_lettered += 1
        else:
            self.stats.acked += 1
