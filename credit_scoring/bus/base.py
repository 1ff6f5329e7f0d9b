"""Publish/subscribe interface shared by all transports."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

# Returning normally acknowledges the message; raising requests redelivery.
MessageHandler = Callable[[dict[str, Any]], Any]


class EventBus(ABC):
    """Minimal transport capability used by the scoring worker.

    Implementations deliver at least once, keep one message in flight per
    consumer, and acknowledge only after the handler returns.
    """

    @abstractmethod
    def publish(self, topic: str, payload: Any) -> None:
        """Publish a payload (dict, dataclass or event) to ``topic``.

        Raises
        ------
        PublicationError
            If the transport rejects the message.
        """

    @abstractmethod
    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        """Register ``handler`` for messages arriving on ``topic``."""

    @abstractmethod
    def poll(self, timeout: float = 1.0) -> bool:
        """Deliver at most one message to its handler.

        Returns True when a message was delivered, whatever the outcome.
        """

    def close(self) -> None:
        """Release transport resources."""
