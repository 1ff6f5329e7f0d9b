"""Event bus transports for scoring requests and outcomes."""

from credit_scoring.bus.base import EventBus, MessageHandler
from credit_scoring.bus.kafka import KafkaEventBus
from credit_scoring.bus.memory import InMemoryEventBus

__all__ = ["EventBus", "InMemoryEventBus", "KafkaEventBus", "MessageHandler"]
