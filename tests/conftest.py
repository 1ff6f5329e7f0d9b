"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from typing import Any

import pytest

from credit_scoring.bus import InMemoryEventBus
from credit_scoring.config import TopicConfig
from credit_scoring.handlers import RegistrationEventHandler

FIXED_NOW = datetime(2024, 6, 15, 10, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_customer_id() -> str:
    """Sample customer ID."""
    return "cust-test-001"


@pytest.fixture
def topics() -> TopicConfig:
    """Default topic names."""
    return TopicConfig()


@pytest.fixture
def bus() -> InMemoryEventBus:
    """Fresh in-memory bus."""
    return InMemoryEventBus()


@pytest.fixture
def fixed_clock():
    """Clock returning a constant UTC timestamp."""
    return lambda: FIXED_NOW


@pytest.fixture
def handler(bus: InMemoryEventBus, topics: TopicConfig, fixed_clock) -> RegistrationEventHandler:
    """Registration handler wired to the in-memory bus."""
    return RegistrationEventHandler(bus, topics, clock=fixed_clock)


@pytest.fixture
def registration_payload(sample_customer_id: str) -> dict[str, Any]:
    """Valid wire payload of a high-scoring customer."""
    return {
        "customerId": sample_customer_id,
        "name": "Maria Silva",
        "nationalId": "123.456.789-09",
        "email": "maria@example.com",
        "income": "12000.00",
        "age": 30,
        "historyCategory": "GOOD",
        "birthDate": "1994-03-10",
    }
