"""Shared fixtures: deterministic ids, a fixed clock, and in-memory storage."""

from datetime import date, datetime, timezone
from itertools import count

import pytest

from savings_tracker.orchestrator import FinanceTracker
from savings_tracker.storage import InMemoryStore, TrackerRepository

TODAY = date(2024, 3, 1)
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def id_factory():
    """Ids new-1, new-2, ... in call order."""
    counter = count(1)
    return lambda: f"new-{next(counter)}"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def tracker(store, id_factory):
    return FinanceTracker(
        repository=TrackerRepository(store),
        id_factory=id_factory,
        clock=lambda: NOW,
        today_provider=lambda: TODAY,
    )
