"""
Pytest Configuration and Shared Fixtures
"""

import pytest
from datetime import datetime, timedelta, timezone

from nourish.models.friend import Friend
from nourish.models.health import HealthEngine
from nourish.models.relationship import RelationshipManager
from nourish.store.memory import NourishStore
from nourish.utils.clock import fixed_clock

# Pinned to UTC so day boundaries never depend on the machine running the tests
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def days_ago(days: int, hours: int = 0) -> datetime:
    return NOW - timedelta(days=days, hours=hours)


def days_later(days: int, hours: int = 0) -> datetime:
    return NOW + timedelta(days=days, hours=hours)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def engine() -> HealthEngine:
    """Engine with the default tuning (5 points/day, 30-day ghost threshold)."""
    return HealthEngine(decay_rate_per_day=5.0, ghost_threshold_days=30, timezone="UTC")


@pytest.fixture
def manager(engine) -> RelationshipManager:
    """Manager whose clock is frozen at NOW."""
    return RelationshipManager(engine=engine, clock=fixed_clock(NOW))


@pytest.fixture
def make_friend():
    """Build a friend with explicit health bookkeeping."""

    def _make(
        name: str = "Jordan",
        score: float = 80.0,
        last_contact: datetime = NOW,
        last_decay: datetime = None,
        **kwargs,
    ) -> Friend:
        return Friend(
            name=name,
            health_score=score,
            last_contact_date=last_contact,
            last_decay_date=last_decay or last_contact,
            created_at=kwargs.pop("created_at", last_contact),
            **kwargs,
        )

    return _make


@pytest.fixture
def ghost_friend(make_friend) -> Friend:
    """Zero health, no contact for 45 days, decay already applied up to NOW."""
    return make_friend(name="Riley", score=0.0, last_contact=days_ago(45), last_decay=NOW)


@pytest.fixture
def store() -> NourishStore:
    """Store with the default categories seeded."""
    store = NourishStore()
    store.seed_default_categories()
    return store
