"""
Tests for the Health Engine
"""

import pytest
from datetime import datetime, timezone

from nourish.models.entities import HealthStatus, InteractionType
from nourish.models.health import (
    HealthEngine,
    calendar_days_between,
    clamp_score,
    classify,
)

from conftest import NOW, days_ago, days_later


class TestDecay:
    """Tests for time-based decay."""

    @pytest.mark.parametrize("score", [0.0, 12.5, 50.0, 99.9, 100.0])
    @pytest.mark.parametrize("days", [0, 1, 3, 14, 40])
    def test_decay_by_days_formula(self, engine, score, days):
        """Test decay(s, d) = clamp(s - d * rate, 0, 100)."""
        expected = max(0.0, min(100.0, score - days * 5.0))
        assert engine.decay_by_days(score, days) == pytest.approx(expected)

    def test_zero_days_is_identity(self, engine):
        """Test that no elapsed time leaves the score alone."""
        assert engine.decay_by_days(63.2, 0) == 63.2

    def test_decay_never_goes_negative(self, engine):
        """Test that large gaps clamp at zero."""
        assert engine.decay_by_days(10.0, 365) == 0.0

    def test_decay_advances_date(self, engine):
        """Test that decay over whole days moves the decay date to now."""
        result = engine.decay(80.0, NOW, days_later(3))

        assert result.score == 65.0
        assert result.elapsed_days == 3
        assert result.last_decay_date == days_later(3)
        assert result.applied

    def test_same_day_is_noop(self, engine):
        """Test that time of day does not count as elapsed days."""
        morning = datetime(2026, 3, 10, 0, 30, tzinfo=timezone.utc)
        night = datetime(2026, 3, 10, 23, 59, tzinfo=timezone.utc)

        result = engine.decay(80.0, morning, night)

        assert result.score == 80.0
        assert result.last_decay_date == morning
        assert not result.applied

    def test_midnight_crossing_counts_one_day(self, engine):
        """Test that crossing midnight counts even if less than 24h passed."""
        late = datetime(2026, 3, 10, 23, 0, tzinfo=timezone.utc)
        early = datetime(2026, 3, 11, 1, 0, tzinfo=timezone.utc)

        assert engine.decay(80.0, late, early).score == 75.0

    def test_future_now_never_increases_health(self, engine):
        """Test that a decay date after now is treated as zero elapsed days."""
        result = engine.decay(40.0, days_later(5), NOW)

        assert result.score == 40.0
        assert result.last_decay_date == days_later(5)
        assert result.elapsed_days == 0

    def test_custom_rate(self):
        """Test that the rate is taken from the engine configuration."""
        engine = HealthEngine(decay_rate_per_day=1.5)
        assert engine.decay(100.0, days_ago(10), NOW).score == pytest.approx(85.0)

    def test_negative_rate_rejected(self):
        """Test that a negative rate cannot be configured."""
        with pytest.raises(ValueError):
            HealthEngine(decay_rate_per_day=-1.0)

    def test_starting_score_matches_decay(self, engine):
        """Test that a new friend's score is what ongoing decay would give."""
        assert engine.starting_score(days_ago(14), NOW) == 30.0
        assert engine.starting_score(NOW, NOW) == 100.0
        assert engine.starting_score(days_ago(60), NOW) == 0.0


class TestCalendarDays:
    """Tests for calendar-day arithmetic."""

    def test_counts_local_days(self):
        """Test that day boundaries follow the configured zone."""
        from zoneinfo import ZoneInfo

        start = datetime(2026, 3, 10, 3, 0, tzinfo=timezone.utc)  # Mar 9, 23:00 in New York
        end = datetime(2026, 3, 10, 5, 0, tzinfo=timezone.utc)  # Mar 10, 01:00 in New York

        assert calendar_days_between(start, end, ZoneInfo("America/New_York")) == 1
        assert calendar_days_between(start, end, ZoneInfo("UTC")) == 0

    def test_naive_datetimes_use_engine_zone(self, engine):
        """Test that naive datetimes are read as local to the engine zone."""
        assert engine.days_between(datetime(2026, 3, 1), datetime(2026, 3, 4, 8)) == 3

    def test_days_between_never_negative(self, engine):
        """Test that dates in the future count as zero days."""
        assert engine.days_between(days_later(2), NOW) == 0


class TestBoost:
    """Tests for interaction boosts."""

    @pytest.mark.parametrize("interaction_type", list(InteractionType))
    def test_full_score_stays_full(self, engine, interaction_type):
        """Test boost(100, t) == 100 for every type."""
        assert engine.boost(100.0, interaction_type) == 100.0

    def test_default_points(self, engine):
        """Test the default point values."""
        assert engine.points_for(InteractionType.HANGOUT) == 40.0
        assert engine.points_for(InteractionType.CALL) == 35.0
        assert engine.points_for(InteractionType.TEXT) == 25.0
        assert engine.points_for(InteractionType.SOCIAL_TOUCH) == 5.0

    def test_points_are_monotone_in_richness(self, engine):
        """Test hangout >= call >= text >= social touch."""
        points = [engine.points_for(t) for t in InteractionType]
        assert points == sorted(points, reverse=True)

    def test_boost_clamps(self, engine):
        """Test that boosts are clamped at 100."""
        assert engine.boost(65.0, InteractionType.HANGOUT) == 100.0
        assert engine.boost(10.0, InteractionType.TEXT) == 35.0

    def test_custom_points_by_name(self):
        """Test overriding points with string keys."""
        engine = HealthEngine(boost_points={"text": 30, "social_touch": 1})

        assert engine.points_for(InteractionType.TEXT) == 30.0
        assert engine.points_for(InteractionType.SOCIAL_TOUCH) == 1.0
        assert engine.points_for(InteractionType.HANGOUT) == 40.0

    def test_unknown_points_key_ignored(self):
        """Test that unknown interaction names are skipped."""
        engine = HealthEngine(boost_points={"carrier_pigeon": 99})
        assert engine.points_for(InteractionType.CALL) == 35.0

    def test_non_monotone_points_rejected(self):
        """Test that a text cannot be worth more than a call."""
        with pytest.raises(ValueError):
            HealthEngine(boost_points={"text": 50})

    def test_accepts_type_values(self, engine):
        """Test that raw enum values are accepted."""
        assert engine.boost(0.0, "call") == 35.0


class TestStatus:
    """Tests for status classification."""

    @pytest.mark.parametrize(
        "score, expected",
        [
            (100.0, HealthStatus.THRIVING),
            (75.0, HealthStatus.THRIVING),
            (74.999, HealthStatus.OKAY),
            (50.0, HealthStatus.OKAY),
            (49.999, HealthStatus.FADING),
            (25.0, HealthStatus.FADING),
            (24.999, HealthStatus.CRITICAL),
            (0.0, HealthStatus.CRITICAL),
        ],
    )
    def test_band_boundaries(self, score, expected):
        """Test band edges are half-open at the top."""
        assert classify(score, 0) == expected

    def test_ghost_threshold(self):
        """Test that a zero score becomes a ghost at exactly 30 days."""
        assert classify(0.0, 29) == HealthStatus.CRITICAL
        assert classify(0.0, 30) == HealthStatus.GHOST
        assert classify(0.0, 400) == HealthStatus.GHOST

    def test_positive_score_is_never_ghost(self):
        """Test that any health left keeps a friend out of ghost status."""
        assert classify(0.5, 90) == HealthStatus.CRITICAL

    def test_engine_threshold(self):
        """Test a custom ghost threshold."""
        engine = HealthEngine(ghost_threshold_days=7)
        assert engine.status(0.0, 7) == HealthStatus.GHOST
        assert engine.status(0.0, 6) == HealthStatus.CRITICAL

    def test_need_order(self):
        """Test that statuses sort with the most in need first."""
        assert HealthStatus.by_need() == [
            HealthStatus.GHOST,
            HealthStatus.CRITICAL,
            HealthStatus.FADING,
            HealthStatus.OKAY,
            HealthStatus.THRIVING,
        ]

    def test_labels(self):
        """Test display labels."""
        assert HealthStatus.THRIVING.label == "Happy!"
        assert HealthStatus.GHOST.emoji == "👻"
        assert HealthStatus.GHOST.is_ghost
        assert not HealthStatus.CRITICAL.is_ghost


def test_clamp_score():
    """Test clamping into the score domain."""
    assert clamp_score(-3.0) == 0.0
    assert clamp_score(104.0) == 100.0
    assert clamp_score(42.0) == 42.0
