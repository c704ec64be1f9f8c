"""
Relationship Health Engine

Computes decay, interaction boosts and status classification.

Formula:
    decayed = clamp(score - elapsed_days * decay_rate_per_day, 0, 100)
    boosted = clamp(score + points[type], 0, 100)

Every function here is pure: the current time is always passed in.
"""

import logging
from datetime import datetime, tzinfo
from typing import Optional

from pydantic import BaseModel

from nourish.models.entities import HealthStatus, InteractionType
from nourish.utils.clock import as_zone, localize

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 100.0

THRIVING_THRESHOLD = 75.0
OKAY_THRESHOLD = 50.0
FADING_THRESHOLD = 25.0


def clamp_score(score: float) -> float:
    """Clamp a score into [0, 100]."""
    return max(MIN_SCORE, min(MAX_SCORE, score))


def calendar_days_between(start: datetime, end: datetime, tz: tzinfo) -> int:
    """Whole calendar days from `start` to `end`, as seen in `tz`.

    Two moments on the same local day are 0 days apart regardless of the
    time of day. Negative when `end` falls on an earlier day.
    """
    start_day = localize(start, tz).date()
    end_day = localize(end, tz).date()
    return (end_day - start_day).days


def classify(
    score: float,
    days_since_contact: int,
    ghost_threshold_days: int = 30,
) -> HealthStatus:
    """Map a score and recency to a status.

    Ghost takes precedence over the score bands. Bands are half-open at the
    top except THRIVING, which includes 100.
    """
    if score <= MIN_SCORE and days_since_contact >= ghost_threshold_days:
        return HealthStatus.GHOST
    if score >= THRIVING_THRESHOLD:
        return HealthStatus.THRIVING
    if score >= OKAY_THRESHOLD:
        return HealthStatus.OKAY
    if score >= FADING_THRESHOLD:
        return HealthStatus.FADING
    return HealthStatus.CRITICAL


class DecayResult(BaseModel):
    """Outcome of one decay computation."""
    score: float
    last_decay_date: datetime
    elapsed_days: int

    @property
    def applied(self) -> bool:
        return self.elapsed_days > 0


class HealthEngine:
    """Decay, boost and status rules for relationship health.

    All tuning lives on the instance, so differently configured engines can
    be used side by side.
    """

    DEFAULT_BOOST_POINTS = {
        InteractionType.HANGOUT: 40.0,
        InteractionType.CALL: 35.0,
        InteractionType.TEXT: 25.0,
        InteractionType.SOCIAL_TOUCH: 5.0,
    }

    def __init__(
        self,
        decay_rate_per_day: float = 5.0,
        boost_points: Optional[dict] = None,
        ghost_threshold_days: int = 30,
        timezone: str = "UTC",
    ):
        """Initialize engine with configuration.

        Args:
            decay_rate_per_day: Points lost per calendar day without contact
            boost_points: Custom points per interaction type
            ghost_threshold_days: Days since contact before a zero score is a ghost
            timezone: Zone whose calendar defines day boundaries
        """
        if decay_rate_per_day < 0:
            raise ValueError("decay_rate_per_day must be non-negative")
        self.decay_rate_per_day = decay_rate_per_day
        self.ghost_threshold_days = ghost_threshold_days
        self.timezone = timezone
        self.tz = as_zone(timezone)

        self.boost_points = self.DEFAULT_BOOST_POINTS.copy()
        if boost_points:
            for key, value in boost_points.items():
                # Handle string keys
                if isinstance(key, str):
                    try:
                        int_type = InteractionType(key)
                        self.boost_points[int_type] = float(value)
                    except ValueError:
                        logger.warning(f"Unknown interaction type: {key}")
                else:
                    self.boost_points[key] = float(value)

        points = [self.boost_points[t] for t in InteractionType]
        if min(points) < 0 or points != sorted(points, reverse=True):
            raise ValueError(
                "Boost points must be non-negative and satisfy "
                "hangout >= call >= text >= social_touch"
            )

    @classmethod
    def from_config(cls, config) -> "HealthEngine":
        """Build an engine from a `HealthConfig` section."""
        return cls(
            decay_rate_per_day=config.decay_rate_per_day,
            boost_points=config.boost_points,
            ghost_threshold_days=config.ghost_threshold_days,
            timezone=config.timezone,
        )

    def days_between(self, start: datetime, end: datetime) -> int:
        """Calendar days from `start` to `end`, never negative."""
        return max(0, calendar_days_between(start, end, self.tz))

    def decay_by_days(self, score: float, days: int) -> float:
        """Score after `days` of decay. Non-positive days leave it unchanged."""
        if days <= 0:
            return clamp_score(score)
        return clamp_score(score - days * self.decay_rate_per_day)

    def decay(
        self,
        score: float,
        last_decay_date: datetime,
        now: datetime,
    ) -> DecayResult:
        """Apply decay for the calendar days between `last_decay_date` and `now`.

        The decay date only moves forward when at least one day has passed,
        so repeated calls on the same day change nothing.
        """
        elapsed = calendar_days_between(last_decay_date, now, self.tz)
        if elapsed <= 0:
            if elapsed < 0:
                logger.debug(
                    f"Decay date {last_decay_date.isoformat()} is after {now.isoformat()}, skipping"
                )
            return DecayResult(
                score=clamp_score(score),
                last_decay_date=last_decay_date,
                elapsed_days=0,
            )

        return DecayResult(
            score=self.decay_by_days(score, elapsed),
            last_decay_date=now,
            elapsed_days=elapsed,
        )

    def points_for(self, interaction_type: InteractionType) -> float:
        return self.boost_points.get(InteractionType(interaction_type), 0.0)

    def boost(self, score: float, interaction_type: InteractionType) -> float:
        """Score after logging one interaction of the given type."""
        return clamp_score(score + self.points_for(interaction_type))

    def status(self, score: float, days_since_contact: int) -> HealthStatus:
        """Classify a score using this engine's ghost threshold."""
        return classify(score, days_since_contact, self.ghost_threshold_days)

    def starting_score(self, last_contact: datetime, now: datetime) -> float:
        """Health of a new friend last contacted at `last_contact`.

        Derived by decaying a full score over the elapsed days, exactly as
        ongoing decay would have.
        """
        return self.decay_by_days(MAX_SCORE, self.days_between(last_contact, now))
