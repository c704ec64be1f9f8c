"""
Relationship Care

Every change to a friend's health goes through here: creation with a derived
starting score, the decay pass run on each app activation, and interaction
logging with ghost/resurrection detection.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from pydantic import BaseModel

from nourish.models.entities import HealthStatus, Interaction, InteractionType
from nourish.models.friend import Friend
from nourish.models.health import DecayResult, HealthEngine
from nourish.utils.clock import Clock, localize, system_clock

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"name", "phone_number", "notes", "photo", "birthday", "category_ids"}
)


class InteractionOutcome(BaseModel):
    """What logging (or previewing) an interaction did to a friend."""
    interaction: Optional[Interaction] = None
    score_before: float
    score_after: float
    status_before: HealthStatus
    status_after: HealthStatus

    @property
    def was_ghost(self) -> bool:
        return self.status_before.is_ghost

    @property
    def is_ghost(self) -> bool:
        return self.status_after.is_ghost

    @property
    def resurrected(self) -> bool:
        """The friend went from ghost to non-ghost with this interaction."""
        return self.was_ghost and not self.is_ghost


class RelationshipManager:
    """Applies the health rules to friends.

    Args:
        engine: Health rules to apply
        default_backdate_days: Assumed age of the last contact when the user
            does not remember it
        clamp_backdated_interactions: Keep the decay clock from moving
            backwards when an interaction is logged with an earlier date
        decay_clock_from_contact: Start a new friend's decay clock at the last
            contact date instead of at creation time
        clock: Source of "now" when a call does not pass it explicitly
    """

    def __init__(
        self,
        engine: Optional[HealthEngine] = None,
        default_backdate_days: int = 14,
        clamp_backdated_interactions: bool = True,
        decay_clock_from_contact: bool = False,
        clock: Optional[Clock] = None,
    ):
        self.engine = engine or HealthEngine()
        self.default_backdate_days = default_backdate_days
        self.clamp_backdated_interactions = clamp_backdated_interactions
        self.decay_clock_from_contact = decay_clock_from_contact
        self.clock = clock or system_clock(self.engine.timezone)

    @classmethod
    def from_config(cls, config, clock: Optional[Clock] = None) -> "RelationshipManager":
        """Build a manager from the root `Config`."""
        return cls(
            engine=HealthEngine.from_config(config.health),
            default_backdate_days=config.health.default_backdate_days,
            clamp_backdated_interactions=config.health.clamp_backdated_interactions,
            decay_clock_from_contact=config.health.decay_clock_from_contact,
            clock=clock,
        )

    def _now(self, now: Optional[datetime]) -> datetime:
        return self._local(now if now is not None else self.clock())

    def _local(self, moment: datetime) -> datetime:
        return localize(moment, self.engine.tz)

    # Creation

    def create_friend(
        self,
        name: str,
        last_contact: Optional[datetime] = None,
        now: Optional[datetime] = None,
        **profile,
    ) -> Friend:
        """Create a friend with a starting score derived from the last contact.

        Args:
            name: Display name (must be non-empty)
            last_contact: When the user last saw/heard from them; None when
                they don't remember, which assumes `default_backdate_days` ago
            now: Current time
            **profile: phone_number, notes, photo, birthday, category_ids

        Returns:
            The new friend (not yet stored)

        Raises:
            ValueError: On an empty name or unknown profile field
        """
        now = self._now(now)
        unknown = set(profile) - (EDITABLE_FIELDS - {"name"})
        if unknown:
            raise ValueError(f"Unknown friend fields: {', '.join(sorted(unknown))}")

        if last_contact is None:
            last_contact = now - timedelta(days=self.default_backdate_days)
        else:
            last_contact = self._local(last_contact)
        if last_contact > now:
            logger.warning(
                f"Last contact {last_contact.isoformat()} is in the future, using now"
            )
            last_contact = now

        friend = Friend(
            name=name,
            health_score=self.engine.starting_score(last_contact, now),
            last_contact_date=last_contact,
            last_decay_date=last_contact if self.decay_clock_from_contact else now,
            created_at=now,
            **profile,
        )
        logger.debug(
            f"Created friend {friend.name} with health {friend.health_score:.1f}"
        )
        return friend

    # Decay

    def apply_decay(self, friend: Friend, now: Optional[datetime] = None) -> DecayResult:
        """Decay a friend's health up to `now`. Idempotent within a calendar day."""
        now = self._now(now)
        result = self.engine.decay(friend.health_score, friend.last_decay_date, now)
        if result.applied:
            logger.debug(
                f"Decayed {friend.name}: {friend.health_score:.1f} -> {result.score:.1f} "
                f"over {result.elapsed_days} day(s)"
            )
            friend.health_score = result.score
            friend.last_decay_date = result.last_decay_date
        return result

    def apply_decay_all(
        self,
        friends: Iterable[Friend],
        now: Optional[datetime] = None,
    ) -> int:
        """Run the activation decay pass.

        Returns:
            Number of friends whose health changed
        """
        now = self._now(now)
        total = 0
        decayed = 0
        for friend in friends:
            total += 1
            if self.apply_decay(friend, now).applied:
                decayed += 1

        logger.info(f"Applied decay to {decayed} of {total} friends")

        return decayed

    # Derived state

    def days_since_contact(self, friend: Friend, now: Optional[datetime] = None) -> int:
        return self.engine.days_between(friend.last_contact_date, self._now(now))

    def status(self, friend: Friend, now: Optional[datetime] = None) -> HealthStatus:
        """Current status, recomputed on every call."""
        now = self._now(now)
        return self.engine.status(friend.health_score, self.days_since_contact(friend, now))

    def is_ghost(self, friend: Friend, now: Optional[datetime] = None) -> bool:
        return self.status(friend, now).is_ghost

    # Interactions

    def preview_interaction(
        self,
        friend: Friend,
        interaction_type: InteractionType,
        now: Optional[datetime] = None,
    ) -> InteractionOutcome:
        """What logging an interaction of this type right now would do."""
        now = self._now(now)
        score_after = self.engine.boost(friend.health_score, interaction_type)
        return InteractionOutcome(
            score_before=friend.health_score,
            score_after=score_after,
            status_before=self.status(friend, now),
            status_after=self.engine.status(score_after, 0),
        )

    def log_interaction(
        self,
        friend: Friend,
        interaction_type: InteractionType,
        note: str = "",
        date: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> InteractionOutcome:
        """Record a contact, boost health and reset the decay clock.

        Args:
            friend: Friend to log against
            interaction_type: Kind of contact
            note: Free text, may be empty
            date: When it happened (default: now); may be backdated
            now: Current time, used to judge ghost status before and after

        Returns:
            InteractionOutcome including the before/after ghost flags
        """
        now = self._now(now)
        date = self._local(date) if date is not None else now
        interaction_type = InteractionType(interaction_type)

        # The ledger keeps the date as given; the health clocks never run ahead of now
        contact = date
        if date > now:
            logger.warning(
                f"Interaction with {friend.name} dated in the future ({date.isoformat()}), "
                f"counting it as now"
            )
            contact = now

        score_before = friend.health_score
        status_before = self.status(friend, now)

        interaction = friend.interactions.append(
            Interaction(friend_id=friend.id, type=interaction_type, note=note, date=date)
        )
        friend.health_score = self.engine.boost(friend.health_score, interaction_type)

        if self.clamp_backdated_interactions and contact < self._local(friend.last_decay_date):
            logger.debug(
                f"Backdated interaction for {friend.name}; keeping decay date "
                f"{friend.last_decay_date.isoformat()}"
            )
            if contact > self._local(friend.last_contact_date):
                friend.last_contact_date = contact
        else:
            friend.last_contact_date = contact
            friend.last_decay_date = contact

        outcome = InteractionOutcome(
            interaction=interaction,
            score_before=score_before,
            score_after=friend.health_score,
            status_before=status_before,
            status_after=self.status(friend, now),
        )
        if outcome.resurrected:
            logger.info(f"{friend.name} came back from being a ghost")

        return outcome

    # Edits

    def edit(self, friend: Friend, **fields) -> Friend:
        """Update profile fields. Health bookkeeping is untouched.

        All fields are validated before any of them is written.

        Raises:
            ValueError: On an unknown or non-editable field, or invalid value
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        if "category_ids" in fields:
            fields["category_ids"] = set(fields["category_ids"])

        trial = friend.model_copy()
        for key, value in fields.items():
            setattr(trial, key, value)

        for key in fields:
            setattr(friend, key, getattr(trial, key))
        return friend

    # Views

    def sort_by_need(
        self,
        friends: Iterable[Friend],
        now: Optional[datetime] = None,
    ) -> list[Friend]:
        """Most in need of attention first: status order, then lowest score."""
        now = self._now(now)
        return sorted(
            friends,
            key=lambda f: (self.status(f, now).sort_order, f.health_score, f.name.lower()),
        )

    def ghosts(
        self,
        friends: Iterable[Friend],
        now: Optional[datetime] = None,
    ) -> list[Friend]:
        now = self._now(now)
        return [f for f in friends if self.is_ghost(f, now)]
