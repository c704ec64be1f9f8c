"""
Sample Data

Demo friends covering every status, used to fill an empty store.
"""

import logging
from datetime import datetime, timedelta

from nourish.models.friend import Friend
from nourish.store.memory import NourishStore

logger = logging.getLogger(__name__)

# (name, health score, days since last contact, notes)
SAMPLE_FRIENDS = [
    ("Alex", 92.0, 1, "Grabbed coffee, great chat about the hiking trip."),
    ("Jordan", 62.0, 5, "Quick text exchange last week."),
    ("Sam", 35.0, 12, "Haven't seen them since the holidays."),
    ("Morgan", 8.0, 28, "Need to reach out, it's been way too long."),
    ("Ghost Riley", 0.0, 45, "Lost touch completely... they've become a ghost!"),
]


def seed_sample_friends(
    store: NourishStore,
    now: datetime,
) -> list[Friend]:
    """Add the sample friends when the store has none.

    Sample scores are given as-is rather than derived, so their decay clock
    starts at `now`.
    """
    if store.list_friends():
        return []

    seeded = []
    for name, score, days_ago, notes in SAMPLE_FRIENDS:
        friend = Friend(
            name=name,
            health_score=score,
            last_contact_date=now - timedelta(days=days_ago),
            last_decay_date=now,
            created_at=now,
            notes=notes,
        )
        seeded.append(store.add_friend(friend))

    logger.info(f"Seeded {len(seeded)} sample friends")
    return seeded
