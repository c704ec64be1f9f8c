"""
Interaction Ledger

Append-only history of the interactions logged with one friend.
"""

from typing import Iterator, Optional

from pydantic import BaseModel, Field

from nourish.models.entities import Interaction


class InteractionLedger(BaseModel):
    """Interactions of a single friend, in the order they were logged.

    Sorting by date is a read-time concern; storage order is insertion order.
    """
    owner_id: str = ""
    items: list[Interaction] = Field(default_factory=list)

    def append(self, interaction: Interaction) -> Interaction:
        """Add an interaction to the end of the ledger.

        Raises:
            ValueError: If the interaction belongs to another friend
        """
        if self.owner_id and interaction.friend_id != self.owner_id:
            raise ValueError(
                f"Interaction {interaction.id} belongs to friend {interaction.friend_id}, "
                f"not {self.owner_id}"
            )
        self.items.append(interaction)
        return interaction

    def entries(self, newest_first: bool = False) -> list[Interaction]:
        """Return a copy of the history.

        Args:
            newest_first: Sort by date descending (for display) instead of
                insertion order

        Returns:
            List of interactions
        """
        if newest_first:
            return sorted(self.items, key=lambda i: i.date, reverse=True)
        return list(self.items)

    def latest(self) -> Optional[Interaction]:
        """Most recent interaction by date, or None when empty."""
        if not self.items:
            return None
        return max(self.items, key=lambda i: i.date)

    def count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for interaction in self.items:
            counts[interaction.type.value] = counts.get(interaction.type.value, 0) + 1
        return counts

    def clear(self) -> int:
        """Drop every entry. Only used when the owning friend is deleted."""
        removed = len(self.items)
        self.items.clear()
        return removed

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Interaction]:  # type: ignore[override]
        return iter(list(self.items))
