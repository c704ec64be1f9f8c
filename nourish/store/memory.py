"""
In-Memory Store

Holds friends and categories for one session. Friends own their
interactions, so deleting a friend deletes its history; categories are
only referenced by id, so deleting one just detaches it.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from nourish.models.entities import (
    CUSTOM_CATEGORY_SORT_ORDER,
    DEFAULT_CATEGORIES,
    Category,
    Interaction,
)
from nourish.models.friend import Friend

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when stored data cannot be read or written."""


class NotFoundError(StoreError, KeyError):
    """Raised when an id does not match any stored entity."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class StoreSnapshot(BaseModel):
    """Serializable contents of a store."""
    version: int = 1
    friends: list[Friend] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)


class NourishStore:
    """Friends and categories, kept in insertion order."""

    def __init__(self) -> None:
        self._friends: dict[str, Friend] = {}
        self._categories: dict[str, Category] = {}

    # Friends

    def add_friend(self, friend: Friend) -> Friend:
        if friend.id in self._friends:
            raise ValueError(f"Friend {friend.id} already stored")
        unknown = friend.category_ids - set(self._categories)
        if unknown:
            raise NotFoundError(f"Unknown categories: {', '.join(sorted(unknown))}")
        self._friends[friend.id] = friend
        logger.debug(f"Stored friend {friend.name} ({friend.id})")
        return friend

    def get_friend(self, friend_id: str) -> Friend:
        try:
            return self._friends[friend_id]
        except KeyError:
            raise NotFoundError(f"Friend not found: {friend_id}") from None

    def find_friend(self, name_or_id: str) -> Optional[Friend]:
        """Look a friend up by id, then by case-insensitive name."""
        if name_or_id in self._friends:
            return self._friends[name_or_id]
        needle = name_or_id.strip().lower()
        for friend in self._friends.values():
            if friend.name.lower() == needle:
                return friend
        return None

    def list_friends(self) -> list[Friend]:
        return list(self._friends.values())

    def delete_friend(self, friend_id: str) -> int:
        """Delete a friend and its interactions.

        Returns:
            Number of interactions deleted with it
        """
        friend = self.get_friend(friend_id)
        removed = friend.interactions.clear()
        del self._friends[friend_id]
        logger.info(f"Deleted friend {friend.name} and {removed} interaction(s)")
        return removed

    def delete_all_friends(self) -> int:
        """Delete every friend (and their interactions); categories stay."""
        count = len(self._friends)
        for friend_id in list(self._friends):
            self.delete_friend(friend_id)
        return count

    def friends_in_category(self, category_id: str) -> list[Friend]:
        self.get_category(category_id)
        return [f for f in self._friends.values() if category_id in f.category_ids]

    # Interactions

    def interaction_count(self) -> int:
        return sum(len(f.interactions) for f in self._friends.values())

    def find_interaction(self, interaction_id: str) -> Optional[Interaction]:
        for friend in self._friends.values():
            for interaction in friend.interactions:
                if interaction.id == interaction_id:
                    return interaction
        return None

    # Categories

    def add_category(
        self,
        name: str,
        icon: str = "tag.fill",
        color_hex: str = "808080",
    ) -> Category:
        """Add a user-defined category (sorted after the defaults)."""
        category = Category(
            name=name,
            icon=icon,
            color_hex=color_hex,
            is_default=False,
            sort_order=CUSTOM_CATEGORY_SORT_ORDER,
        )
        self._categories[category.id] = category
        return category

    def put_category(self, category: Category) -> Category:
        self._categories[category.id] = category
        return category

    def update_category(
        self,
        category_id: str,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        color_hex: Optional[str] = None,
    ) -> Category:
        """Rename or restyle a category. Friends keep referencing it by id.

        Raises:
            NotFoundError: If the category does not exist
            ValueError: On a blank name or a name another category already uses
        """
        category = self.get_category(category_id)
        changes = {
            key: value
            for key, value in {"name": name, "icon": icon, "color_hex": color_hex}.items()
            if value is not None
        }
        if "name" in changes:
            existing = self.find_category(changes["name"])
            if existing is not None and existing.id != category_id:
                raise ValueError(f"Category '{existing.name}' already exists")

        # Validate every change before writing any
        updated = Category.model_validate({**category.model_dump(), **changes})
        old_name = category.name
        for key in changes:
            setattr(category, key, getattr(updated, key))
        logger.info(f"Updated category {old_name} -> {category.name}")
        return category

    def get_category(self, category_id: str) -> Category:
        try:
            return self._categories[category_id]
        except KeyError:
            raise NotFoundError(f"Category not found: {category_id}") from None

    def find_category(self, name_or_id: str) -> Optional[Category]:
        if name_or_id in self._categories:
            return self._categories[name_or_id]
        needle = name_or_id.strip().lower()
        for category in self._categories.values():
            if category.name.lower() == needle:
                return category
        return None

    def list_categories(self) -> list[Category]:
        """Categories in display order."""
        return sorted(self._categories.values(), key=lambda c: (c.sort_order, c.name))

    def delete_category(self, category_id: str, force: bool = False) -> int:
        """Delete a category and detach it from every friend.

        Args:
            category_id: Category to delete
            force: Allow deleting one of the built-in categories

        Returns:
            Number of friends the category was detached from

        Raises:
            ValueError: If the category is a default one and `force` is False
        """
        category = self.get_category(category_id)
        if category.is_default and not force:
            raise ValueError(f"Default category '{category.name}' cannot be deleted")

        detached = 0
        for friend in self._friends.values():
            if category_id in friend.category_ids:
                friend.category_ids = friend.category_ids - {category_id}
                detached += 1

        del self._categories[category_id]
        logger.info(f"Deleted category {category.name}, detached from {detached} friend(s)")
        return detached

    def seed_default_categories(self) -> list[Category]:
        """Create the built-in categories when none exist yet."""
        if self._categories:
            return []
        seeded = [
            self.put_category(Category(is_default=True, **fields))
            for fields in DEFAULT_CATEGORIES
        ]
        logger.info(f"Seeded {len(seeded)} default categories")
        return seeded

    # Snapshots

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            friends=self.list_friends(),
            categories=list(self._categories.values()),
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        """Replace the store contents with a snapshot."""
        self._friends = {}
        self._categories = {c.id: c for c in snapshot.categories}
        for friend in snapshot.friends:
            dangling = friend.category_ids - set(self._categories)
            if dangling:
                logger.warning(
                    f"Dropping {len(dangling)} unknown category reference(s) from {friend.name}"
                )
                friend.category_ids = friend.category_ids - dangling
            self._friends[friend.id] = friend
