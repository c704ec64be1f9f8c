"""
Core Data Models

Pydantic models for the things Nourish keeps track of: interaction types,
health statuses, logged interactions and categories.
"""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    return str(uuid.uuid4())


class InteractionType(str, Enum):
    """Kinds of contact that can be logged, richest first."""
    HANGOUT = "hangout"
    CALL = "call"
    TEXT = "text"
    SOCIAL_TOUCH = "social_touch"

    @property
    def label(self) -> str:
        return _INTERACTION_LABELS[self]


_INTERACTION_LABELS = {
    InteractionType.HANGOUT: "Hangout in person",
    InteractionType.CALL: "Phone/video call",
    InteractionType.TEXT: "Text conversation",
    InteractionType.SOCIAL_TOUCH: "Social media like/comment",
}


class HealthStatus(str, Enum):
    """Discrete health of a relationship, derived from score and recency."""
    THRIVING = "thriving"
    OKAY = "okay"
    FADING = "fading"
    CRITICAL = "critical"
    GHOST = "ghost"

    @property
    def sort_order(self) -> int:
        """Most in need of attention sorts first."""
        return _STATUS_ORDER[self]

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def emoji(self) -> str:
        return _STATUS_EMOJI[self]

    @property
    def is_ghost(self) -> bool:
        return self is HealthStatus.GHOST

    @classmethod
    def by_need(cls) -> list["HealthStatus"]:
        return sorted(cls, key=lambda s: s.sort_order)


_STATUS_ORDER = {
    HealthStatus.GHOST: -1,
    HealthStatus.CRITICAL: 0,
    HealthStatus.FADING: 1,
    HealthStatus.OKAY: 2,
    HealthStatus.THRIVING: 3,
}

_STATUS_LABELS = {
    HealthStatus.THRIVING: "Happy!",
    HealthStatus.OKAY: "Content",
    HealthStatus.FADING: "Lonely",
    HealthStatus.CRITICAL: "Help!",
    HealthStatus.GHOST: "Ghost",
}

_STATUS_EMOJI = {
    HealthStatus.THRIVING: "💚",
    HealthStatus.OKAY: "💛",
    HealthStatus.FADING: "🧡",
    HealthStatus.CRITICAL: "💔",
    HealthStatus.GHOST: "👻",
}


class Interaction(BaseModel):
    """A single logged contact with a friend. Never changed after creation."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    friend_id: str = Field(description="ID of the friend this contact belongs to")
    type: InteractionType
    note: str = ""
    date: datetime


class Category(BaseModel):
    """A tag used to group friends. Carries no health meaning."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    name: str
    icon: str = "tag.fill"
    color_hex: str = "808080"
    is_default: bool = False
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name must be non-empty")
        return value


DEFAULT_CATEGORIES: list[dict] = [
    {"name": "Family", "icon": "house.fill", "color_hex": "5B9BD5", "sort_order": 0},
    {"name": "Friends", "icon": "person.2.fill", "color_hex": "70C1B3", "sort_order": 1},
    {"name": "Work", "icon": "briefcase.fill", "color_hex": "F4A259", "sort_order": 2},
    {"name": "Other", "icon": "tag.fill", "color_hex": "9B9B9B", "sort_order": 3},
]

CUSTOM_CATEGORY_SORT_ORDER = 100
