"""
Friend

The tracked relationship: identity, profile fields, health bookkeeping,
category tags and the interaction history it owns.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nourish.models.entities import new_id
from nourish.models.ledger import InteractionLedger


class Friend(BaseModel):
    """A person whose relationship health is being nurtured.

    Status is never stored here; it is derived from `health_score` and the
    time since `last_contact_date` whenever it is asked for.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    id: str = Field(default_factory=new_id)
    name: str
    health_score: float = Field(default=80.0, ge=0.0, le=100.0)
    last_contact_date: datetime
    last_decay_date: datetime
    created_at: datetime

    # Profile
    phone_number: str = ""
    notes: str = ""
    photo: Optional[bytes] = None
    birthday: Optional[date] = None

    # Non-owning references to categories
    category_ids: set[str] = Field(default_factory=set)

    # Owned history, deleted together with the friend
    interactions: InteractionLedger = Field(default_factory=InteractionLedger)

    def model_post_init(self, __context) -> None:
        """Bind the ledger to this friend."""
        if not self.interactions.owner_id:
            self.interactions.owner_id = self.id

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Friend name must be non-empty")
        return value

    @field_validator("phone_number")
    @classmethod
    def _strip_phone(cls, value: str) -> str:
        return value.strip()

    @property
    def interaction_count(self) -> int:
        return len(self.interactions)
