"""
Data Models and Health Rules

Pydantic models for friends and their history, plus the health engine that
decays and boosts relationship health.
"""

from nourish.models.entities import (
    Category,
    HealthStatus,
    Interaction,
    InteractionType,
)
from nourish.models.friend import Friend
from nourish.models.health import DecayResult, HealthEngine, classify
from nourish.models.ledger import InteractionLedger
from nourish.models.relationship import InteractionOutcome, RelationshipManager

__all__ = [
    "Category",
    "HealthStatus",
    "Interaction",
    "InteractionType",
    "Friend",
    "DecayResult",
    "HealthEngine",
    "classify",
    "InteractionLedger",
    "InteractionOutcome",
    "RelationshipManager",
]
