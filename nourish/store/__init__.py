"""
Persistence

In-memory and JSON-file stores for friends, their interactions and categories.
"""

from nourish.store.memory import NotFoundError, NourishStore, StoreError, StoreSnapshot
from nourish.store.json_store import JsonFileStore
from nourish.store.seed import seed_sample_friends

__all__ = [
    "NotFoundError",
    "NourishStore",
    "StoreError",
    "StoreSnapshot",
    "JsonFileStore",
    "seed_sample_friends",
]
