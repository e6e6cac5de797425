"""Domain models and data access layer."""

from .codec import CodecError
from .db import Base, StoredBlob
from .kvstore import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore
from .models import Expense, Profile, Shift, Site, Worker
from .repositories import DataStore, SaveResult

__all__ = [
    "Site",
    "Worker",
    "Shift",
    "Expense",
    "Profile",
    "Base",
    "StoredBlob",
    "CodecError",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlKeyValueStore",
    "DataStore",
    "SaveResult",
]
