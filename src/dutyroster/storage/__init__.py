"""Stores for staff, duty history and rosters."""

from dutyroster.storage.base import RosterStore, StorageError
from dutyroster.storage.memory_store import InMemoryRosterStore
from dutyroster.storage.sqlite_store import SQLiteRosterStore

__all__ = [
    "InMemoryRosterStore",
    "RosterStore",
    "SQLiteRosterStore",
    "StorageError",
]
