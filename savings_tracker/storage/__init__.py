"""
Storage Package

Provides the abstract key-value interface and its implementations:
local JSON files for the app and an in-memory store for tests.
The repository on top turns stored JSON lists into entities.
"""

from savings_tracker.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from savings_tracker.storage.json_file import JsonFileStore
from savings_tracker.storage.memory import InMemoryStore
from savings_tracker.storage.repository import TrackerRepository, TrackerSnapshot

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    # Repository
    "TrackerRepository",
    "TrackerSnapshot",
]
