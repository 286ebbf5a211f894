"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Keep data in local JSON files for the app
2. Use in-memory storage for testing
3. Swap in another local store later
4. Keep business logic decoupled from storage implementation

The interface is intentionally tiny: each collection is stored as
one JSON document under one key and always written in full.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the local key-value store.

    Any store implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the value exists but cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under key.

        Args:
            key: Storage key
            value: Full text to store

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove key from the store.

        Returns:
            True if something was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read or parsed."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written to the store."""
    pass
