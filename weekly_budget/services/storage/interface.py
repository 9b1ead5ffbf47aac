"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The ledger persists whole documents (entire lists
serialized as one string) under a handful of fixed keys. Anything that can
get, set and remove a string by key can back it. This allows us to:
1. Keep the ledger on a local JSON file by default
2. Use in-memory storage for testing
3. Put the same documents in a Google Sheet users can inspect

Backends only move strings around. Encoding documents is the ledger's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for an async, durable string key-value store.

    Any backend must wrap its own failures into StorageReadError or
    StorageWriteError so callers can apply one error policy.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Document key (e.g. 'expenses')

        Returns:
            The stored string, or None if the key was never set

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous value for the key.

        Raises:
            StorageWriteError: If the value could not be persisted
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.

        Raises:
            StorageWriteError: If the removal could not be persisted
        """
        pass

    async def aclose(self) -> None:
        """Release backend resources. Most backends hold none."""
        return None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """A document could not be read or decoded."""
    pass


class StorageWriteError(StorageError):
    """A document could not be persisted."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
