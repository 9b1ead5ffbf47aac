"""
Storage Services Package

Provides the abstract key-value interface and its backends.
The ledger defaults to a local JSON file, but the backend is swappable.
"""

from weekly_budget.services.storage.interface import (
    ConnectionError,
    KeyValueStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from weekly_budget.services.storage.memory import InMemoryKeyValueStore
from weekly_budget.services.storage.json_file import JsonFileKeyValueStore
from weekly_budget.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)
from weekly_budget.services.storage.locks import KeyedLock
from weekly_budget.services.storage.factory import create_key_value_store

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "ConnectionError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Backends
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "create_key_value_store",
    # Concurrency
    "KeyedLock",
]
