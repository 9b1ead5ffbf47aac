"""Services package."""

from weekly_budget.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyedLock,
    KeyValueStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
    create_key_value_store,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyedLock",
    "KeyValueStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "create_key_value_store",
]
