"""Build the configured key-value backend."""

from typing import Optional

from weekly_budget.config import Settings, get_settings
from weekly_budget.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)
from weekly_budget.services.storage.interface import KeyValueStore
from weekly_budget.services.storage.json_file import JsonFileKeyValueStore
from weekly_budget.services.storage.memory import InMemoryKeyValueStore


def create_key_value_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Create the backend selected by STORAGE_BACKEND.

    The Google Sheets block of the settings is only read when that
    backend is selected.
    """
    settings = settings or get_settings()
    storage = settings.storage

    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    if storage.backend == "google_sheets":
        return GoogleSheetsKeyValueStore(GoogleSheetsClient(settings.google_sheets))
    return JsonFileKeyValueStore(storage.json_path)
