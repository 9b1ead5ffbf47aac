"""In-memory key-value backend, used for tests and throwaway sessions."""

from typing import Optional

from weekly_budget.services.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dictionary-backed store.

    Not durable: contents are lost with the process.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored, for inspection."""
        return dict(self._data)
