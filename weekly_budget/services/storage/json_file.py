"""
JSON File Storage Implementation

DESIGN DECISION: The default backend is a single JSON object on disk,
mapping keys to their string values. It is:
1. Durable across restarts with no setup
2. Human-readable for a personal ledger
3. Small enough to rewrite completely on every change

Writes go to a temporary file in the same directory which then replaces
the ledger file, so a crash mid-write never leaves it truncated.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from weekly_budget.services.storage.interface import (
    KeyValueStore,
    StorageReadError,
    StorageWriteError,
)


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-backed key-value store.

    The file is loaded once and then kept in memory; every write persists
    the whole mapping. File I/O runs in a worker thread.
    """

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        self._data: Optional[dict[str, str]] = None
        # Different keys share one file, so writes must not interleave.
        self._file_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the mapping from disk (empty if the file does not exist yet)."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageReadError(f"Failed to read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Corrupt storage file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"Storage file {self._path} does not hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, data: dict[str, str]) -> None:
        """Atomically replace the file with the given mapping."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self._path}: {e}") from e

    async def _ensure_loaded(self) -> dict[str, str]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._load)
        return self._data

    async def get_item(self, key: str) -> Optional[str]:
        async with self._file_lock:
            data = await self._ensure_loaded()
            return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._file_lock:
            try:
                data = await self._ensure_loaded()
            except StorageReadError as e:
                raise StorageWriteError(f"Cannot update unreadable storage: {e}") from e
            updated = {**data, key: value}
            await asyncio.to_thread(self._dump, updated)
            self._data = updated

    async def remove_item(self, key: str) -> None:
        async with self._file_lock:
            try:
                data = await self._ensure_loaded()
            except StorageReadError as e:
                raise StorageWriteError(f"Cannot update unreadable storage: {e}") from e
            if key not in data:
                return
            updated = {k: v for k, v in data.items() if k != key}
            await asyncio.to_thread(self._dump, updated)
            self._data = updated
