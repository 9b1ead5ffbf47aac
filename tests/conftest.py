"""
Shared fixtures for the ledger tests.

No test touches the network or the real clock: stores run on the
in-memory backend and time comes from FrozenClock.
"""

from datetime import datetime, timedelta
from typing import Optional

import pytest

from weekly_budget.audit import AuditLogger
from weekly_budget.ledger import LedgerStore
from weekly_budget.services.storage import (
    InMemoryKeyValueStore,
    StorageReadError,
    StorageWriteError,
)


# Wednesday of the week starting Monday 2024-03-11
WEDNESDAY = datetime(2024, 3, 13, 14, 30)
THIS_MONDAY = datetime(2024, 3, 11)
LAST_MONDAY = datetime(2024, 3, 4)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = WEDNESDAY):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FlakyKeyValueStore(InMemoryKeyValueStore):
    """In-memory store that fails on chosen keys."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.failing_reads: set[str] = set()
        self.failing_writes: set[str] = set()

    async def get_item(self, key: str) -> Optional[str]:
        if key in self.failing_reads:
            raise StorageReadError(f"read of '{key}' failed")
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        if key in self.failing_writes:
            raise StorageWriteError(f"write of '{key}' failed")
        await super().set_item(key, value)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def backend() -> FlakyKeyValueStore:
    return FlakyKeyValueStore()


@pytest.fixture
def store(backend, clock) -> LedgerStore:
    return LedgerStore(backend, clock=clock, audit_logger=AuditLogger())
