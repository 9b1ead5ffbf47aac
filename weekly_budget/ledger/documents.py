"""
Ledger documents in the key-value store.

Each key holds one whole document:

    weeklyLimit    stringified decimal
    expenses       JSON array of Expense
    income         JSON array of Income
    lastReset      ISO-8601 timestamp
    archivedWeeks  JSON array of WeekRecord (without isCurrent)

LedgerDocuments encodes and decodes them. A document that exists but
cannot be decoded is reported as StorageReadError, the same as a backend
that cannot be read.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Final, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from weekly_budget.ledger.parsing import parse_decimal
from weekly_budget.models.ledger import Expense, Income, WeekRecord
from weekly_budget.services.storage import KeyValueStore, StorageReadError


WEEKLY_LIMIT_KEY: Final[str] = "weeklyLimit"
EXPENSES_KEY: Final[str] = "expenses"
INCOME_KEY: Final[str] = "income"
LAST_RESET_KEY: Final[str] = "lastReset"
ARCHIVED_WEEKS_KEY: Final[str] = "archivedWeeks"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode_list(key: str, raw: Optional[str], model: type[ModelT]) -> list[ModelT]:
    if raw is None or not raw.strip():
        return []
    try:
        items = json.loads(raw)
        if not isinstance(items, list):
            raise ValueError("expected a JSON array")
        return [model.model_validate(item) for item in items]
    except (ValueError, ValidationError) as e:
        raise StorageReadError(f"Corrupt '{key}' document: {e}") from e


def _encode_list(items: list[BaseModel]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items])


class LedgerDocuments:
    """Typed access to the ledger's documents on a key-value backend."""

    def __init__(self, backend: KeyValueStore):
        self._backend = backend

    @property
    def backend(self) -> KeyValueStore:
        return self._backend

    # -- weekly limit -------------------------------------------------------

    async def read_weekly_limit(self) -> Optional[Decimal]:
        raw = await self._backend.get_item(WEEKLY_LIMIT_KEY)
        if raw is None:
            return None
        limit = parse_decimal(raw)
        if not limit.is_finite():
            raise StorageReadError(f"Corrupt '{WEEKLY_LIMIT_KEY}' document: {raw!r}")
        return limit

    async def write_weekly_limit(self, limit: Decimal) -> None:
        await self._backend.set_item(WEEKLY_LIMIT_KEY, str(limit))

    # -- open week ----------------------------------------------------------

    async def read_expenses(self) -> list[Expense]:
        raw = await self._backend.get_item(EXPENSES_KEY)
        return _decode_list(EXPENSES_KEY, raw, Expense)

    async def write_expenses(self, expenses: list[Expense]) -> None:
        await self._backend.set_item(EXPENSES_KEY, _encode_list(expenses))

    async def read_income(self) -> list[Income]:
        raw = await self._backend.get_item(INCOME_KEY)
        return _decode_list(INCOME_KEY, raw, Income)

    async def write_income(self, income: list[Income]) -> None:
        await self._backend.set_item(INCOME_KEY, _encode_list(income))

    # -- rollover -----------------------------------------------------------

    async def read_last_reset(self) -> Optional[datetime]:
        raw = await self._backend.get_item(LAST_RESET_KEY)
        if raw is None or not raw.strip():
            return None
        try:
            value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise StorageReadError(f"Corrupt '{LAST_RESET_KEY}' document: {raw!r}") from e
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value

    async def write_last_reset(self, value: datetime) -> None:
        await self._backend.set_item(LAST_RESET_KEY, value.isoformat())

    async def read_archived_weeks(self) -> list[WeekRecord]:
        raw = await self._backend.get_item(ARCHIVED_WEEKS_KEY)
        return _decode_list(ARCHIVED_WEEKS_KEY, raw, WeekRecord)

    async def write_archived_weeks(self, weeks: list[WeekRecord]) -> None:
        await self._backend.set_item(
            ARCHIVED_WEEKS_KEY,
            json.dumps([week.to_archive_dict() for week in weeks]),
        )
