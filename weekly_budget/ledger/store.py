"""
Ledger Store

The one object the presentation layer talks to. It owns the key-value
backend handed to it, the per-key locks and the rollover engine, and
exposes every ledger operation as a coroutine.

Each accessor of the open week runs the rollover check first, so a week
boundary is noticed whichever screen happens to load first.

DESIGN DECISION: Whole documents are read, modified and written back
under a per-key lock. Two overlapping adds cannot lose each other's
update.

DESIGN DECISION: Failures are routed through ERROR_POLICY:
- Plain reads return a safe default (0, empty list)
- Add/delete propagate both read and write failures to the caller
- Weekly-limit writes are logged and swallowed
- Invalid amounts and categories are rejected before anything is written
"""

from collections.abc import Collection
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from weekly_budget.audit.logger import AuditLogger
from weekly_budget.ledger.aggregator import (
    build_all_weeks,
    current_week_summary,
    week_detail,
)
from weekly_budget.ledger.documents import (
    ARCHIVED_WEEKS_KEY,
    EXPENSES_KEY,
    INCOME_KEY,
    WEEKLY_LIMIT_KEY,
    LedgerDocuments,
)
from weekly_budget.ledger.errors import ErrorKind, LedgerValidationError, handle_failure
from weekly_budget.ledger.parsing import parse_amount
from weekly_budget.ledger.rollover import RolloverEngine
from weekly_budget.ledger.weeks import get_week_start
from weekly_budget.models.ledger import (
    Expense,
    ExpenseDraft,
    Income,
    WeekDetail,
    WeekRecord,
    WeekSummary,
)
from weekly_budget.services.storage import KeyedLock, KeyValueStore, StorageError


AmountInput = Union[str, int, float, Decimal]


def new_record_id(now: datetime, taken: Collection[str] = ()) -> str:
    """
    Time-derived id: milliseconds since the epoch.

    Two records created within the same millisecond get a "-1", "-2", ...
    suffix, so ids stay unique within their list.
    """
    base = str(int(now.timestamp() * 1000))
    candidate = base
    suffix = 0
    while candidate in taken:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


def make_expense_draft(
    amount: AmountInput,
    category: str,
    description: str = "",
) -> ExpenseDraft:
    """
    Build a draft from raw form input.

    Raises:
        LedgerValidationError: If the amount or category is not acceptable
    """
    parsed = parse_amount(amount)
    try:
        return ExpenseDraft(amount=parsed, category=category, description=description)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "draft"
        raise LedgerValidationError(field, error["msg"]) from e


class LedgerStore:
    """
    Weekly ledger over an injected key-value backend.

    Usage:
        store = LedgerStore(InMemoryKeyValueStore())
        await store.set_weekly_limit("150")
        await store.add_expense(make_expense_draft("12,50", "Food"))
        summary = await store.get_current_week_summary()
    """

    def __init__(
        self,
        backend: KeyValueStore,
        clock: Callable[[], datetime] = datetime.now,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._documents = LedgerDocuments(backend)
        self._locks = KeyedLock()
        self._clock = clock
        self._audit_logger = audit_logger
        self._rollover = RolloverEngine(
            documents=self._documents,
            locks=self._locks,
            clock=clock,
            audit_logger=audit_logger,
        )

    @property
    def backend(self) -> KeyValueStore:
        return self._backend

    def _failed(self, kind: ErrorKind, error: Exception, default: Any = None, **details: Any) -> Any:
        return handle_failure(kind, error, self._audit_logger, default=default, **details)

    async def check_and_reset_week(self) -> bool:
        return await self._rollover.check_and_reset_week()

    async def aclose(self) -> None:
        """Release the backend. The store must not be used afterwards."""
        await self._backend.aclose()

    # =========================================================================
    # WEEKLY LIMIT
    # =========================================================================

    async def get_weekly_limit(self) -> Decimal:
        """The weekly limit, or 0 when none is set or it cannot be read."""
        try:
            limit = await self._documents.read_weekly_limit()
        except StorageError as e:
            return self._failed(ErrorKind.STORAGE_READ, e, default=Decimal("0"), key=WEEKLY_LIMIT_KEY)
        return limit if limit is not None else Decimal("0")

    async def set_weekly_limit(self, value: AmountInput) -> Decimal:
        """
        Store a new weekly limit.

        Args:
            value: User input; "150", "150,00" and Decimal("150") are equivalent

        Returns:
            The parsed limit

        Raises:
            LedgerValidationError: If the value is not a number above zero
        """
        limit = parse_amount(value, field="weekly_limit")

        async with self._locks.hold(WEEKLY_LIMIT_KEY):
            try:
                await self._documents.write_weekly_limit(limit)
            except StorageError as e:
                return self._failed(ErrorKind.SETTINGS_WRITE, e, default=limit, key=WEEKLY_LIMIT_KEY)

        if self._audit_logger:
            self._audit_logger.log_weekly_limit_set(limit)
        return limit

    async def is_onboarded(self) -> bool:
        """True once a weekly limit has been stored."""
        try:
            return await self._documents.read_weekly_limit() is not None
        except StorageError as e:
            return self._failed(ErrorKind.STORAGE_READ, e, default=False, key=WEEKLY_LIMIT_KEY)

    # =========================================================================
    # EXPENSES
    # =========================================================================

    async def get_expenses(self) -> list[Expense]:
        await self.check_and_reset_week()
        try:
            return await self._documents.read_expenses()
        except StorageError as e:
            return self._failed(ErrorKind.STORAGE_READ, e, default=[], key=EXPENSES_KEY)

    async def add_expense(
        self,
        draft: Union[ExpenseDraft, Mapping[str, Any]],
    ) -> Expense:
        """
        Record an expense in the open week, stamped with the current time.

        Raises:
            LedgerValidationError: If the draft is invalid
            StorageError: If the expense list cannot be read or written
        """
        if not isinstance(draft, ExpenseDraft):
            draft = make_expense_draft(
                amount=draft.get("amount"),
                category=draft.get("category"),
                description=draft.get("description") or "",
            )

        await self.check_and_reset_week()

        async with self._locks.hold(EXPENSES_KEY):
            try:
                expenses = await self._documents.read_expenses()
            except StorageError as e:
                expenses = self._failed(ErrorKind.MUTATION_READ, e, default=[], key=EXPENSES_KEY)

            now = self._clock()
            expense = Expense(
                id=new_record_id(now, {existing.id for existing in expenses}),
                amount=draft.amount,
                category=draft.category,
                description=draft.description,
                date=now,
            )

            try:
                await self._documents.write_expenses([*expenses, expense])
            except StorageError as e:
                self._failed(ErrorKind.STORAGE_WRITE, e, key=EXPENSES_KEY)

        if self._audit_logger:
            self._audit_logger.log_expense_added(expense)
        return expense

    async def delete_expense(self, expense_id: str) -> bool:
        """
        Remove an expense from the open week.

        Returns:
            False if no expense had that id (nothing is written)
        """
        found = await self._delete_from(EXPENSES_KEY, expense_id)
        if self._audit_logger:
            self._audit_logger.log_transaction_deleted("expense", expense_id, found)
        return found

    # =========================================================================
    # INCOME
    # =========================================================================

    async def get_income(self) -> list[Income]:
        await self.check_and_reset_week()
        try:
            return await self._documents.read_income()
        except StorageError as e:
            return self._failed(ErrorKind.STORAGE_READ, e, default=[], key=INCOME_KEY)

    async def add_income(self, amount: AmountInput) -> Income:
        """
        Record income in the open week, stamped with the current time.

        Raises:
            LedgerValidationError: If the amount is not a number above zero
            StorageError: If the income list cannot be read or written
        """
        parsed = parse_amount(amount)

        await self.check_and_reset_week()

        async with self._locks.hold(INCOME_KEY):
            try:
                income = await self._documents.read_income()
            except StorageError as e:
                income = self._failed(ErrorKind.MUTATION_READ, e, default=[], key=INCOME_KEY)

            now = self._clock()
            entry = Income(
                id=new_record_id(now, {existing.id for existing in income}),
                amount=parsed,
                date=now,
            )

            try:
                await self._documents.write_income([*income, entry])
            except StorageError as e:
                self._failed(ErrorKind.STORAGE_WRITE, e, key=INCOME_KEY)

        if self._audit_logger:
            self._audit_logger.log_income_added(entry)
        return entry

    async def delete_income(self, income_id: str) -> bool:
        """Remove an income entry from the open week. False if absent."""
        found = await self._delete_from(INCOME_KEY, income_id)
        if self._audit_logger:
            self._audit_logger.log_transaction_deleted("income", income_id, found)
        return found

    async def _delete_from(self, key: str, record_id: str) -> bool:
        if key == EXPENSES_KEY:
            read, write = self._documents.read_expenses, self._documents.write_expenses
        else:
            read, write = self._documents.read_income, self._documents.write_income

        await self.check_and_reset_week()

        async with self._locks.hold(key):
            try:
                records = await read()
            except StorageError as e:
                records = self._failed(ErrorKind.MUTATION_READ, e, default=[], key=key)

            remaining = [record for record in records if record.id != record_id]
            if len(remaining) == len(records):
                return False

            try:
                await write(remaining)
            except StorageError as e:
                self._failed(ErrorKind.STORAGE_WRITE, e, key=key, record_id=record_id)
        return True

    # =========================================================================
    # WEEKS
    # =========================================================================

    async def get_archived_weeks(self) -> list[WeekRecord]:
        """Closed weeks as stored, oldest first."""
        try:
            return await self._documents.read_archived_weeks()
        except StorageError as e:
            return self._failed(ErrorKind.STORAGE_READ, e, default=[], key=ARCHIVED_WEEKS_KEY)

    async def get_all_weeks(self) -> list[WeekRecord]:
        """The open week (see build_all_weeks) and the archive, newest first."""
        expenses = await self.get_expenses()
        income = await self.get_income()
        archived = await self.get_archived_weeks()
        return build_all_weeks(
            current_week_start=get_week_start(self._clock()),
            expenses=expenses,
            income=income,
            archived_weeks=archived,
        )

    async def get_current_week_summary(self) -> WeekSummary:
        expenses = await self.get_expenses()
        income = await self.get_income()
        limit = await self.get_weekly_limit()
        return current_week_summary(expenses, income, limit)

    async def get_week_detail(self, week: WeekRecord) -> WeekDetail:
        return week_detail(week, await self.get_weekly_limit())
