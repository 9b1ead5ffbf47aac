"""
Rollover Engine

Runs lazily at every ledger entry point and decides whether the open week
has ended since the last check:

    NO_RESET_RECORDED -> record the reset marker, nothing to archive
    SAME_WEEK         -> nothing to do
    NEW_WEEK          -> move the reset marker, archive the outgoing week,
                         clear the open lists

DESIGN DECISION: The check never raises. Every failure goes through the
error policy, which logs it and lets the ledger read carry on.

DESIGN DECISION: Only one week is archived per rollover. If the ledger was
not used for several weeks, whatever was open is archived under the week
of the last reset and the weeks in between get no record. This is kept,
and logged as a WEEKS_SKIPPED warning.
"""

from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from weekly_budget.audit.logger import AuditLogger
from weekly_budget.ledger.aggregator import net_total
from weekly_budget.ledger.documents import (
    ARCHIVED_WEEKS_KEY,
    EXPENSES_KEY,
    INCOME_KEY,
    LAST_RESET_KEY,
    LedgerDocuments,
)
from weekly_budget.ledger.errors import ErrorKind, handle_failure
from weekly_budget.ledger.weeks import get_week_start, weeks_between
from weekly_budget.models.ledger import WeekRecord
from weekly_budget.services.storage import KeyedLock, StorageError


class RolloverState(str, Enum):
    """Where the ledger stands relative to the last recorded reset."""
    NO_RESET_RECORDED = "no_reset_recorded"
    SAME_WEEK = "same_week"
    NEW_WEEK = "new_week"


def classify(last_reset: Optional[datetime], now: datetime) -> RolloverState:
    if last_reset is None:
        return RolloverState.NO_RESET_RECORDED
    if get_week_start(last_reset) == get_week_start(now):
        return RolloverState.SAME_WEEK
    return RolloverState.NEW_WEEK


class RolloverEngine:
    """
    Detects week boundaries and archives the outgoing week.

    Shares the ledger's KeyedLock. The reset marker is always locked
    before the lists it archives, never the other way round.
    """

    def __init__(
        self,
        documents: LedgerDocuments,
        locks: KeyedLock,
        clock: Callable[[], datetime] = datetime.now,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._documents = documents
        self._locks = locks
        self._clock = clock
        self._audit_logger = audit_logger

    async def check_and_reset_week(self) -> bool:
        """
        Run the boundary check.

        Returns:
            True if the week rolled over (even if archiving failed)
        """
        current_week = get_week_start(self._clock())

        async with self._locks.hold(LAST_RESET_KEY):
            try:
                last_reset = await self._documents.read_last_reset()
            except StorageError as e:
                return handle_failure(
                    ErrorKind.STORAGE_READ, e, self._audit_logger,
                    default=False, key=LAST_RESET_KEY,
                )

            state = classify(last_reset, current_week)
            if state is RolloverState.SAME_WEEK:
                return False

            try:
                await self._documents.write_last_reset(current_week)
            except StorageError as e:
                return handle_failure(
                    ErrorKind.ROLLOVER_WRITE, e, self._audit_logger,
                    default=False, key=LAST_RESET_KEY,
                )

            if state is RolloverState.NO_RESET_RECORDED:
                if self._audit_logger:
                    self._audit_logger.log_ledger_initialized(current_week)
                return False

            outgoing_week = get_week_start(last_reset)
            skipped = weeks_between(outgoing_week, current_week) - 1
            if skipped > 0 and self._audit_logger:
                self._audit_logger.log_weeks_skipped(
                    archived_week=outgoing_week,
                    current_week=current_week,
                    skipped=skipped,
                )

            await self._archive_week(outgoing_week)
            return True

    async def _archive_week(self, week_start: datetime) -> None:
        """Append the open week to the archive and clear the open lists."""
        async with self._locks.hold(EXPENSES_KEY, INCOME_KEY, ARCHIVED_WEEKS_KEY):
            try:
                expenses = await self._documents.read_expenses()
                income = await self._documents.read_income()
                archived = await self._documents.read_archived_weeks()

                record = WeekRecord(
                    week_start=week_start,
                    expenses=expenses,
                    income=income,
                    total=net_total(expenses, income),
                )
                await self._documents.write_archived_weeks([*archived, record])
                await self._documents.write_expenses([])
                await self._documents.write_income([])
            except StorageError as e:
                handle_failure(
                    ErrorKind.ROLLOVER_WRITE, e, self._audit_logger,
                    week_start=week_start.isoformat(),
                )
                return

        if self._audit_logger:
            self._audit_logger.log_week_archived(
                week_start=record.week_start,
                total=record.total,
                expense_count=len(record.expenses),
                income_count=len(record.income),
            )
