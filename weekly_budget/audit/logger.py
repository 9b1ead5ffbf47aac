"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged, and so is every
storage failure the error policy decides to swallow. Without this a
silently defaulted read or a lost archive would leave no trace.

The audit logger:
- Writes structured events through structlog
- Logs locally only; events are not persisted to the ledger store
- Is injected into the ledger store, so tests can capture events
"""

import logging
import sys
from datetime import datetime
from decimal import Decimal
from typing import Optional

import structlog

from weekly_budget.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from weekly_budget.models.ledger import Expense, Income


PACKAGE_LOGGER = "weekly_budget"


_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _configure_structlog(json_logs: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[*_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    level: str = "INFO",
    json_logs: bool = True,
    force: bool = False,
) -> None:
    """
    Configure output for the application's logs.

    Called by the application factory. The stdout handler is only added
    when the root logger has none yet, unless `force` replaces the
    existing ones. The level applies to this package's loggers only.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        force=force,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(
        getattr(logging, level.upper(), logging.INFO)
    )
    _configure_structlog(json_logs)


# Configure structlog for local logging
_configure_structlog()


class AuditLogger:
    """
    Central audit logging service for the ledger.

    Logs events to the structured local log.
    """

    def __init__(self, logger_name: str = "weekly_budget.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_expense_added(self, expense: Expense) -> None:
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense.id,
            category=expense.category.value,
            amount=expense.amount,
        ))

    def log_income_added(self, income: Income) -> None:
        self.log(AuditEventBuilder.income_added(
            income_id=income.id,
            amount=income.amount,
        ))

    def log_transaction_deleted(
        self,
        entity_type: str,
        entity_id: str,
        found: bool,
    ) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            entity_type=entity_type,
            entity_id=entity_id,
            found=found,
        ))

    def log_weekly_limit_set(self, limit: Decimal) -> None:
        self.log(AuditEventBuilder.weekly_limit_set(limit))

    def log_ledger_initialized(self, week_start: datetime) -> None:
        self.log(AuditEventBuilder.ledger_initialized(week_start))

    def log_week_archived(
        self,
        week_start: datetime,
        total: Decimal,
        expense_count: int,
        income_count: int,
    ) -> None:
        """Log a completed rollover archive."""
        self.log(AuditEventBuilder.week_archived(
            week_start=week_start,
            total=total,
            expense_count=expense_count,
            income_count=income_count,
        ))

    def log_weeks_skipped(
        self,
        archived_week: datetime,
        current_week: datetime,
        skipped: int,
    ) -> None:
        """Log weeks the lazy rollover passed over without archiving."""
        self.log(AuditEventBuilder.weeks_skipped(
            archived_week=archived_week,
            current_week=current_week,
            skipped=skipped,
        ))

    def log_storage_failure(
        self,
        error_kind: str,
        recovery: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log a storage failure together with how it was handled."""
        self.log(AuditEventBuilder.storage_failure(
            error_kind=error_kind,
            recovery=recovery,
            error_message=error_message,
            details=details,
        ))
