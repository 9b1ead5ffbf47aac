"""
Audit Models for the Weekly Ledger

Every change to the ledger and every swallowed storage failure is logged.
This provides:
1. Traceability of what was added, deleted and archived
2. Debugging information when a read silently fell back to a default
3. A record of weeks the lazy rollover could not archive

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    INCOME_ADDED = "income_added"
    INCOME_DELETED = "income_deleted"

    # Settings
    WEEKLY_LIMIT_SET = "weekly_limit_set"

    # Rollover
    LEDGER_INITIALIZED = "ledger_initialized"
    WEEK_ARCHIVED = "week_archived"
    WEEKS_SKIPPED = "weeks_skipped"

    # Failures handled by the error policy
    STORAGE_FAILURE = "storage_failure"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant ledger action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'income', 'week')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, "Food", amount)
        event = AuditEventBuilder.week_archived(week_start, total, 3, 1)
    """

    @staticmethod
    def expense_added(
        expense_id: str,
        category: str,
        amount: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {category} {amount}",
            details={
                "category": category,
                "amount": str(amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def income_added(income_id: str, amount: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INCOME_ADDED,
            entity_type="income",
            entity_id=income_id,
            description=f"Income added: {amount}",
            details={"amount": str(amount)},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        entity_type: str,
        entity_id: str,
        found: bool,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.EXPENSE_DELETED
            if entity_type == "expense"
            else AuditEventType.INCOME_DELETED
        )
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=(
                f"{entity_type.capitalize()} deleted"
                if found
                else f"{entity_type.capitalize()} not found, nothing deleted"
            ),
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def weekly_limit_set(limit: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WEEKLY_LIMIT_SET,
            entity_type="settings",
            description=f"Weekly limit set to {limit}",
            details={"weekly_limit": str(limit)},
            is_user_action=True,
        )

    @staticmethod
    def ledger_initialized(week_start: datetime) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_INITIALIZED,
            entity_type="week",
            entity_id=week_start.isoformat(),
            description="First run: reset marker recorded",
        )

    @staticmethod
    def week_archived(
        week_start: datetime,
        total: Decimal,
        expense_count: int,
        income_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WEEK_ARCHIVED,
            entity_type="week",
            entity_id=week_start.isoformat(),
            description=f"Week of {week_start:%Y-%m-%d} archived with net total {total}",
            details={
                "total": str(total),
                "expense_count": expense_count,
                "income_count": income_count,
            },
        )

    @staticmethod
    def weeks_skipped(
        archived_week: datetime,
        current_week: datetime,
        skipped: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WEEKS_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="week",
            entity_id=current_week.isoformat(),
            description=f"{skipped} week(s) between rollovers were not archived",
            details={
                "archived_week": archived_week.isoformat(),
                "current_week": current_week.isoformat(),
                "skipped_weeks": skipped,
            },
        )

    @staticmethod
    def storage_failure(
        error_kind: str,
        recovery: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        # Failures that propagate are errors; recovered ones are warnings.
        severity = (
            AuditSeverity.ERROR
            if recovery == "propagate"
            else AuditSeverity.WARNING
        )
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FAILURE,
            severity=severity,
            description=f"Storage failure ({error_kind}), recovery: {recovery}",
            error_code=error_kind,
            error_message=error_message,
            details=details or {},
        )
