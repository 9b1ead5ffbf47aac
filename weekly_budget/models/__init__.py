"""
Data Models Package

This package contains all Pydantic models used by the weekly ledger.
Every persisted document and derived view conforms to these schemas.
"""

from weekly_budget.models.ledger import (
    CategoryShare,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    Income,
    WeekDetail,
    WeekRecord,
    WeekSummary,
)
from weekly_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CategoryShare",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "Income",
    "WeekDetail",
    "WeekRecord",
    "WeekSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
