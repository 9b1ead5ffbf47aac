"""
Weekly Ledger Package

Week arithmetic, amount parsing, the ledger store and its rollover engine.
"""

from weekly_budget.ledger.aggregator import (
    build_all_weeks,
    category_breakdown,
    current_week_summary,
    net_total,
    week_detail,
)
from weekly_budget.ledger.errors import (
    ERROR_POLICY,
    USER_FACING_ERROR_MESSAGE,
    ErrorKind,
    LedgerValidationError,
    RecoveryAction,
)
from weekly_budget.ledger.parsing import parse_amount, parse_decimal
from weekly_budget.ledger.rollover import RolloverEngine, RolloverState, classify
from weekly_budget.ledger.store import LedgerStore, make_expense_draft, new_record_id
from weekly_budget.ledger.weeks import (
    format_week_range,
    get_week_end,
    get_week_start,
    weeks_between,
)

__all__ = [
    # Parsing and weeks
    "format_week_range",
    "get_week_end",
    "get_week_start",
    "parse_amount",
    "parse_decimal",
    "weeks_between",
    # Store
    "LedgerStore",
    "make_expense_draft",
    "new_record_id",
    # Rollover
    "RolloverEngine",
    "RolloverState",
    "classify",
    # Aggregates
    "build_all_weeks",
    "category_breakdown",
    "current_week_summary",
    "net_total",
    "week_detail",
    # Errors
    "ERROR_POLICY",
    "USER_FACING_ERROR_MESSAGE",
    "ErrorKind",
    "LedgerValidationError",
    "RecoveryAction",
]
