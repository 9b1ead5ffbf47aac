"""
Core Data Models for the Weekly Ledger

These models define the strict schemas for every document the ledger
persists and every view it derives. They are designed to:
1. Enforce positive amounts and a fixed category set at runtime
2. Round-trip through the key-value store as plain JSON
3. Read documents written with the camelCase key names of the store

DESIGN DECISION: Money is Decimal, never float.
Weekly totals are sums of many small amounts and must not drift.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Stored by value, so the capitalized names are part of the
    persisted format.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS = "Bills"
    HEALTH = "Health"
    OTHER = "Other"


def _as_local_naive(value: datetime) -> datetime:
    """Week boundaries are local wall-clock instants, so drop any offset."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# =============================================================================
# TRANSACTIONS
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    What the user enters for a new expense.

    The store stamps id and date when the draft is recorded.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    description: str = Field(
        default="",
        max_length=200,
        description="Optional free-text note"
    )


class Expense(BaseModel):
    """
    A recorded expense.

    Immutable once created; the only lifecycle change is deletion
    from the open week.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque id, unique within the open expense list"
    )
    amount: Decimal = Field(..., gt=0)
    category: ExpenseCategory
    description: str = ""
    date: datetime = Field(
        ...,
        description="When the expense was recorded"
    )

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return _as_local_naive(v)


class Income(BaseModel):
    """A recorded income entry. Same lifecycle rules as Expense."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    date: datetime

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return _as_local_naive(v)


# =============================================================================
# WEEKS
# =============================================================================

class WeekRecord(BaseModel):
    """
    One calendar week of transactions.

    week_start (Monday 00:00 local) is the natural key. Archived
    records are frozen: their lists and total never change again.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    week_start: datetime = Field(
        ...,
        alias="weekStart",
        description="Monday 00:00:00.000 of the week"
    )
    expenses: list[Expense] = Field(default_factory=list)
    income: list[Income] = Field(default_factory=list)
    total: Decimal = Field(
        default=Decimal("0"),
        description="Net total: expenses minus income"
    )
    is_current: bool = Field(
        default=False,
        alias="isCurrent",
        description="True only for the open week"
    )

    @field_validator("week_start")
    @classmethod
    def normalize_week_start(cls, v: datetime) -> datetime:
        return _as_local_naive(v)

    @property
    def has_transactions(self) -> bool:
        return bool(self.expenses or self.income)

    def to_archive_dict(self) -> dict[str, Any]:
        """Shape stored under archivedWeeks (isCurrent is not persisted)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"is_current"})


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class WeekSummary(BaseModel):
    """Budget status of the open week."""
    total_spent: Decimal
    total_income: Decimal
    remaining: Decimal = Field(
        ...,
        ge=0,
        description="Budget left, never below zero"
    )
    percentage_used: Decimal = Field(
        ...,
        description="Share of the weekly limit spent, 0 when no limit is set"
    )

    @property
    def is_over_budget(self) -> bool:
        return self.percentage_used > 100


class CategoryShare(BaseModel):
    """Spending of one category within a week."""
    category: ExpenseCategory
    amount: Decimal
    percentage_of_total: Decimal


class WeekDetail(BaseModel):
    """Everything needed to show a single week."""
    week: WeekRecord
    week_range: str
    weekly_limit: Decimal
    remaining: Decimal = Field(
        ...,
        description="Limit minus net total; negative when overspent"
    )
    breakdown: list[CategoryShare] = Field(default_factory=list)
    expenses_newest_first: list[Expense] = Field(default_factory=list)
