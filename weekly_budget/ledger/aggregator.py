"""
Weekly aggregates derived from raw transactions.

Nothing here touches storage: every function takes the documents it needs
and returns a view model, so the rules can be tested in isolation.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence, Union

from weekly_budget.ledger.weeks import format_week_range
from weekly_budget.models.ledger import (
    CategoryShare,
    Expense,
    ExpenseCategory,
    Income,
    WeekDetail,
    WeekRecord,
    WeekSummary,
)


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def sum_amounts(records: Iterable[Union[Expense, Income]]) -> Decimal:
    return sum((record.amount for record in records), ZERO)


def net_total(expenses: Iterable[Expense], income: Iterable[Income]) -> Decimal:
    """Expenses minus income: what the week cost overall."""
    return sum_amounts(expenses) - sum_amounts(income)


def current_week_summary(
    expenses: Sequence[Expense],
    income: Sequence[Income],
    weekly_limit: Decimal,
) -> WeekSummary:
    """
    Budget status of the open week.

    Income tops the budget up; remaining never goes below zero.
    """
    total_spent = sum_amounts(expenses)
    total_income = sum_amounts(income)
    remaining = max(ZERO, weekly_limit - total_spent + total_income)
    percentage_used = total_spent / weekly_limit * HUNDRED if weekly_limit > 0 else ZERO

    return WeekSummary(
        total_spent=total_spent,
        total_income=total_income,
        remaining=remaining,
        percentage_used=percentage_used,
    )


def category_breakdown(week: WeekRecord) -> list[CategoryShare]:
    """
    Spending per category, largest first.

    Percentages are taken against the week's net total, so a week with
    income can show shares adding up to more than 100.
    """
    totals: dict[ExpenseCategory, Decimal] = defaultdict(lambda: ZERO)
    for expense in week.expenses:
        totals[expense.category] += expense.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryShare(
            category=category,
            amount=amount,
            percentage_of_total=amount / week.total * HUNDRED if week.total > 0 else ZERO,
        )
        for category, amount in ordered
    ]


def current_week_record(
    week_start: datetime,
    expenses: Sequence[Expense],
    income: Sequence[Income],
) -> WeekRecord:
    return WeekRecord(
        week_start=week_start,
        expenses=list(expenses),
        income=list(income),
        total=net_total(expenses, income),
        is_current=True,
    )


def build_all_weeks(
    current_week_start: datetime,
    expenses: Sequence[Expense],
    income: Sequence[Income],
    archived_weeks: Sequence[WeekRecord],
) -> list[WeekRecord]:
    """
    The open week plus the archive, most recent first.

    The open week is listed when it has transactions, or when there is
    no archive yet so a fresh install never shows an empty list.
    """
    weeks: list[WeekRecord] = []

    if expenses or income or not archived_weeks:
        weeks.append(current_week_record(current_week_start, expenses, income))

    weeks.extend(
        week.model_copy(update={"is_current": False}) for week in archived_weeks
    )

    weeks.sort(key=lambda week: week.week_start, reverse=True)
    return weeks


def week_detail(week: WeekRecord, weekly_limit: Decimal) -> WeekDetail:
    """Everything shown for a single week, expenses newest first."""
    return WeekDetail(
        week=week,
        week_range=format_week_range(week.week_start),
        weekly_limit=weekly_limit,
        remaining=weekly_limit - week.total,
        breakdown=category_breakdown(week),
        expenses_newest_first=sorted(
            week.expenses, key=lambda expense: expense.date, reverse=True
        ),
    )
