"""
Tests for Weekly Budget

Test strategy:
1. Unit tests for pure components (models, parsing, weeks, aggregates)
2. Store and rollover tests against the in-memory backend
3. No real API calls in tests (Google Sheets is faked)
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from weekly_budget.models.ledger import (
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    Income,
    WeekRecord,
    WeekSummary,
)
from weekly_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for ledger Pydantic models."""

    def test_expense_creation(self):
        """Test Expense model creation."""
        expense = Expense(
            id="1710340200000",
            amount=Decimal("25.00"),
            category=ExpenseCategory.FOOD,
            description="Lunch",
            date=datetime(2024, 3, 13, 12, 0),
        )
        assert expense.amount == Decimal("25.00")
        assert expense.category == ExpenseCategory.FOOD

    def test_expense_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in ("0", "-5"):
            with pytest.raises(ValueError):
                Expense(
                    id="1",
                    amount=Decimal(amount),
                    category=ExpenseCategory.OTHER,
                    date=datetime(2024, 3, 13),
                )

    def test_expense_is_frozen(self):
        """Test that a recorded expense cannot be edited."""
        expense = Expense(
            id="1",
            amount=Decimal("5"),
            category=ExpenseCategory.OTHER,
            date=datetime(2024, 3, 13),
        )
        with pytest.raises(ValueError):
            expense.amount = Decimal("6")

    def test_expense_rejects_unknown_category(self):
        """Test that only the fixed category set is accepted."""
        with pytest.raises(ValueError):
            Expense(id="1", amount=Decimal("5"), category="Rent", date=datetime(2024, 3, 13))

    def test_expense_reads_stored_json(self):
        """Test that a stored expense with a UTC timestamp is read as local time."""
        expense = Expense.model_validate({
            "id": "1710340200000",
            "amount": 25,
            "category": "Food",
            "description": "",
            "date": "2024-03-13T14:30:00.000Z",
        })
        expected = datetime(2024, 3, 13, 14, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert expense.date == expected
        assert expense.date.tzinfo is None

    def test_draft_strips_description(self):
        """Test that whitespace is stripped from the description."""
        draft = ExpenseDraft(amount=Decimal("3"), category=ExpenseCategory.FOOD, description="  coffee  ")
        assert draft.description == "coffee"

    def test_draft_description_length_limit(self):
        """Test description must be at most 200 characters."""
        with pytest.raises(ValueError):
            ExpenseDraft(amount=Decimal("3"), category=ExpenseCategory.FOOD, description="x" * 201)

    def test_income_rejects_zero(self):
        """Test that income must be positive."""
        with pytest.raises(ValueError):
            Income(id="1", amount=Decimal("0"), date=datetime(2024, 3, 13))

    def test_week_record_archive_dict(self):
        """Test archived shape uses camelCase keys and drops isCurrent."""
        week = WeekRecord(
            week_start=datetime(2024, 3, 11),
            expenses=[
                Expense(id="1", amount=Decimal("30"), category=ExpenseCategory.FOOD, date=datetime(2024, 3, 12)),
            ],
            total=Decimal("30"),
            is_current=True,
        )
        stored = week.to_archive_dict()
        assert stored["weekStart"] == "2024-03-11T00:00:00"
        assert stored["total"] == "30"
        assert "isCurrent" not in stored
        assert stored["expenses"][0]["category"] == "Food"

    def test_week_record_accepts_alias_and_field_name(self):
        """Test that weekStart and week_start both populate the record."""
        by_alias = WeekRecord.model_validate({"weekStart": "2024-03-11T00:00:00", "total": "0"})
        by_name = WeekRecord(week_start=datetime(2024, 3, 11))
        assert by_alias.week_start == by_name.week_start
        assert by_alias.is_current is False

    def test_week_record_has_transactions(self):
        """Test the has_transactions flag."""
        empty = WeekRecord(week_start=datetime(2024, 3, 11))
        with_income = WeekRecord(
            week_start=datetime(2024, 3, 11),
            income=[Income(id="1", amount=Decimal("10"), date=datetime(2024, 3, 12))],
        )
        assert empty.has_transactions is False
        assert with_income.has_transactions is True

    def test_week_summary_over_budget(self):
        """Test is_over_budget above 100 percent."""
        summary = WeekSummary(
            total_spent=Decimal("120"),
            total_income=Decimal("0"),
            remaining=Decimal("0"),
            percentage_used=Decimal("120"),
        )
        assert summary.is_over_budget is True

    def test_week_summary_remaining_never_negative(self):
        """Test that remaining below zero is rejected."""
        with pytest.raises(ValueError):
            WeekSummary(
                total_spent=Decimal("1"),
                total_income=Decimal("0"),
                remaining=Decimal("-1"),
                percentage_used=Decimal("1"),
            )


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Test expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.WEEK_ARCHIVED,
            description="Week archived",
            details={"total": "40", "expense_count": 2},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "week_archived"
        assert log_dict["details"]["total"] == "40"

    def test_audit_event_builder_expense_added(self):
        """Test AuditEventBuilder.expense_added."""
        event = AuditEventBuilder.expense_added(
            expense_id="1710340200000",
            category="Food",
            amount=Decimal("25.00"),
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_id == "1710340200000"
        assert event.details["amount"] == "25.00"
        assert event.is_user_action is True

    def test_audit_event_builder_transaction_deleted(self):
        """Test deleted events pick the type from the entity."""
        expense_event = AuditEventBuilder.transaction_deleted("expense", "1", found=True)
        income_event = AuditEventBuilder.transaction_deleted("income", "2", found=False)
        assert expense_event.event_type == AuditEventType.EXPENSE_DELETED
        assert income_event.event_type == AuditEventType.INCOME_DELETED
        assert income_event.details == {"found": False}

    def test_audit_event_builder_weeks_skipped_is_warning(self):
        """Test that skipped weeks are logged as a warning."""
        monday = datetime(2024, 3, 11)
        event = AuditEventBuilder.weeks_skipped(
            archived_week=monday - timedelta(weeks=3),
            current_week=monday,
            skipped=2,
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.details["skipped_weeks"] == 2

    def test_audit_event_builder_storage_failure_severity(self):
        """Test propagated failures are errors and recovered ones warnings."""
        propagated = AuditEventBuilder.storage_failure("storage_write", "propagate", "disk full")
        recovered = AuditEventBuilder.storage_failure("storage_read", "use_default", "unreadable")
        assert propagated.severity == AuditSeverity.ERROR
        assert recovered.severity == AuditSeverity.WARNING
        assert propagated.error_code == "storage_write"
