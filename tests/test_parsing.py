"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from weekly_budget.ledger import LedgerValidationError, parse_amount, parse_decimal


class TestParseDecimal:
    """Tests for parse_decimal."""

    def test_comma_and_dot_are_equivalent(self):
        """Test "10,50" and "10.50" parse to the same value."""
        assert parse_decimal("10,50") == parse_decimal("10.50") == Decimal("10.50")

    @pytest.mark.parametrize("value", ["", ".", ",", "   ", "abc"])
    def test_non_numbers_are_nan(self, value):
        """Test empty, separator-only and non-numeric input."""
        assert parse_decimal(value).is_nan()

    def test_surrounding_whitespace_is_trimmed(self):
        """Test that whitespace around the number is ignored."""
        assert parse_decimal("  7,25 ") == Decimal("7.25")

    def test_trailing_garbage_is_ignored(self):
        """Test the longest leading number is used."""
        assert parse_decimal("12abc") == Decimal("12")

    def test_only_first_comma_is_replaced(self):
        """Test thousands separators are not understood."""
        assert parse_decimal("1,000,50") == Decimal("1.000")

    def test_numbers_pass_through(self):
        """Test int, float and Decimal input."""
        assert parse_decimal(3) == Decimal("3")
        assert parse_decimal(2.5) == Decimal("2.5")
        assert parse_decimal(Decimal("4.20")) == Decimal("4.20")

    @pytest.mark.parametrize("value", [None, True, [], {"amount": 1}])
    def test_unsupported_types_are_nan(self, value):
        """Test anything that is not text or a number."""
        assert parse_decimal(value).is_nan()

    def test_failure_is_never_zero(self):
        """Test that a failed parse is not coerced to 0."""
        assert parse_decimal("x") != Decimal("0")


class TestParseAmount:
    """Tests for parse_amount validation."""

    def test_valid_amount(self):
        """Test a positive amount is returned as Decimal."""
        assert parse_amount("25,00") == Decimal("25.00")

    @pytest.mark.parametrize("value", ["", "abc", "0", "-3", "0,00"])
    def test_invalid_amounts_are_rejected(self, value):
        """Test non-numbers and non-positive numbers raise."""
        with pytest.raises(LedgerValidationError):
            parse_amount(value)

    def test_error_names_the_field(self):
        """Test the validation error carries the field name."""
        with pytest.raises(LedgerValidationError) as exc_info:
            parse_amount("nope", field="weekly_limit")
        assert exc_info.value.field == "weekly_limit"
