"""
Decimal parsing for user-entered amounts.

Amounts arrive as typed text, with either a dot or a comma as the decimal
separator ("10.50" or "10,50"). Parsing never guesses: anything without a
leading number is NaN, and callers must treat NaN as a validation failure.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Final, Union

from weekly_budget.ledger.errors import LedgerValidationError


NAN: Final[Decimal] = Decimal("NaN")

# Longest valid leading number, the way a lenient float parser reads it.
_LEADING_NUMBER = re.compile(
    r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
)


def parse_decimal(value: Union[str, int, float, Decimal]) -> Decimal:
    """
    Normalize a user-entered number.

    Only the first comma is turned into a dot, so thousands separators are
    not understood: "1,000,50" reads as 1.000 and the rest is ignored.

    Returns:
        The parsed Decimal, or Decimal("NaN") for empty, separator-only or
        non-numeric input and for unsupported types
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        return NAN

    text = str(value).strip()
    if text in ("", ".", ","):
        return NAN

    normalized = text.replace(",", ".", 1)
    match = _LEADING_NUMBER.match(normalized)
    if match is None:
        return NAN

    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return NAN


def parse_amount(value: Union[str, int, float, Decimal], field: str = "amount") -> Decimal:
    """
    Parse an amount the ledger may store.

    Raises:
        LedgerValidationError: If the value is not a finite number above zero
    """
    amount = parse_decimal(value)
    if not amount.is_finite():
        raise LedgerValidationError(field, f"'{value}' is not a valid number")
    if amount <= 0:
        raise LedgerValidationError(field, "must be greater than zero")
    return amount
