"""Signed amount computation across the three statement sign conventions."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from .models import AmountFormat, ColumnMapping

_NON_NUMERIC = re.compile(r"[^-\d.]", re.ASCII)
_LEADING_NUMBER = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)", re.ASCII)

ZERO = Decimal(0)


def cell_at(row: Sequence[str], index: Optional[int]) -> Optional[str]:
    """Trimmed cell text, or None when unmapped, out of range or empty."""
    if index is None or index >= len(row):
        return None
    value = str(row[index]).strip()
    return value or None


def parse_amount(text: Optional[str]) -> Decimal:
    """
    Parse an amount cell into a Decimal.

    Currency symbols, thousands separators and other decoration are removed
    first; only digits, "-" and "." survive. The longest leading number is
    read, so "1.234.56" gives 1.234. Anything unreadable is zero.
    """
    if not text:
        return ZERO

    cleaned = _NON_NUMERIC.sub("", text)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return ZERO

    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return ZERO


def normalize_amount(
    row: Sequence[str], mapping: ColumnMapping, amount_format: AmountFormat
) -> Decimal:
    """Compute the row's effect on the account balance (positive = inflow)."""
    amount_format = AmountFormat(amount_format)

    if amount_format is AmountFormat.SEPARATE:
        # Debit is money out, credit is money in
        debit = parse_amount(cell_at(row, mapping.debit) or "0")
        credit = parse_amount(cell_at(row, mapping.credit) or "0")
        return credit - debit

    amount = parse_amount(cell_at(row, mapping.amount) or "0")
    if amount_format is AmountFormat.UNIFIED_REVERSE:
        # Credit cards: positive = expense, so we negate it
        return -amount
    return amount
