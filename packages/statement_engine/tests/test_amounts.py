from decimal import Decimal

import pytest

from packages.statement_engine.amounts import cell_at, normalize_amount, parse_amount
from packages.statement_engine.models import AmountFormat, ColumnMapping

SEPARATE = ColumnMapping(date=0, description=1, debit=2, credit=3)
UNIFIED = ColumnMapping(date=0, description=1, amount=2)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("50.00", Decimal("50.00")),
        ("-75", Decimal("-75")),
        ("$1,234.56", Decimal("1234.56")),
        ("INR 299.00", Decimal("299.00")),
        ("€ -12,50", Decimal("-1250")),
        (".5", Decimal("0.5")),
        ("1.234.56", Decimal("1.234")),
        ("", Decimal(0)),
        ("n/a", Decimal(0)),
        ("-", Decimal(0)),
        ("--5", Decimal(0)),
        (None, Decimal(0)),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_cell_at_out_of_range_and_blank():
    row = ["2024-01-02", "  ", "10"]
    assert cell_at(row, None) is None
    assert cell_at(row, 1) is None
    assert cell_at(row, 7) is None
    assert cell_at(row, 2) == "10"


def test_separate_debit_only():
    row = ["2024-01-02", "Rent", "50.00", ""]
    assert normalize_amount(row, SEPARATE, AmountFormat.SEPARATE) == Decimal("-50")


def test_separate_credit_only():
    row = ["2024-01-02", "Salary", "", "120.00"]
    assert normalize_amount(row, SEPARATE, AmountFormat.SEPARATE) == Decimal("120")


def test_separate_both_columns():
    row = ["2024-01-02", "Adjustment", "10", "25.50"]
    assert normalize_amount(row, SEPARATE, AmountFormat.SEPARATE) == Decimal("15.50")


def test_separate_short_row_defaults_to_zero():
    row = ["2024-01-02", "Balance brought forward"]
    assert normalize_amount(row, SEPARATE, AmountFormat.SEPARATE) == 0


def test_separate_ignores_unified_column():
    mapping = ColumnMapping(date=0, amount=1, debit=2)
    row = ["2024-01-02", "999", "5"]
    assert normalize_amount(row, mapping, AmountFormat.SEPARATE) == Decimal("-5")


def test_unified_and_reverse():
    row = ["2024-01-02", "Groceries", "75.00"]
    assert normalize_amount(row, UNIFIED, AmountFormat.UNIFIED) == Decimal("75")
    assert normalize_amount(row, UNIFIED, AmountFormat.UNIFIED_REVERSE) == Decimal("-75")


def test_unified_reverse_turns_refund_positive():
    row = ["2024-01-02", "Refund", "-20.00"]
    assert normalize_amount(row, UNIFIED, AmountFormat.UNIFIED_REVERSE) == Decimal("20")


def test_unified_without_amount_column_is_zero():
    row = ["2024-01-02", "Coffee", "4.50"]
    mapping = ColumnMapping(date=0, description=1)
    assert normalize_amount(row, mapping, "unified") == 0


@pytest.mark.parametrize("text", ["１２", "٤٥.00", "$５"])
def test_non_ascii_digits_are_not_numbers(text):
    assert parse_amount(text) == 0
