from datetime import date
from decimal import Decimal

import pytest

from packages.statement_engine.models import (
    AmountFormat,
    ColumnMapping,
    ImportConfig,
    ParsedTransaction,
)


def test_import_config_round_trips_wire_shape():
    payload = {
        "headerRowIndex": 3,
        "columnMapping": {
            "date": 0,
            "description": 1,
            "merchant": None,
            "category": None,
            "amount": None,
            "debit": 2,
            "credit": 3,
        },
        "amountFormat": "separate",
    }

    config = ImportConfig.from_dict(payload)

    assert config.header_row_index == 3
    assert config.column_mapping.debit == 2
    assert config.amount_format is AmountFormat.SEPARATE
    assert config.to_dict() == payload


def test_missing_mapping_entries_default_to_none():
    config = ImportConfig.from_dict({"headerRowIndex": 0, "columnMapping": {"date": 0}})
    assert config.column_mapping == ColumnMapping(date=0)
    assert config.amount_format is AmountFormat.UNIFIED


def test_negative_indices_rejected():
    with pytest.raises(ValueError):
        ImportConfig(header_row_index=-1)
    with pytest.raises(ValueError):
        ColumnMapping(date=-2)


def test_unknown_amount_format_rejected():
    with pytest.raises(ValueError):
        ImportConfig(header_row_index=0, amount_format="sideways")


def test_parsed_transaction_to_dict():
    txn = ParsedTransaction(
        amount=Decimal("-4.50"),
        transaction_date=date(2024, 3, 7),
        description="Coffee",
    )
    assert txn.to_dict() == {
        "amount": "-4.50",
        "description": "Coffee",
        "merchant": None,
        "category": None,
        "transactionDate": "2024-03-07",
    }
