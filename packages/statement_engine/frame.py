"""pandas hand-off for collaborators that work on DataFrames (dedup, storage)."""

from typing import Iterable

import pandas as pd

from .models import ParsedTransaction

FRAME_COLUMNS = ["transaction_date", "amount", "description", "merchant", "category"]


def transactions_to_frame(transactions: Iterable[ParsedTransaction]) -> pd.DataFrame:
    """Convert transactions to a DataFrame, one row per transaction in order.

    Amounts stay ``Decimal`` (object dtype) so no precision is lost on the
    way to storage; dates stay ``datetime.date``.
    """
    records = [
        {
            "transaction_date": txn.transaction_date,
            "amount": txn.amount,
            "description": txn.description,
            "merchant": txn.merchant,
            "category": txn.category,
        }
        for txn in transactions
    ]
    return pd.DataFrame(records, columns=FRAME_COLUMNS)
