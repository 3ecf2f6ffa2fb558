"""Record assembly - one pass from grid rows to canonical transactions."""

from typing import List

from .amounts import cell_at, normalize_amount
from .dates import resolve_date
from .errors import DateFormatError
from .models import Grid, ImportConfig, ParsedTransaction


def assemble(grid: Grid, config: ImportConfig) -> List[ParsedTransaction]:
    """
    Convert the data rows of ``grid`` into transactions.

    Rows after ``config.header_row_index`` are processed in order. A row is
    skipped when its amount is zero or its date cell is empty; a zero amount
    cannot be told apart from a non-transaction line such as a balance
    carry-forward, so genuine zero-value entries are dropped too.

    Raises:
        DateFormatError: a surviving row has a date no rule can resolve. The
            whole call fails; nothing is returned for earlier rows.
    """
    mapping = config.column_mapping
    transactions: List[ParsedTransaction] = []

    for i in range(config.header_row_index + 1, len(grid)):
        row = grid[i]

        amount = normalize_amount(row, mapping, config.amount_format)
        date_value = cell_at(row, mapping.date)

        # Skip transactions with zero amount or missing date
        if amount == 0 or date_value is None:
            continue

        try:
            transaction_date = resolve_date(date_value)
        except DateFormatError as e:
            raise DateFormatError(date_value, row_number=i + 1) from e

        transactions.append(
            ParsedTransaction(
                amount=amount,
                transaction_date=transaction_date,
                description=cell_at(row, mapping.description),
                merchant=cell_at(row, mapping.merchant),
                category=cell_at(row, mapping.category),
            )
        )

    return transactions
