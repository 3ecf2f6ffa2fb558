"""Header row detection for statements that carry a title block above the table."""

import re
from typing import List, Sequence

from .models import Grid

HEADER_KEYWORDS = [
    # Date columns
    "date",
    "transaction date",
    "posting date",
    "posted date",
    # Description columns
    "description",
    "transaction",
    "details",
    "memo",
    "note",
    # Amount columns
    "amount",
    "debit",
    "credit",
    "withdrawal",
    "deposit",
    # Merchant columns
    "merchant",
    "payee",
    "vendor",
    "store",
    # Category columns
    "category",
    "type",
]

# Headers are never assumed to sit below this many rows.
MAX_HEADER_SCAN_ROWS = 10
MIN_KEYWORD_MATCHES = 2

_NON_WORD = re.compile(r"[^a-z0-9\s]")


def normalize_header_cell(cell: str) -> str:
    """Lower-case, strip punctuation and surrounding whitespace."""
    return _NON_WORD.sub("", str(cell).lower()).strip()


def count_keyword_matches(row: Sequence[str], keywords: List[str] = HEADER_KEYWORDS) -> int:
    """Number of cells in ``row`` that contain at least one header keyword."""
    matches = 0
    for cell in row:
        normalized = normalize_header_cell(cell)
        if normalized and any(keyword in normalized for keyword in keywords):
            matches += 1
    return matches


def detect_header_row(grid: Grid) -> int:
    """Find the header row in the grid.

    Returns the first row among the first ten with at least two cells that
    look like column labels. Falls back to row 0 when none qualifies; the
    caller may still override the choice.
    """
    for i, row in enumerate(grid[:MAX_HEADER_SCAN_ROWS]):
        if count_keyword_matches(row) >= MIN_KEYWORD_MATCHES:
            return i

    return 0  # Assume first row is header
