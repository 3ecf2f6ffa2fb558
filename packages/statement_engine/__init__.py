"""
Statement Engine

Normalizes bank and card statement exports (CSV or spreadsheet) of unknown
layout into canonical transaction records.
"""

__version__ = "0.1.0"

from .errors import DateFormatError, SourceFormatError, StatementError
from .models import (
    AmountFormat,
    ColumnMapping,
    ImportConfig,
    ParsedTransaction,
    SourceFormat,
    StatementAnalysis,
)
from .engine import analyze, import_statement

__all__ = [
    "analyze",
    "import_statement",
    "AmountFormat",
    "ColumnMapping",
    "ImportConfig",
    "ParsedTransaction",
    "SourceFormat",
    "StatementAnalysis",
    "StatementError",
    "SourceFormatError",
    "DateFormatError",
]
