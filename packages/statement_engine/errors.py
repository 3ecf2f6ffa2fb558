"""Exceptions raised by the statement engine.

Errors carry their diagnostic context as attributes so callers can present
it however they like; the engine itself never logs.
"""

from typing import Optional


class StatementError(Exception):
    """Base class for statement engine failures."""


class SourceFormatError(StatementError):
    """The raw input could not be decoded into a grid of rows and cells."""


class DateFormatError(StatementError):
    """A date cell matched none of the supported date patterns.

    ``row_number`` is the 1-based position of the offending row in the grid,
    or ``None`` when the value was resolved outside of a grid. For workbooks
    this is the worksheet row number; delimited text drops blank lines, so
    there it counts non-blank records.
    """

    def __init__(self, value: str, row_number: Optional[int] = None):
        self.value = value
        self.row_number = row_number
        if row_number is None:
            message = f'Unable to parse date "{value}"'
        else:
            message = (
                f'Unable to parse date "{value}" in row {row_number}. '
                "Please check the date column mapping. Dates should be in formats "
                "like YYYY-MM-DD, DD/MM/YYYY, MM/DD/YYYY or YYYY-MM-DD HH:MM:SS."
            )
        super().__init__(message)
