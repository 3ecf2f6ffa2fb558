"""
Date resolution for statement cells of unknown locale.

Supported shapes, tried in order after any time-of-day suffix is dropped:

    2024-03-07, 2024/3/7              year first, always unambiguous
    13/02/2024, 02/13/24, 7-3-2024    day/month order inferred per value

When both leading components are 12 or less the value is genuinely
ambiguous; day-first wins whenever it forms a real date. That is a policy,
not a guarantee, which is why the preview shown to operators carries the
resolved dates.
"""

import re
from datetime import date
from typing import Optional, Tuple

from .errors import DateFormatError

MIN_YEAR = 1900

# "2024-03-07 14:22:01", "2024-03-07T14:22:01" -> "2024-03-07"
_DATE_TIME = re.compile(r"^(.+?)[\sT](.+)$")
_YEAR_FIRST = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$", re.ASCII)
_YEAR_LAST = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{2}|\d{4})$", re.ASCII)


def strip_time(text: str) -> str:
    """Drop a time-of-day component separated by whitespace or ``T``."""
    cleaned = text.strip()
    match = _DATE_TIME.match(cleaned)
    if match:
        return match.group(1).strip()
    return cleaned


def _in_range(year: int, month: int, day: int) -> bool:
    return 1 <= month <= 12 and 1 <= day <= 31 and year >= MIN_YEAR


def build_date(year: int, month: int, day: int) -> Optional[date]:
    """A calendar date, or None when the parts are out of range or do not exist."""
    if not _in_range(year, month, day):
        return None
    try:
        return date(year, month, day)
    except ValueError:
        # e.g. 2024-02-30 passes the range check but is not a real day
        return None


def expand_year(year: str) -> int:
    """Two-digit years are taken to be in the 2000s."""
    if len(year) == 2:
        return int("20" + year)
    return int(year)


def order_day_month(first: int, second: int, year: int) -> Optional[Tuple[int, int]]:
    """
    Decide which of two leading components is the day.

    Returns ``(day, month)`` or None when no assignment gives a real date.
    A component above 12 can only be a day; otherwise day-first is tried
    before month-first.
    """
    if first > 12:
        candidates = [(first, second)]
    elif second > 12:
        candidates = [(second, first)]
    else:
        candidates = [(first, second), (second, first)]

    for day, month in candidates:
        if build_date(year, month, day) is not None:
            return day, month
    return None


def _resolve_year_first(text: str) -> Optional[date]:
    match = _YEAR_FIRST.match(text)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    return build_date(year, month, day)


def _resolve_year_last(text: str) -> Optional[date]:
    match = _YEAR_LAST.match(text)
    if not match:
        return None
    first, second, year_text = match.groups()
    year = expand_year(year_text)
    ordered = order_day_month(int(first), int(second), year)
    if ordered is None:
        return None
    day, month = ordered
    return date(year, month, day)


def try_resolve_date(text: Optional[str]) -> Optional[date]:
    """Like :func:`resolve_date` but returns None instead of raising."""
    if text is None:
        return None
    cleaned = strip_time(str(text))
    if not cleaned:
        return None
    return _resolve_year_first(cleaned) or _resolve_year_last(cleaned)


def resolve_date(text: str) -> date:
    """Resolve a raw date cell to a calendar date.

    Args:
        text: Cell text such as ``"2024-03-07"``, ``"07/03/2024 09:15"`` or
            ``"3/7/24"``.

    Returns:
        The resolved date.

    Raises:
        DateFormatError: no supported pattern matches the text.
    """
    resolved = try_resolve_date(text)
    if resolved is None:
        raise DateFormatError(text)
    return resolved
