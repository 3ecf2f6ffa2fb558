"""
Tabular adapters - turn raw statement bytes into a grid of cell strings.

Two containers are supported:
- delimited text (CSV/TSV exports), split with a quote-aware state machine
- spreadsheet workbooks (.xlsx), read with openpyxl; encrypted workbooks are
  decrypted with msoffcrypto first
"""

import io
import math
import re
import zipfile
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import msoffcrypto
import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from .errors import SourceFormatError
from .models import Grid, Row, SourceFormat

DEFAULT_ENCODINGS = ("utf-8-sig", "cp1252")

# OLE2 Compound Document magic bytes - encrypted Office files use this container
_OLE2_MAGIC = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"
_ZIP_MAGIC = b"PK\x03\x04"

_SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm", ".xls")
_TEXT_EXTENSIONS = (".csv", ".tsv", ".txt")

# Spreadsheet day zero; serial 1 is 1899-12-31.
_SERIAL_EPOCH = date(1899, 12, 30)
_MIN_SERIAL_YEAR = 1900
_MAX_SERIAL_YEAR = 2100

_LINE_BREAK = re.compile(r"\r\n|\n|\r")


def _is_ole2(content: bytes) -> bool:
    """Check if content starts with the OLE2 magic bytes (indicates encryption wrapper)."""
    return content[:8] == _OLE2_MAGIC


def detect_source_format(content: bytes, filename: Optional[str] = None) -> SourceFormat:
    """Guess the container format from the file extension, then magic bytes."""
    if filename:
        suffix = Path(filename).suffix.lower()
        if suffix in _SPREADSHEET_EXTENSIONS:
            return SourceFormat.SPREADSHEET_BINARY
        if suffix in _TEXT_EXTENSIONS:
            return SourceFormat.DELIMITED_TEXT

    if content.startswith(_ZIP_MAGIC) or _is_ole2(content):
        return SourceFormat.SPREADSHEET_BINARY
    return SourceFormat.DELIMITED_TEXT


def default_delimiter(filename: Optional[str] = None) -> str:
    if filename and Path(filename).suffix.lower() == ".tsv":
        return "\t"
    return ","


# ---------------------------------------------------------------------------
# Delimited text
# ---------------------------------------------------------------------------


def split_line(line: str, delimiter: str = ",") -> Row:
    """Split one record into trimmed cells, honouring double-quoted fields.

    A quote toggles the in-quotes state, except that a doubled quote inside a
    quoted field is a literal quote. The delimiter only ends a field outside
    quotes, and the last field is always emitted, even when empty.
    """
    cells: Row = []
    current: List[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    cells.append("".join(current).strip())
    return cells


def ends_in_quoted_field(line: str, delimiter: str = ",", in_quotes: bool = False) -> bool:
    """Whether ``line`` ends inside a field that opened with a quote.

    Only a quote at the start of a field (leading whitespace aside) opens a
    quoted field; a quote anywhere else, such as an inch mark in ``TV 55"``,
    is a literal character. ``in_quotes`` carries the state over from the
    previous physical line of the same record.
    """
    at_field_start = not in_quotes
    i = 0

    while i < len(line):
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < len(line) and line[i + 1] == '"':
                    i += 1
                else:
                    in_quotes = False
        elif char == delimiter:
            at_field_start = True
        elif char == '"' and at_field_start:
            in_quotes = True
            at_field_start = False
        elif not char.isspace():
            at_field_start = False
        i += 1

    return in_quotes


def split_records(text: str, delimiter: str = ",") -> List[str]:
    """Split text into records, keeping line breaks that sit inside quotes.

    A physical line that ends inside a quoted field leaves the record open,
    so the following line is appended to it. Records that are blank after
    trimming are dropped.
    """
    records: List[str] = []
    pending: List[str] = []
    in_quotes = False

    for line in _LINE_BREAK.split(text):
        pending.append(line)
        in_quotes = ends_in_quoted_field(line, delimiter, in_quotes)
        if in_quotes:
            continue
        record = "\n".join(pending)
        pending = []
        if record.strip():
            records.append(record)

    # A quote that never closes is a stray character, not a multi-line field.
    records.extend(line for line in pending if line.strip())

    return records


def decode_text(content: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """Decode text content, trying each encoding in turn."""
    if b"\x00" in content:
        raise SourceFormatError("File looks like binary data, not delimited text")

    for encoding in encodings:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise SourceFormatError("Could not decode file with any known encoding")


def read_delimited(
    content: bytes,
    delimiter: str = ",",
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> Grid:
    text = decode_text(content, encodings)
    return [split_line(record, delimiter) for record in split_records(text, delimiter)]


# ---------------------------------------------------------------------------
# Spreadsheet
# ---------------------------------------------------------------------------


def serial_to_date(value) -> Optional[date]:
    """
    Convert a spreadsheet date serial to a calendar date.

    Returns None when the value is not a finite number or the resulting year
    falls outside 1900-2100, i.e. when it is implausible as a statement date.
    """
    try:
        days = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(days):
        return None

    try:
        converted = _SERIAL_EPOCH + timedelta(days=math.floor(days))
    except OverflowError:
        return None

    if not _MIN_SERIAL_YEAR <= converted.year <= _MAX_SERIAL_YEAR:
        return None
    return converted


def format_number(value) -> str:
    """Render a numeric cell as plain decimal text (120.0 -> "120")."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def render_cell(cell) -> str:
    """Convert one typed workbook cell to its grid text."""
    value = cell.value
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, Decimal)):
        # Date-formatted numbers that openpyxl left as raw serials
        if getattr(cell, "is_date", False):
            converted = serial_to_date(value)
            if converted is not None:
                return converted.isoformat()
        return format_number(value)
    return str(value).strip()


def _decrypt_workbook(content: bytes, password: Optional[str]) -> io.BytesIO:
    if not _is_ole2(content):
        # Plain .xlsx (ZIP-based OOXML) - no decryption needed
        return io.BytesIO(content)

    # File is in OLE2 format - either a legacy .xls or an encrypted .xlsx
    if not password:
        raise SourceFormatError("Password required")

    decrypted = io.BytesIO()
    try:
        with io.BytesIO(content) as f:
            office_file = msoffcrypto.OfficeFile(f)
            office_file.load_key(password=password)
            office_file.decrypt(decrypted)
    except Exception as e:
        msg = str(e).lower()
        if "password" in msg or "decrypt" in msg or "key" in msg:
            raise SourceFormatError("Invalid password") from e
        raise SourceFormatError(f"Failed to decrypt file: {e}") from e

    decrypted.seek(0)
    return decrypted


def _rows_to_grid(rows: Iterable) -> Grid:
    """Render every worksheet row, so grid index i is sheet row i + 1.

    Blank rows inside the sheet are kept; trailing blank rows are dropped.
    """
    grid: Grid = [[render_cell(cell) for cell in cells] for cells in rows]
    while grid and not any(grid[-1]):
        grid.pop()
    return grid


def read_spreadsheet(content: bytes, password: Optional[str] = None) -> Grid:
    """Read the first worksheet of a workbook into a grid."""
    workbook_stream = _decrypt_workbook(content, password)

    try:
        workbook = openpyxl.load_workbook(workbook_stream, read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as e:
        raise SourceFormatError(f"Could not read spreadsheet: {e}") from e

    try:
        if not workbook.worksheets:
            raise SourceFormatError("Workbook contains no worksheets")
        return _rows_to_grid(workbook.worksheets[0].iter_rows())
    finally:
        workbook.close()


def to_grid(
    content: bytes,
    source_format: SourceFormat,
    *,
    delimiter: str = ",",
    password: Optional[str] = None,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> Grid:
    """Decode raw statement content into a grid of cell strings.

    Raises:
        SourceFormatError: the content is empty or cannot be read as rows.
    """
    if not content:
        raise SourceFormatError("File is empty")

    if SourceFormat(source_format) is SourceFormat.SPREADSHEET_BINARY:
        grid = read_spreadsheet(content, password=password)
    else:
        grid = read_delimited(content, delimiter=delimiter, encodings=encodings)

    if not grid:
        raise SourceFormatError("File contains no rows")
    return grid
