"""
Entry points for the two phases of a statement import.

``analyze`` runs once per uploaded file and proposes a configuration for an
operator to review; ``import_statement`` runs with the finalized
configuration and returns the canonical transactions.
"""

from typing import List, Optional, Sequence, Union

from .assembler import assemble
from .column_classifier import suggest_amount_format, suggest_mapping
from .header_detector import detect_header_row
from .models import Grid, ImportConfig, ParsedTransaction, SourceFormat, StatementAnalysis
from .tabular import DEFAULT_ENCODINGS, default_delimiter, detect_source_format, to_grid

PREVIEW_ROWS = 10


def load_grid(
    content: bytes,
    source_format: Optional[Union[SourceFormat, str]] = None,
    *,
    filename: Optional[str] = None,
    delimiter: Optional[str] = None,
    password: Optional[str] = None,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> Grid:
    """Resolve format and delimiter defaults, then decode ``content``."""
    if source_format is None:
        source_format = detect_source_format(content, filename)
    if delimiter is None:
        delimiter = default_delimiter(filename)

    return to_grid(
        content,
        SourceFormat(source_format),
        delimiter=delimiter,
        password=password,
        encodings=encodings,
    )


def analyze_grid(grid: Grid) -> StatementAnalysis:
    header_row_index = detect_header_row(grid)
    header_cells = list(grid[header_row_index])
    mapping = suggest_mapping(header_cells)

    return StatementAnalysis(
        header_row_index=header_row_index,
        header_cells=header_cells,
        preview_rows=[list(row) for row in grid[:PREVIEW_ROWS]],
        suggested_mapping=mapping,
        suggested_amount_format=suggest_amount_format(mapping),
        total_rows=len(grid) - header_row_index - 1,
    )


def analyze(
    content: bytes,
    source_format: Optional[Union[SourceFormat, str]] = None,
    *,
    filename: Optional[str] = None,
    delimiter: Optional[str] = None,
    password: Optional[str] = None,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> StatementAnalysis:
    """
    Inspect a statement file and suggest how to import it.

    Args:
        content: Raw file bytes.
        source_format: Container format; detected from ``filename`` and the
            content when omitted.
        filename: Original file name, used only for format detection.
        delimiter: Field delimiter for delimited text (default "," or tab
            for .tsv files).
        password: Password for encrypted workbooks.
        encodings: Text encodings to try, in order.

    Raises:
        SourceFormatError: the content cannot be decoded into rows.
    """
    grid = load_grid(
        content,
        source_format,
        filename=filename,
        delimiter=delimiter,
        password=password,
        encodings=encodings,
    )
    return analyze_grid(grid)


def import_statement(
    content: bytes,
    config: ImportConfig,
    source_format: Optional[Union[SourceFormat, str]] = None,
    *,
    filename: Optional[str] = None,
    delimiter: Optional[str] = None,
    password: Optional[str] = None,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> List[ParsedTransaction]:
    """
    Convert a statement file into canonical transactions.

    The result is all-or-nothing: either every surviving row is returned or
    an exception is raised.

    Raises:
        SourceFormatError: the content cannot be decoded into rows.
        DateFormatError: a data row has an unparsable date.
    """
    grid = load_grid(
        content,
        source_format,
        filename=filename,
        delimiter=delimiter,
        password=password,
        encodings=encodings,
    )
    return assemble(grid, config)
