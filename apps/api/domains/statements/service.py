"""Statements service — runs the engine for one uploaded file.

Resolves upload defaults from settings and records one structlog event per
call. Engine errors are logged and re-raised for the RFC 7807 handlers.
"""

from pathlib import Path
from typing import Optional

import structlog

from apps.api.core.config import Settings
from packages.statement_engine import (
    ImportConfig,
    ParsedTransaction,
    SourceFormat,
    StatementAnalysis,
    StatementError,
    analyze,
    import_statement,
)

logger = structlog.get_logger()


def resolve_delimiter(
    delimiter: Optional[str], filename: Optional[str], settings: Settings
) -> str:
    """Explicit delimiter, else tab for .tsv uploads, else the configured default."""
    if delimiter:
        return delimiter
    if filename and Path(filename).suffix.lower() == ".tsv":
        return "\t"
    return settings.DEFAULT_DELIMITER


def analyze_upload(
    content: bytes,
    settings: Settings,
    *,
    filename: Optional[str] = None,
    format_hint: Optional[SourceFormat] = None,
    delimiter: Optional[str] = None,
    password: Optional[str] = None,
) -> StatementAnalysis:
    try:
        analysis = analyze(
            content,
            format_hint,
            filename=filename,
            delimiter=resolve_delimiter(delimiter, filename, settings),
            password=password,
            encodings=settings.text_encodings,
        )
    except StatementError as e:
        logger.warning(
            "statement_rejected", phase="analyze", filename=filename, error=str(e)
        )
        raise

    logger.info(
        "statement_analyzed",
        filename=filename,
        header_row_index=analysis.header_row_index,
        total_rows=analysis.total_rows,
        amount_format=analysis.suggested_amount_format.value,
    )
    return analysis


def import_upload(
    content: bytes,
    config: ImportConfig,
    settings: Settings,
    *,
    filename: Optional[str] = None,
    format_hint: Optional[SourceFormat] = None,
    delimiter: Optional[str] = None,
    password: Optional[str] = None,
) -> list[ParsedTransaction]:
    try:
        transactions = import_statement(
            content,
            config,
            format_hint,
            filename=filename,
            delimiter=resolve_delimiter(delimiter, filename, settings),
            password=password,
            encodings=settings.text_encodings,
        )
    except StatementError as e:
        logger.warning(
            "statement_rejected",
            phase="import",
            filename=filename,
            error=str(e),
            row_number=getattr(e, "row_number", None),
        )
        raise

    logger.info("statement_imported", filename=filename, count=len(transactions))
    return transactions
