"""Statements router — analyze and import uploaded statement files.

Both endpoints take a multipart upload. Engine errors propagate to the
global RFC 7807 handlers; this module only checks the request itself.
"""

from typing import Optional

import pydantic
import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile

from apps.api.core.config import Settings, get_settings
from apps.api.core.errors import (
    INVALID_CONFIG_PROBLEM,
    PayloadTooLargeError,
    ValidationError,
)
from apps.api.domains.statements.schemas import (
    AnalyzeResponse,
    ImportConfigSchema,
    ImportResponse,
    TransactionOut,
)
from apps.api.domains.statements.service import analyze_upload, import_upload
from packages.statement_engine import SourceFormat

router = APIRouter(prefix="/statements", tags=["statements"])
logger = structlog.get_logger()


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes:
    # One extra byte is enough to tell "at the limit" from "over it"
    contents = await file.read(max_bytes + 1)
    if len(contents) > max_bytes:
        logger.warning("upload_too_large", filename=file.filename, max_bytes=max_bytes)
        raise PayloadTooLargeError(
            detail=f"File too large (max {max_bytes} bytes)", max_bytes=max_bytes
        )
    return contents


def _check_delimiter(delimiter: Optional[str]) -> Optional[str]:
    if delimiter is not None and len(delimiter) != 1:
        raise ValidationError("delimiter must be a single character")
    return delimiter


def _parse_config(raw: str) -> ImportConfigSchema:
    try:
        return ImportConfigSchema.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise ValidationError(
            detail="Invalid import config",
            error_type=INVALID_CONFIG_PROBLEM,
            extensions={
                "errors": e.errors(include_url=False, include_context=False)
            },
        ) from e


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_statement(
    file: UploadFile = File(...),
    format_hint: Optional[SourceFormat] = Form(None),
    delimiter: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
):
    """Detect the header row and suggest a column mapping for review."""
    contents = await _read_upload(file, settings.MAX_UPLOAD_BYTES)

    analysis = analyze_upload(
        contents,
        settings,
        filename=file.filename,
        format_hint=format_hint,
        delimiter=_check_delimiter(delimiter),
        password=password,
    )
    return AnalyzeResponse.from_analysis(analysis)


@router.post("/import", response_model=ImportResponse)
async def import_statement_file(
    file: UploadFile = File(...),
    config: str = Form(...),
    format_hint: Optional[SourceFormat] = Form(None),
    delimiter: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
):
    """Convert the upload into transactions using a finalized config.

    All-or-nothing: a single unparsable date rejects the whole file.
    """
    import_config = _parse_config(config).to_config()
    contents = await _read_upload(file, settings.MAX_UPLOAD_BYTES)

    transactions = import_upload(
        contents,
        import_config,
        settings,
        filename=file.filename,
        format_hint=format_hint,
        delimiter=_check_delimiter(delimiter),
        password=password,
    )
    return ImportResponse(
        transactions=[TransactionOut.from_transaction(t) for t in transactions],
        count=len(transactions),
    )
