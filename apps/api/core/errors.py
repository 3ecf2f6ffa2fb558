"""RFC 7807 Problem Details error handling.

Provides centralized exception handlers and custom exception classes. All
errors return a consistent JSON format:

    {
        "type": "/problems/date-format",
        "title": "Unprocessable Entity",
        "status": 422,
        "detail": "Unable to parse date \"Jan 4th\" in row 4. ...",
        "instance": "/api/v1/statements/import",
        "row_number": 4,
        "value": "Jan 4th"
    }

Statement engine exceptions are mapped here so routers can let them
propagate untouched.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from packages.statement_engine.errors import DateFormatError, SourceFormatError

SOURCE_FORMAT_PROBLEM = "/problems/source-format"
DATE_FORMAT_PROBLEM = "/problems/date-format"
INVALID_CONFIG_PROBLEM = "/problems/invalid-config"


class AppError(Exception):
    """Base application error.

    ``extensions`` are extra members merged into the problem body.
    """

    def __init__(
        self,
        detail: str,
        status_code: int = 500,
        error_type: str = "about:blank",
        extensions: Optional[dict[str, Any]] = None,
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_type = error_type
        self.extensions = extensions or {}
        super().__init__(detail)


class ValidationError(AppError):
    """Request validation failed."""

    def __init__(
        self,
        detail: str = "Validation failed",
        error_type: str = "about:blank",
        extensions: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            detail=detail, status_code=422, error_type=error_type, extensions=extensions
        )


class PayloadTooLargeError(AppError):
    """Uploaded file exceeds the configured limit."""

    def __init__(self, detail: str = "File too large", max_bytes: int = 0):
        super().__init__(
            detail=detail, status_code=413, extensions={"max_bytes": max_bytes}
        )


def _build_problem_detail(
    status: int,
    title: str,
    detail: str,
    error_type: str = "about:blank",
    instance: str = "",
    request_id: str = "",
    extensions: Optional[dict[str, Any]] = None,
) -> dict:
    """Build RFC 7807 Problem Details response body."""
    body = {
        "type": error_type,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    if request_id:
        body["request_id"] = request_id
    for key, value in (extensions or {}).items():
        body.setdefault(key, value)
    return body


# HTTP status code to title mapping
_STATUS_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def _problem_response(
    request: Request,
    status: int,
    detail: str,
    error_type: str = "about:blank",
    extensions: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    body = _build_problem_detail(
        status=status,
        title=_STATUS_TITLES.get(status, "Error"),
        detail=detail,
        error_type=error_type,
        instance=str(request.url.path),
        request_id=getattr(request.state, "request_id", ""),
        extensions=extensions,
    )
    return JSONResponse(
        status_code=status, content=body, media_type="application/problem+json"
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _problem_response(
            request,
            status=exc.status_code,
            detail=exc.detail,
            error_type=exc.error_type,
            extensions=exc.extensions,
        )

    @app.exception_handler(SourceFormatError)
    async def source_format_handler(
        request: Request, exc: SourceFormatError
    ) -> JSONResponse:
        return _problem_response(
            request, status=400, detail=str(exc), error_type=SOURCE_FORMAT_PROBLEM
        )

    @app.exception_handler(DateFormatError)
    async def date_format_handler(request: Request, exc: DateFormatError) -> JSONResponse:
        return _problem_response(
            request,
            status=422,
            detail=str(exc),
            error_type=DATE_FORMAT_PROBLEM,
            extensions={"row_number": exc.row_number, "value": exc.value},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _problem_response(request, status=exc.status_code, detail=detail)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return _problem_response(
            request, status=500, detail="An unexpected error occurred"
        )
