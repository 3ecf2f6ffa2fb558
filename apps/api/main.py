"""Statement Normalizer API — FastAPI entry point.

Wraps the statement engine in two upload endpoints. Errors are rendered as
RFC 7807 problem details; CORS origins come from settings.
"""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.core.config import settings
from apps.api.core.errors import register_error_handlers
from apps.api.core.logging import setup_logging
from apps.api.domains.statements.router import router as statements_router
from apps.api.routers import health

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup/shutdown hooks."""
    setup_logging(log_level=settings.log_level, json_output=settings.json_logs)
    logger.info("app_starting", version=settings.APP_VERSION)
    yield
    logger.info("app_stopping")


app = FastAPI(
    title="Statement Normalizer API",
    description="Turns bank and card statement exports into canonical transactions.",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(statements_router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")
