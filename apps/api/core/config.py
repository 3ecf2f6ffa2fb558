"""Centralized application configuration via Pydantic Settings.

Loads all env vars into a typed Settings instance. Every field has a
default, so the API starts without a .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # CORS
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Comma-separated allowed origins for CORS",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # App
    APP_VERSION: str = Field(default="0.1.0", description="Application version")

    # Statement uploads
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Largest accepted statement upload",
    )
    DEFAULT_DELIMITER: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Field delimiter for delimited-text uploads without a .tsv name",
    )
    TEXT_ENCODINGS: str = Field(
        default="utf-8-sig,cp1252",
        description="Comma-separated text encodings to try, in order",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def text_encodings(self) -> list[str]:
        return [e.strip() for e in self.TEXT_ENCODINGS.split(",") if e.strip()]

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def json_logs(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = {"env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings — allows test override."""
    return Settings()


settings = get_settings()
