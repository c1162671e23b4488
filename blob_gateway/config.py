"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from blob_gateway.config import get_settings
    >>> settings = get_settings()
    >>> settings.PORT
    3000

    >>> settings.BLOB_BACKEND
    <BlobBackend.VERCEL: 'vercel'>

Tests:
    - tests/unit/test_config.py::TestSettings::test_settings_defaults
    - tests/unit/test_config.py::TestSettings::test_port_from_environment
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BLOB_API_URL = "https://blob.vercel-storage.com"

# Parsed bodies (JSON, urlencoded) are capped; streamed uploads are not.
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


class BlobBackend(str, Enum):
    """Supported blob store backends."""

    VERCEL = "vercel"
    LOCAL = "local"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables and .env file.
    Nothing is required at startup; a missing BLOB_READ_WRITE_TOKEN only
    surfaces as a store error on the first request that needs it.

    Attributes:
        PORT: Listening port
        HOST: Bind address
        BLOB_READ_WRITE_TOKEN: Bearer credential for the blob store
        BLOB_BACKEND: Which blob store implementation to use
        VERCEL_BLOB_API_URL: Base URL of the Vercel Blob API
        BLOB_API_VERSION: Value of the x-api-version header
        BLOB_TIMEOUT: Timeout for store requests in seconds
        LOCAL_BLOB_ROOT: Root directory of the local backend
        PUBLIC_BASE_URL: Base URL used to build local blob URLs
        STATIC_DIR: Directory of pre-built static assets
        MAX_BODY_BYTES: Size limit for parsed request bodies
        DEBUG: Enable debug mode
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server
    PORT: int = Field(
        default=3000,
        description="Listening port",
        ge=1,
        le=65535,
    )
    HOST: str = Field(
        default="0.0.0.0",
        description="Bind address",
    )

    # Blob store
    BLOB_READ_WRITE_TOKEN: str | None = Field(
        default=None,
        description="Vercel Blob read/write token",
    )
    BLOB_BACKEND: BlobBackend = Field(
        default=BlobBackend.VERCEL,
        description="Blob store backend (vercel or local)",
    )
    VERCEL_BLOB_API_URL: str = Field(
        default=DEFAULT_BLOB_API_URL,
        description="Vercel Blob API base URL",
    )
    BLOB_API_VERSION: str = Field(
        default="7",
        description="Vercel Blob API version header",
    )
    BLOB_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="Blob store request timeout in seconds",
    )
    LOCAL_BLOB_ROOT: str = Field(
        default="./blobs",
        description="Root directory for the local backend",
    )
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:3000",
        description="Base URL for blobs served by the local backend",
    )

    # HTTP surface
    STATIC_DIR: str = Field(
        default="public",
        description="Directory of static assets served at /",
    )
    MAX_BODY_BYTES: int = Field(
        default=DEFAULT_MAX_BODY_BYTES,
        gt=0,
        description="Maximum size of JSON/urlencoded request bodies",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("VERCEL_BLOB_API_URL", "PUBLIC_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate URL scheme and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def has_token(self) -> bool:
        """Check if a blob store token is configured."""
        return bool(self.BLOB_READ_WRITE_TOKEN)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
