# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings are validated once at startup and are read-only afterwards.
# Missing Supabase credentials stop the process before it serves a request.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_ROLE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str | None = Field(
        default=None,
        description="Legacy HS256 JWT secret used to read the operator from bearer tokens"
    )

    # -------------------------------------------------------------------------
    # Buckets
    # -------------------------------------------------------------------------

    SUPABASE_BUCKET: str = Field(
        default="Receive_Files",
        description="Bucket receiving the original uploaded archives"
    )

    EXTRACTED_BUCKET: str = Field(
        default="Extracted_Files",
        description="Bucket holding extracted archive contents"
    )

    COMPLETED_BUCKET: str = Field(
        default="Completed",
        description="Bucket holding folders marked as done"
    )

    USER_BUCKET: str = Field(
        default="User_Profiles",
        description="Bucket holding account profile photos"
    )

    # Public buckets get a resolvable URL in listings, private ones get null
    RECEIVED_BUCKET_PUBLIC: bool = Field(default=True)
    EXTRACTED_BUCKET_PUBLIC: bool = Field(default=True)
    COMPLETED_BUCKET_PUBLIC: bool = Field(default=True)
    USER_BUCKET_PUBLIC: bool = Field(default=True)

    LIST_PAGE_LIMIT: int = Field(
        default=1000,
        ge=1,
        le=10000,
        description="Page size used when listing bucket contents"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    TIMEZONE: str = Field(
        default="Asia/Manila",
        description="IANA time zone used for completion stamps and log entries"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=500,
        ge=1,
        le=2048,
        description="Maximum archive upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def public_buckets(self) -> set[str]:
        """Names of buckets whose objects have public URLs."""
        flags = {
            self.SUPABASE_BUCKET: self.RECEIVED_BUCKET_PUBLIC,
            self.EXTRACTED_BUCKET: self.EXTRACTED_BUCKET_PUBLIC,
            self.COMPLETED_BUCKET: self.COMPLETED_BUCKET_PUBLIC,
            self.USER_BUCKET: self.USER_BUCKET_PUBLIC,
        }
        return {name for name, public in flags.items() if public}

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
