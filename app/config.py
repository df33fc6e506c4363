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
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for sign up / sign in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying access tokens"
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
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    DEFAULT_PAGE_SIZE: int = Field(
        default=12,
        ge=1,
        le=100,
        description="Page size for project and talent listings"
    )

    # -------------------------------------------------------------------------
    # Avatar Storage
    # -------------------------------------------------------------------------

    AVATAR_BUCKET: str = Field(
        default="avatars",
        description="Storage bucket holding user avatars"
    )

    MAX_AVATAR_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum avatar upload size in MB"
    )

    ALLOWED_AVATAR_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp,image/gif",
        description="Allowed avatar content types (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Route Protection
    # -------------------------------------------------------------------------
    # Path prefixes of the web client that need (or must not have) a session

    PROTECTED_PATH_PREFIXES: str = Field(
        default="/profile,/projects/create,/projects/manage,/applications,/invitations,/messages,/my-projects",
        description="Paths that redirect to LOGIN_PATH without a session (comma-separated)"
    )

    AUTH_PATH_PREFIXES: str = Field(
        default="/auth/login,/auth/register",
        description="Paths that redirect to / when a session exists (comma-separated)"
    )

    LOGIN_PATH: str = Field(
        default="/auth/login",
        description="Where unauthenticated visitors of protected paths are sent"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (env vars may be set directly)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @staticmethod
    def _split(value: str) -> list[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return self._split(self.CORS_ORIGINS)

    @property
    def allowed_avatar_types_list(self) -> list[str]:
        return [content_type.lower() for content_type in self._split(self.ALLOWED_AVATAR_TYPES)]

    @property
    def max_avatar_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_AVATAR_SIZE_MB * 1024 * 1024

    @property
    def protected_path_prefixes_list(self) -> list[str]:
        return self._split(self.PROTECTED_PATH_PREFIXES)

    @property
    def auth_path_prefixes_list(self) -> list[str]:
        return self._split(self.AUTH_PATH_PREFIXES)

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

    lru_cache makes sure .env is parsed and validated only once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
