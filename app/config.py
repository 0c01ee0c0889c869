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

    Values are validated at startup so a bad deployment fails fast
    instead of on the first request that touches the setting.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Backs both the document store (tables) and blob storage (bucket)

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Document Store
    # -------------------------------------------------------------------------

    BUSINESSES_COLLECTION: str = Field(
        default="businesses",
        description="Collection (table) holding business documents"
    )

    EVENTS_COLLECTION: str = Field(
        default="events",
        description="Read-only collection (table) holding event documents"
    )

    STORE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Upper bound for a single document store call"
    )

    # -------------------------------------------------------------------------
    # Image Uploads
    # -------------------------------------------------------------------------

    STORAGE_BUCKET: str = Field(
        default="business-images",
        description="Public Supabase Storage bucket for uploaded images"
    )

    PLACEHOLDER_IMAGE_URL: str = Field(
        default="https://placehold.co/600x400?text=No+Image",
        description="imageUrl stored when no image is supplied or uploaded"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp,image/gif",
        description="Accepted attachment content types (comma-separated)"
    )

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum size of a single attachment in MB"
    )

    MAX_PRODUCT_IMAGES: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum number of productImages files per request"
    )

    IMAGE_MAX_WIDTH: int = Field(
        default=1200,
        ge=16,
        description="Bounding box width images are shrunk to before storage"
    )

    IMAGE_MAX_HEIGHT: int = Field(
        default=1200,
        ge=16,
        description="Bounding box height images are shrunk to before storage"
    )

    UPLOAD_CONCURRENCY: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Simultaneous attachment uploads within one request"
    )

    UPLOAD_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Upper bound for a single attachment upload"
    )

    ABORT_ON_UPLOAD_FAILURE: bool = Field(
        default=True,
        description=(
            "Fail the whole create/update when any attachment upload fails. "
            "When false, failed attachments are dropped and logged."
        )
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
        default=4000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="https://discover-business.vercel.app",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
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
    def allowed_image_types_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_TYPES string into a list.

        Example: "image/png, image/jpeg" -> ["image/png", "image/jpeg"]
        """
        return [
            content_type.strip().lower()
            for content_type in self.ALLOWED_IMAGE_TYPES.split(",")
            if content_type.strip()
        ]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for attachment size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def image_bounding_box(self) -> tuple[int, int]:
        return (self.IMAGE_MAX_WIDTH, self.IMAGE_MAX_HEIGHT)

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
