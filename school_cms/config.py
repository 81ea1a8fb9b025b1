"""
Configuration and settings for the school CMS backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible storage (Supabase storage, MinIO, AWS S3)
    storage_endpoint: Optional[str] = Field(default=None)
    storage_region: Optional[str] = Field(default=None)
    storage_bucket: str = Field(default="uploads")
    storage_access_key_id: Optional[str] = Field(default=None)
    storage_secret_access_key: Optional[str] = Field(default=None)
    # Public URLs are "<storage_public_url>/<key>". When unset they follow the
    # Supabase layout rooted at storage_public_host.
    storage_public_host: Optional[str] = Field(default=None)
    storage_public_url: Optional[str] = Field(default=None)

    # Admin tokens
    secret_key: str = Field(default="dev-secret-change-me")
    token_ttl_seconds: int = Field(default=3600)
    protect_content_writes: bool = Field(default=False)

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    def public_base_url(self) -> str:
        if self.storage_public_url:
            return self.storage_public_url.rstrip("/")
        host = (self.storage_public_host or "").rstrip("/")
        if not host and self.storage_endpoint:
            # Supabase's S3 endpoint is "<project>/storage/v1/s3".
            host = self.storage_endpoint.rstrip("/").removesuffix("/storage/v1/s3")
        return f"{host}/storage/v1/object/public/{self.storage_bucket}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
