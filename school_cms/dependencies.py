"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from school_cms.config import get_settings
from school_cms.db import DbClient, InMemoryDbClient, PostgresDbClient
from school_cms.resources import ResourceRepository, ResourceSpec
from school_cms.security import TokenService, bearer_token
from school_cms.storage import InMemoryStorageClient, S3StorageClient, StorageClient

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None
_token_service: TokenService | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client shared by every request.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.storage_endpoint:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.storage_bucket,
            endpoint=settings.storage_endpoint,
            region=settings.storage_region or "",
            access_key_id=settings.storage_access_key_id or "",
            secret_access_key=settings.storage_secret_access_key or "",
            public_base_url=settings.public_base_url(),
        )
    return _storage_client


def get_token_service() -> TokenService:
    global _token_service
    if _token_service:
        return _token_service

    settings = get_settings()
    _token_service = TokenService(
        secret_key=settings.secret_key,
        ttl_seconds=settings.token_ttl_seconds,
    )
    return _token_service


def repository_for(spec: ResourceSpec):
    """Build a dependency yielding the repository for one resource."""

    def get_repository(
        db: DbClient = Depends(get_db_client),
        storage: StorageClient = Depends(get_storage_client),
    ) -> ResourceRepository:
        return ResourceRepository(spec, db, storage)

    return get_repository


def require_admin(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    """Reject the request unless it carries a valid admin bearer token."""
    return tokens.verify(bearer_token(authorization))


def require_admin_if_protected(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[dict]:
    """Require an admin token only when PROTECT_CONTENT_WRITES is enabled."""
    if not get_settings().protect_content_writes:
        return None
    return tokens.verify(bearer_token(authorization))
