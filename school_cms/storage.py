"""
Storage abstraction for S3-compatible object storage and in-memory testing.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote, unquote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from school_cms.errors import StorageError

logger = logging.getLogger(__name__)


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload(self, data: bytes, filename: str, content_type: str | None) -> str:
        ...

    def delete(self, url: str) -> None:
        ...


def make_object_key(filename: str) -> str:
    """Prefix the original filename with the upload time in epoch millis."""
    return f"{int(time.time() * 1000)}-{filename}"


def key_from_url(url: str, base_url: str) -> str:
    decoded = unquote(url)
    prefix = base_url.rstrip("/") + "/"
    if decoded.startswith(prefix):
        return decoded[len(prefix):]
    return decoded


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage/v1/object/public/uploads"
    stored_objects: dict = field(default_factory=dict)
    deleted_urls: list = field(default_factory=list)

    def upload(self, data: bytes, filename: str, content_type: str | None) -> str:
        key = make_object_key(filename)
        self.stored_objects[key] = (data, content_type)
        return f"{self.base_url}/{quote(key)}"

    def delete(self, url: str) -> None:
        self.deleted_urls.append(url)
        self.stored_objects.pop(key_from_url(url, self.base_url), None)

    def reset(self) -> None:
        self.stored_objects.clear()
        self.deleted_urls.clear()


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client. Works against Supabase storage's S3
    endpoint as well as AWS S3 or MinIO.
    """

    bucket: str
    endpoint: str
    region: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str

    def __post_init__(self):
        config = Config(
            s3={"addressing_style": "path"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def upload(self, data: bytes, filename: str, content_type: str | None) -> str:
        key = make_object_key(filename)
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Storage upload error for %s: %s", key, exc)
            raise StorageError("Failed to upload file") from exc
        return f"{self.public_base_url.rstrip('/')}/{quote(key)}"

    def delete(self, url: str) -> None:
        key = key_from_url(url, self.public_base_url)
        logger.info("File path to be deleted: %s", key)
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Storage delete error for %s: %s", key, exc)
            raise StorageError("Failed to delete file") from exc
