"""
Per-resource CRUD operations with attached media handling.

Every content table goes through ``ResourceRepository``; resources differ
only in their ``ResourceSpec`` (table, label and media field).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from school_cms.db import DbClient, ResourceKind
from school_cms.errors import BadRequestError, CmsError, NotFoundError, StorageError
from school_cms.storage import StorageClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceSpec:
    kind: ResourceKind
    noun: str
    media_field: Optional[str] = "image"
    media_required: bool = False

    @property
    def title(self) -> str:
        return self.noun[:1].upper() + self.noun[1:]


@dataclass
class UploadedMedia:
    data: bytes
    filename: str
    content_type: Optional[str] = None


NEWS = ResourceSpec(ResourceKind.NEWS, "news")
HERO = ResourceSpec(ResourceKind.HERO, "hero", media_required=True)
EXTRACURRICULAR = ResourceSpec(ResourceKind.EXTRACURRICULAR, "extracurricular")
KALENDER = ResourceSpec(
    ResourceKind.KALENDER, "kalender event", media_field="file", media_required=True
)
ALUMNI = ResourceSpec(ResourceKind.ALUMNI, "alumni")
GALERI = ResourceSpec(ResourceKind.GALERI, "galeri", media_required=True)
SARANA = ResourceSpec(ResourceKind.SARANA, "sarana")
HEADMASTER_MESSAGE = ResourceSpec(
    ResourceKind.HEADMASTER_MESSAGE, "headmaster message", media_required=True
)
SEJARAH = ResourceSpec(ResourceKind.SEJARAH, "sejarah")
VISI_MISI = ResourceSpec(ResourceKind.VISI_MISI, "visi misi", media_field=None)
CONTACT = ResourceSpec(ResourceKind.CONTACT, "contact", media_field=None)


class ResourceRepository:
    """List/get/create/update/delete for one table, keeping blobs in step."""

    def __init__(self, spec: ResourceSpec, db: DbClient, storage: StorageClient):
        self.spec = spec
        self.db = db
        self.storage = storage

    @contextmanager
    def _failure(self, action: str) -> Iterator[None]:
        try:
            yield
        except (NotFoundError, BadRequestError):
            raise
        except Exception as exc:
            logger.exception("Error trying to %s %s", action, self.spec.noun)
            message = exc.message if isinstance(exc, CmsError) else str(exc)
            raise CmsError(
                f"Failed to {action} {self.spec.noun}", details=message
            ) from exc

    def _require(self, row_id: int) -> dict:
        row = self.db.get_row(self.spec.kind, row_id)
        if row is None:
            raise NotFoundError(f"{self.spec.title} not found")
        return row

    def _upload(self, media: UploadedMedia) -> str:
        return self.storage.upload(media.data, media.filename, media.content_type)

    def _delete_blob(self, url: str) -> None:
        try:
            self.storage.delete(url)
        except StorageError as exc:
            logger.warning("Could not delete %s for %s: %s", url, self.spec.noun, exc)

    def list_all(self) -> list[dict]:
        with self._failure("fetch"):
            return self.db.list_rows(self.spec.kind)

    def get(self, row_id: int) -> dict:
        with self._failure("fetch"):
            return self._require(row_id)

    def first(self) -> Optional[dict]:
        with self._failure("fetch"):
            return self.db.first_row(self.spec.kind)

    def create(self, values: dict, media: Optional[UploadedMedia] = None) -> dict:
        field = self.spec.media_field
        if field and self.spec.media_required and media is None:
            raise BadRequestError(f"{field} is required")
        with self._failure("create"):
            values = dict(values)
            if field:
                values[field] = self._upload(media) if media is not None else None
            return self.db.create_row(self.spec.kind, values)

    def update(
        self, row_id: int, values: dict, media: Optional[UploadedMedia] = None
    ) -> dict:
        """
        Overwrite the fields present in ``values``. A new file replaces the
        stored one and the previous blob is removed after the upload.
        """
        with self._failure("update"):
            existing = self._require(row_id)
            values = {key: value for key, value in values.items() if value is not None}
            field = self.spec.media_field
            if field and media is not None:
                new_url = self._upload(media)
                if existing.get(field):
                    self._delete_blob(existing[field])
                values[field] = new_url
            updated = self.db.update_row(self.spec.kind, row_id, values)
            if updated is None:
                raise NotFoundError(f"{self.spec.title} not found")
            return updated

    def delete(self, row_id: int) -> dict:
        with self._failure("delete"):
            existing = self._require(row_id)
            field = self.spec.media_field
            if field and existing.get(field):
                self._delete_blob(existing[field])
            self.db.delete_row(self.spec.kind, row_id)
            return existing
