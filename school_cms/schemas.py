"""
Pydantic schemas for the school CMS API.

Rows are snake_case internally and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds, e.g. ``2024-01-01T00:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO date or datetime string; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class NewsResponse(CamelModel):
    id: int
    title: str
    description: str
    image: Optional[str] = None
    published_at: datetime

    @field_serializer("published_at")
    def _serialize_published_at(self, value: datetime) -> str:
        return format_timestamp(value)


class HeroResponse(CamelModel):
    id: int
    welcome_message: str
    description: str
    image: Optional[str] = None


class ExtracurricularResponse(CamelModel):
    id: int
    name: str
    description: str
    image: Optional[str] = None


class KalenderResponse(CamelModel):
    id: int
    title: str
    file: Optional[str] = None


class AlumniResponse(CamelModel):
    id: int
    title: str
    image: Optional[str] = None


class GaleriResponse(CamelModel):
    id: int
    title: str
    image: Optional[str] = None


class SaranaResponse(CamelModel):
    id: int
    name: str
    description: str
    image: Optional[str] = None


class HeadmasterMessageResponse(CamelModel):
    id: int
    message: str
    description: str
    image: Optional[str] = None
    headmaster_name: str


class SejarahResponse(CamelModel):
    id: int
    period: str
    text: str
    image: Optional[str] = None


class VisiMisiUpdate(BaseModel):
    visi: Optional[str] = None
    misi: Optional[list[str]] = None


class VisiMisiResponse(CamelModel):
    id: int
    visi: str
    misi: list[str] = Field(default_factory=list)


class ContactCreate(BaseModel):
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(default=None, max_length=64)
    message: str


class ContactResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)
