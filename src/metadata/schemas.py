"""Pydantic schemas for per-identity conversation metadata."""

from datetime import datetime

from src.utils.validators import CamelModel


class UpsertMetadataRequest(CamelModel):
    device_identity_id: str
    conversation_id: str
    pinned: bool | None = None
    unread: bool | None = None
    deleted: bool | None = None
    muted: bool | None = None
    read_until: datetime | None = None


class MetadataResponse(CamelModel):
    id: str
    device_identity_id: str
    conversation_id: str
    pinned: bool
    unread: bool
    deleted: bool
    muted: bool
    read_until: datetime | None
    created_at: datetime
    updated_at: datetime
