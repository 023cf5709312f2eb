"""Pydantic schemas for profile requests and responses."""

from datetime import datetime

from pydantic import Field

from src.utils.validators import CamelModel


# --- Requests ---

class ProfileInput(CamelModel):
    """Raw profile fields, checked by src.profiles.validation."""

    name: str | None = None
    username: str | None = None
    description: str | None = None
    avatar: str | None = None


class BatchProfilesRequest(CamelModel):
    xmtp_ids: list[str] = Field(min_length=1, max_length=1000)


# --- Responses ---

class ProfileResponse(CamelModel):
    id: str
    device_identity_id: str
    name: str
    username: str
    description: str | None
    avatar: str | None
    xmtp_id: str | None
    turnkey_address: str | None
    created_at: datetime
    updated_at: datetime


class ProfileSearchResult(CamelModel):
    id: str
    name: str
    username: str
    description: str | None
    avatar: str | None
    xmtp_id: str | None
    turnkey_address: str | None


class PublicProfileResponse(CamelModel):
    name: str
    username: str
    description: str | None
    avatar: str | None
    xmtp_id: str | None
    turnkey_address: str | None


class BatchProfilesResponse(CamelModel):
    profiles: dict[str, ProfileResponse]


class UsernameCheckResponse(CamelModel):
    taken: bool


class ValidateProfileResponse(CamelModel):
    success: bool
    message: str
    errors: dict
