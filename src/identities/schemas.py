"""Pydantic schemas for device identity requests and responses."""

from datetime import datetime

from src.utils.validators import CamelModel


# --- Requests ---

class CreateIdentityRequest(CamelModel):
    turnkey_address: str


class UpdateIdentityRequest(CamelModel):
    turnkey_address: str
    xmtp_id: str | None = None


class LinkDeviceRequest(CamelModel):
    device_id: str | None = None


# --- Responses ---

class IdentityResponse(CamelModel):
    id: str
    user_id: str
    xmtp_id: str | None
    turnkey_address: str
    created_at: datetime
    updated_at: datetime


class IdentityLinkResponse(CamelModel):
    device_id: str
    identity_id: str
    xmtp_installation_id: str | None
