"""Pydantic schemas for device requests and responses."""

from datetime import datetime

from src.db.models import DeviceOS
from src.utils.validators import CamelModel


# --- Requests ---

class CreateDeviceRequest(CamelModel):
    os: DeviceOS
    name: str | None = None
    push_token: str | None = None
    expo_token: str | None = None
    app_version: str | None = None
    build_number: str | None = None


class UpdateDeviceRequest(CamelModel):
    os: DeviceOS | None = None
    name: str | None = None
    push_token: str | None = None
    expo_token: str | None = None
    app_version: str | None = None
    build_number: str | None = None


# --- Responses ---

class DeviceResponse(CamelModel):
    id: str
    user_id: str
    name: str | None
    os: DeviceOS
    push_token: str | None
    expo_token: str | None
    app_version: str | None
    build_number: str | None
    created_at: datetime
    updated_at: datetime
