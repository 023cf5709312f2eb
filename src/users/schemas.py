"""Pydantic schemas for user onboarding and the current-user view."""

from src.db.models import DeviceOS
from src.profiles.schemas import ProfileInput
from src.utils.validators import CamelModel


# --- Requests ---

class NewUserDevice(CamelModel):
    os: DeviceOS
    name: str | None = None


class NewUserIdentity(CamelModel):
    turnkey_address: str
    xmtp_id: str
    xmtp_installation_id: str | None = None


class CreateUserRequest(CamelModel):
    turnkey_user_id: str
    device: NewUserDevice
    identity: NewUserIdentity
    profile: ProfileInput


# --- Responses ---

class CreatedDevice(CamelModel):
    id: str
    os: DeviceOS
    name: str | None


class UserIdentity(CamelModel):
    id: str
    turnkey_address: str
    xmtp_id: str | None


class CreatedProfile(CamelModel):
    id: str
    name: str
    username: str
    description: str | None
    avatar: str | None


class CreatedUserResponse(CamelModel):
    id: str
    turnkey_user_id: str
    device: CreatedDevice
    identity: UserIdentity
    profile: CreatedProfile


class CurrentUserResponse(CamelModel):
    id: str
    turnkey_user_id: str
    identities: list[UserIdentity]
