"""Onboarding: create a user with its first device, identity and profile."""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity
from src.db.client import transaction
from src.db.models import Device, DeviceIdentity, IdentitiesOnDevice, Profile, User
from src.profiles.validation import ensure_username_available, validate_profile_data
from src.users import repository
from src.users.schemas import CreateUserRequest

logger = logging.getLogger(__name__)


def create_user(db: Session, body: CreateUserRequest) -> dict:
    profile_data = validate_profile_data(body.profile.model_dump(exclude_unset=True))
    ensure_username_available(db, profile_data["username"])

    if repository.get_by_turnkey_user_id(db, body.turnkey_user_id):
        raise HTTPException(status_code=409, detail="User already exists")

    with transaction(db):
        user = User(turnkey_user_id=body.turnkey_user_id)
        device = Device(user=user, os=body.device.os, name=body.device.name)
        identity = DeviceIdentity(
            user=user,
            xmtp_id=body.identity.xmtp_id,
            turnkey_address=body.identity.turnkey_address,
        )
        link = IdentitiesOnDevice(
            device=device,
            identity=identity,
            xmtp_installation_id=body.identity.xmtp_installation_id,
        )
        profile = Profile(device_identity=identity, **profile_data)
        db.add_all([user, device, identity, link, profile])

    logger.info("Created user %s with device %s and identity %s", user.id, device.id, identity.id)
    return {
        "id": user.id,
        "turnkey_user_id": user.turnkey_user_id,
        "device": device,
        "identity": identity,
        "profile": profile,
    }


def get_current_user(db: Session, caller: CurrentIdentity) -> dict:
    user = repository.get_by_xmtp_id(db, caller.xmtp_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {
        "id": user.id,
        "turnkey_user_id": user.turnkey_user_id,
        "identities": repository.list_linked_identities(db, user.id),
    }
