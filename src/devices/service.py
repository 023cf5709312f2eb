"""Business logic for devices with ownership verification."""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity
from src.auth.ownership import verify_user_access
from src.db.client import transaction
from src.db.models import Device
from src.devices import repository
from src.identities import repository as identity_repository

logger = logging.getLogger(__name__)

TOKEN_FIELDS = ("push_token", "expo_token")


def list_devices(db: Session, caller: CurrentIdentity, user_id: str) -> list[Device]:
    verify_user_access(db, caller.xmtp_id, user_id, "Not authorized to access this user's devices")
    return repository.list_by_user(db, user_id)


def get_device(db: Session, caller: CurrentIdentity, user_id: str, device_id: str) -> Device:
    verify_user_access(db, caller.xmtp_id, user_id, "Not authorized to access this user's devices")
    device = repository.get_for_user(db, user_id, device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


def create_device(db: Session, caller: CurrentIdentity, user_id: str, data: dict) -> Device:
    verify_user_access(db, caller.xmtp_id, user_id, "Not authorized to create a device for this user")
    return repository.create(db, user_id, data)


def update_device(db: Session, caller: CurrentIdentity, user_id: str, device_id: str, data: dict) -> Device:
    verify_user_access(db, caller.xmtp_id, user_id, "Not authorized to update this user's device")
    device = repository.get_for_user(db, user_id, device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")

    # os is required on the row; an explicit null leaves it unchanged
    if data.get("os") is None:
        data.pop("os", None)

    tokens_changed = any(
        field in data and data[field] != getattr(device, field) for field in TOKEN_FIELDS
    )

    with transaction(db):
        for field, value in data.items():
            setattr(device, field, value)

        # New push tokens mean the calling installation now receives pushes on this device
        if tokens_changed and caller.installation_id:
            identity = identity_repository.get_for_user(db, user_id, caller.xmtp_id)
            if identity:
                repository.upsert_link(db, device.id, identity.id, caller.installation_id)
                logger.info("Linked installation %s to device %s", caller.installation_id, device.id)

    db.refresh(device)
    return device
