"""Business logic for device identities and their links to devices."""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from src.auth.dependencies import CurrentIdentity
from src.auth.ownership import get_owned_identity, verify_user_access
from src.db.client import transaction
from src.db.models import Device, DeviceIdentity, IdentitiesOnDevice
from src.devices import repository as device_repository
from src.identities import repository
from src.notifications.client import NotificationClient
from src.notifications.service import unregister_installations

logger = logging.getLogger(__name__)


def _get_device(db: Session, device_id: str) -> Device:
    device = device_repository.get_by_id(db, device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


def list_device_identities(db: Session, caller: CurrentIdentity, device_id: str) -> list[DeviceIdentity]:
    device = _get_device(db, device_id)
    verify_user_access(db, caller.xmtp_id, device.user_id, "Not authorized to access this device")
    return repository.list_for_device(db, device_id)


def list_user_identities(db: Session, caller: CurrentIdentity, user_id: str) -> list[DeviceIdentity]:
    verify_user_access(db, caller.xmtp_id, user_id, "Not authorized to access this user's identities")
    return repository.list_for_user(db, user_id, caller.xmtp_id)


def get_identity(db: Session, caller: CurrentIdentity, identity_id: str) -> DeviceIdentity:
    return get_owned_identity(db, caller.xmtp_id, identity_id, "Not authorized to access this identity")


def create_identity_with_device(db: Session, caller: CurrentIdentity, device_id: str, turnkey_address: str) -> DeviceIdentity:
    """Upsert the caller's identity under the device owner and link it to the device."""
    device = _get_device(db, device_id)

    with transaction(db):
        identity = repository.upsert(db, device.user_id, caller.xmtp_id, turnkey_address)
        device_repository.upsert_link(db, device_id, identity.id, caller.installation_id)

    db.refresh(identity)
    return identity


def update_identity(db: Session, caller: CurrentIdentity, identity_id: str, data: dict) -> DeviceIdentity:
    identity = get_owned_identity(db, caller.xmtp_id, identity_id, "Not authorized to update this identity")
    with transaction(db):
        for field, value in data.items():
            setattr(identity, field, value)
    db.refresh(identity)
    return identity


def _authorize_link_change(db: Session, caller: CurrentIdentity, identity_id: str, device_id: str | None, action: str) -> Device:
    if not device_id:
        raise HTTPException(status_code=400, detail="deviceId is required in request body")
    get_owned_identity(db, caller.xmtp_id, identity_id, f"Not authorized to {action} this identity")
    device = _get_device(db, device_id)
    preposition = "to" if action == "link" else "from"
    verify_user_access(db, caller.xmtp_id, device.user_id, f"Not authorized to {action} {preposition} this device")
    return device


def link_device(db: Session, caller: CurrentIdentity, identity_id: str, device_id: str | None) -> IdentitiesOnDevice:
    _authorize_link_change(db, caller, identity_id, device_id, "link")
    with transaction(db):
        link = device_repository.upsert_link(db, device_id, identity_id, caller.installation_id)
    db.refresh(link)
    return link


def _linked_installations(db: Session, caller: CurrentIdentity, identity_id: str, device_id: str | None) -> list[str]:
    _authorize_link_change(db, caller, identity_id, device_id, "unlink")
    links = repository.list_links(db, device_id, identity_id)
    if not links:
        raise HTTPException(status_code=404, detail="Identity is not linked to this device")
    return [link.xmtp_installation_id for link in links if link.xmtp_installation_id]


def _delete_links(db: Session, device_id: str, identity_id: str) -> None:
    with transaction(db):
        for link in repository.list_links(db, device_id, identity_id):
            db.delete(link)


async def unlink_device(
    db: Session,
    caller: CurrentIdentity,
    identity_id: str,
    device_id: str | None,
    notification_client: NotificationClient,
) -> None:
    installation_ids = await run_in_threadpool(_linked_installations, db, caller, identity_id, device_id)
    if installation_ids:
        await unregister_installations(notification_client, installation_ids)

    await run_in_threadpool(_delete_links, db, device_id, identity_id)
    logger.info("Unlinked identity %s from device %s", identity_id, device_id)
