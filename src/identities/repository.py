"""Data access layer for device identities."""

from sqlalchemy.orm import Session

from src.db.models import DeviceIdentity, IdentitiesOnDevice


def get_by_xmtp_id(db: Session, xmtp_id: str) -> DeviceIdentity | None:
    return db.query(DeviceIdentity).filter(DeviceIdentity.xmtp_id == xmtp_id).first()


def get_for_user(db: Session, user_id: str, xmtp_id: str) -> DeviceIdentity | None:
    return (
        db.query(DeviceIdentity)
        .filter(DeviceIdentity.user_id == user_id, DeviceIdentity.xmtp_id == xmtp_id)
        .first()
    )


def list_for_user(db: Session, user_id: str, xmtp_id: str) -> list[DeviceIdentity]:
    return (
        db.query(DeviceIdentity)
        .filter(DeviceIdentity.user_id == user_id, DeviceIdentity.xmtp_id == xmtp_id)
        .order_by(DeviceIdentity.created_at)
        .all()
    )


def list_for_device(db: Session, device_id: str) -> list[DeviceIdentity]:
    return (
        db.query(DeviceIdentity)
        .join(IdentitiesOnDevice, IdentitiesOnDevice.identity_id == DeviceIdentity.id)
        .filter(IdentitiesOnDevice.device_id == device_id)
        .order_by(IdentitiesOnDevice.created_at)
        .all()
    )


def upsert(db: Session, user_id: str, xmtp_id: str, turnkey_address: str) -> DeviceIdentity:
    """Stage the identity keyed by (user, xmtp id) without committing."""
    identity = get_for_user(db, user_id, xmtp_id)
    if identity is None:
        identity = DeviceIdentity(user_id=user_id, xmtp_id=xmtp_id, turnkey_address=turnkey_address)
        db.add(identity)
        db.flush()
    else:
        identity.turnkey_address = turnkey_address
    return identity


def list_links(db: Session, device_id: str, identity_id: str) -> list[IdentitiesOnDevice]:
    return (
        db.query(IdentitiesOnDevice)
        .filter(IdentitiesOnDevice.device_id == device_id, IdentitiesOnDevice.identity_id == identity_id)
        .all()
    )
