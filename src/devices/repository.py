"""Data access layer for devices."""

from typing import Any

from sqlalchemy.orm import Session

from src.db.models import Device, IdentitiesOnDevice


def create(db: Session, user_id: str, data: dict[str, Any]) -> Device:
    device = Device(user_id=user_id, **data)
    db.add(device)
    db.commit()
    db.refresh(device)
    return device


def list_by_user(db: Session, user_id: str) -> list[Device]:
    return db.query(Device).filter(Device.user_id == user_id).order_by(Device.created_at).all()


def get_by_id(db: Session, device_id: str) -> Device | None:
    return db.query(Device).filter(Device.id == device_id).first()


def get_for_user(db: Session, user_id: str, device_id: str) -> Device | None:
    return db.query(Device).filter(Device.id == device_id, Device.user_id == user_id).first()


def get_by_push_token(db: Session, push_token: str) -> Device | None:
    return db.query(Device).filter(Device.push_token == push_token).first()


def get_link(db: Session, device_id: str, identity_id: str) -> IdentitiesOnDevice | None:
    return db.get(IdentitiesOnDevice, (device_id, identity_id))


def upsert_link(db: Session, device_id: str, identity_id: str, installation_id: str | None) -> IdentitiesOnDevice:
    """Stage a link row without committing; callers own the transaction."""
    link = get_link(db, device_id, identity_id)
    if link is None:
        link = IdentitiesOnDevice(device_id=device_id, identity_id=identity_id, xmtp_installation_id=installation_id)
        db.add(link)
    elif installation_id is not None:
        link.xmtp_installation_id = installation_id
    return link
