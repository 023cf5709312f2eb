"""Data access layer for profiles."""

from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from src.db.models import DeviceIdentity, Profile
from src.utils.validators import is_eth_address

SEARCH_LIMIT = 50


def _with_identity(db: Session):
    return db.query(Profile).join(DeviceIdentity, Profile.device_identity_id == DeviceIdentity.id).options(
        joinedload(Profile.device_identity)
    )


def get_by_xmtp_id(db: Session, xmtp_id: str) -> Profile | None:
    return _with_identity(db).filter(DeviceIdentity.xmtp_id == xmtp_id).first()


def get_by_username(db: Session, username: str) -> Profile | None:
    return _with_identity(db).filter(func.lower(Profile.username) == username.lower()).first()


def list_by_xmtp_ids(db: Session, xmtp_ids: list[str]) -> list[Profile]:
    return _with_identity(db).filter(DeviceIdentity.xmtp_id.in_(xmtp_ids)).all()


def search(db: Session, query: str, limit: int = SEARCH_LIMIT) -> list[Profile]:
    needle = query.lower()
    conditions = [
        func.lower(Profile.name).contains(needle, autoescape=True),
        func.lower(Profile.username).contains(needle, autoescape=True),
    ]
    if is_eth_address(query):
        conditions.append(func.lower(DeviceIdentity.turnkey_address) == query.lower())

    return (
        _with_identity(db)
        .filter(DeviceIdentity.xmtp_id.isnot(None), or_(*conditions))
        .order_by(Profile.username)
        .limit(limit)
        .all()
    )


def create(db: Session, device_identity_id: str, data: dict[str, Any]) -> Profile:
    profile = Profile(device_identity_id=device_identity_id, **data)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update(db: Session, profile: Profile, data: dict[str, Any]) -> Profile:
    for field, value in data.items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile
