"""Authorization checks: does the caller's inbox own the record being touched."""

from fastapi import HTTPException
from sqlalchemy.orm import Session

from src.db.models import DeviceIdentity


def owns_user(db: Session, xmtp_id: str, user_id: str) -> bool:
    return (
        db.query(DeviceIdentity.id)
        .filter(DeviceIdentity.user_id == user_id, DeviceIdentity.xmtp_id == xmtp_id)
        .first()
        is not None
    )


def verify_user_access(db: Session, xmtp_id: str, user_id: str, detail: str) -> None:
    if not owns_user(db, xmtp_id, user_id):
        raise HTTPException(status_code=403, detail=detail)


def get_owned_identity(db: Session, xmtp_id: str, identity_id: str, detail: str) -> DeviceIdentity:
    identity = (
        db.query(DeviceIdentity)
        .filter(DeviceIdentity.id == identity_id, DeviceIdentity.xmtp_id == xmtp_id)
        .first()
    )
    if not identity:
        raise HTTPException(status_code=403, detail=detail)
    return identity
