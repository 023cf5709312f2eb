"""Data access layer for users."""

from sqlalchemy.orm import Session

from src.db.models import DeviceIdentity, IdentitiesOnDevice, User


def get_by_turnkey_user_id(db: Session, turnkey_user_id: str) -> User | None:
    return db.query(User).filter(User.turnkey_user_id == turnkey_user_id).first()


def get_by_xmtp_id(db: Session, xmtp_id: str) -> User | None:
    return (
        db.query(User)
        .join(DeviceIdentity, DeviceIdentity.user_id == User.id)
        .filter(DeviceIdentity.xmtp_id == xmtp_id)
        .first()
    )


def list_linked_identities(db: Session, user_id: str) -> list[DeviceIdentity]:
    """Identities linked to any of the user's devices, each listed once."""
    return (
        db.query(DeviceIdentity)
        .join(IdentitiesOnDevice, IdentitiesOnDevice.identity_id == DeviceIdentity.id)
        .filter(DeviceIdentity.user_id == user_id)
        .distinct()
        .order_by(DeviceIdentity.created_at)
        .all()
    )
