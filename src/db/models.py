"""ORM models for users, devices, identities, profiles and conversation metadata."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from src.db.client import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeviceOS(str, enum.Enum):
    ios = "ios"
    android = "android"
    web = "web"
    macos = "macos"


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    turnkey_user_id = Column(String(255), unique=True, index=True, nullable=False)

    devices = relationship("Device", back_populates="user", cascade="all, delete-orphan")
    identities = relationship("DeviceIdentity", back_populates="user", cascade="all, delete-orphan")


class Device(TimestampMixin, Base):
    __tablename__ = "devices"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=True)
    os = Column(Enum(DeviceOS, name="device_os"), nullable=False)
    push_token = Column(String(512), index=True, nullable=True)
    expo_token = Column(String(512), nullable=True)
    app_version = Column(String(50), nullable=True)
    build_number = Column(String(50), nullable=True)

    user = relationship("User", back_populates="devices")
    identities = relationship("IdentitiesOnDevice", back_populates="device", cascade="all, delete-orphan")


class DeviceIdentity(TimestampMixin, Base):
    __tablename__ = "device_identities"
    __table_args__ = (UniqueConstraint("user_id", "xmtp_id", name="uq_device_identity_user_xmtp"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    xmtp_id = Column(String(255), index=True, nullable=True)
    turnkey_address = Column(String(255), nullable=False)

    user = relationship("User", back_populates="identities")
    devices = relationship("IdentitiesOnDevice", back_populates="identity", cascade="all, delete-orphan")
    profile = relationship("Profile", back_populates="device_identity", uselist=False, cascade="all, delete-orphan")
    conversation_metadata = relationship(
        "ConversationMetadata",
        back_populates="device_identity",
        cascade="all, delete-orphan",
    )


class IdentitiesOnDevice(TimestampMixin, Base):
    __tablename__ = "identities_on_device"

    device_id = Column(String(36), ForeignKey("devices.id", ondelete="CASCADE"), primary_key=True)
    identity_id = Column(String(36), ForeignKey("device_identities.id", ondelete="CASCADE"), primary_key=True)
    xmtp_installation_id = Column(String(255), index=True, nullable=True)

    device = relationship("Device", back_populates="identities")
    identity = relationship("DeviceIdentity", back_populates="devices")


class Profile(TimestampMixin, Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    device_identity_id = Column(
        String(36),
        ForeignKey("device_identities.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    name = Column(String(50), nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    avatar = Column(String(2048), nullable=True)

    device_identity = relationship("DeviceIdentity", back_populates="profile")

    @property
    def xmtp_id(self) -> str | None:
        return self.device_identity.xmtp_id if self.device_identity else None

    @property
    def turnkey_address(self) -> str | None:
        return self.device_identity.turnkey_address if self.device_identity else None


class ConversationMetadata(TimestampMixin, Base):
    __tablename__ = "conversation_metadata"
    __table_args__ = (
        UniqueConstraint("device_identity_id", "conversation_id", name="uq_conversation_metadata_identity_conversation"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    device_identity_id = Column(
        String(36),
        ForeignKey("device_identities.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    conversation_id = Column(String(255), nullable=False)
    pinned = Column(Boolean, default=False, nullable=False)
    unread = Column(Boolean, default=False, nullable=False)
    deleted = Column(Boolean, default=False, nullable=False)
    muted = Column(Boolean, default=False, nullable=False)
    read_until = Column(DateTime(timezone=True), nullable=True)

    device_identity = relationship("DeviceIdentity", back_populates="conversation_metadata")
