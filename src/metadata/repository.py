"""Data access layer for conversation metadata."""

from typing import Any

from sqlalchemy.orm import Session

from src.db.models import ConversationMetadata


def get(db: Session, device_identity_id: str, conversation_id: str) -> ConversationMetadata | None:
    return (
        db.query(ConversationMetadata)
        .filter(
            ConversationMetadata.device_identity_id == device_identity_id,
            ConversationMetadata.conversation_id == conversation_id,
        )
        .first()
    )


def list_for_conversations(db: Session, device_identity_id: str, conversation_ids: list[str]) -> list[ConversationMetadata]:
    return (
        db.query(ConversationMetadata)
        .filter(
            ConversationMetadata.device_identity_id == device_identity_id,
            ConversationMetadata.conversation_id.in_(conversation_ids),
        )
        .all()
    )


def create_defaults(db: Session, device_identity_id: str, conversation_ids: list[str]) -> list[ConversationMetadata]:
    """Stage rows with default flags without committing."""
    rows = [
        ConversationMetadata(device_identity_id=device_identity_id, conversation_id=conversation_id)
        for conversation_id in conversation_ids
    ]
    db.add_all(rows)
    return rows


def upsert(db: Session, device_identity_id: str, conversation_id: str, values: dict[str, Any]) -> ConversationMetadata:
    row = get(db, device_identity_id, conversation_id)
    if row is None:
        row = ConversationMetadata(device_identity_id=device_identity_id, conversation_id=conversation_id, **values)
        db.add(row)
    else:
        for field, value in values.items():
            setattr(row, field, value)
    db.commit()
    db.refresh(row)
    return row
