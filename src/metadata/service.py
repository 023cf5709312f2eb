"""Conversation metadata is created lazily with defaults on first read."""

from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity
from src.auth.ownership import get_owned_identity
from src.db.client import transaction
from src.db.models import ConversationMetadata
from src.metadata import repository

NOT_AUTHORIZED = "Not authorized to access this device identity"


def get_conversation_metadata(
    db: Session, caller: CurrentIdentity, device_identity_id: str, conversation_id: str
) -> ConversationMetadata:
    get_owned_identity(db, caller.xmtp_id, device_identity_id, NOT_AUTHORIZED)

    row = repository.get(db, device_identity_id, conversation_id)
    if row is None:
        with transaction(db):
            row = repository.create_defaults(db, device_identity_id, [conversation_id])[0]
        db.refresh(row)
    return row


def get_conversations_metadata(
    db: Session, caller: CurrentIdentity, device_identity_id: str, conversation_ids: list[str]
) -> list[ConversationMetadata]:
    get_owned_identity(db, caller.xmtp_id, device_identity_id, NOT_AUTHORIZED)

    # Preserve request order, drop duplicates
    conversation_ids = list(dict.fromkeys(conversation_ids))
    existing = {row.conversation_id: row for row in repository.list_for_conversations(db, device_identity_id, conversation_ids)}
    missing = [conversation_id for conversation_id in conversation_ids if conversation_id not in existing]

    if missing:
        with transaction(db):
            for row in repository.create_defaults(db, device_identity_id, missing):
                existing[row.conversation_id] = row

    return [existing[conversation_id] for conversation_id in conversation_ids]


def upsert_conversation_metadata(db: Session, caller: CurrentIdentity, data: dict) -> ConversationMetadata:
    device_identity_id = data.pop("device_identity_id")
    conversation_id = data.pop("conversation_id")
    get_owned_identity(db, caller.xmtp_id, device_identity_id, NOT_AUTHORIZED)

    # Omitted or null flags keep their stored (or default) value
    values = {field: value for field, value in data.items() if value is not None}
    return repository.upsert(db, device_identity_id, conversation_id, values)
