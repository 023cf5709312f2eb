"""Business logic for profiles: lookups, search and validated writes."""

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity
from src.auth.ownership import verify_user_access
from src.db.models import DeviceIdentity, Profile
from src.identities import repository as identity_repository
from src.profiles import repository
from src.profiles.validation import (
    ensure_username_available,
    is_username_taken,
    validate_profile_data,
)

logger = logging.getLogger(__name__)


def search_profiles(db: Session, query: str | None) -> list[Profile]:
    query = (query or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query is required")
    return repository.search(db, query)


def get_profiles_batch(db: Session, xmtp_ids: list[str]) -> dict[str, Profile]:
    profiles = repository.list_by_xmtp_ids(db, list(set(xmtp_ids)))
    return {profile.xmtp_id: profile for profile in profiles}


def check_username(db: Session, username: str) -> bool:
    return is_username_taken(db, username)


def validate_profile(db: Session, data: dict[str, Any]) -> dict[str, Any]:
    """Dry run of the write-path checks. Raises ProfileValidationError on failure."""
    cleaned = validate_profile_data(data, partial=True)
    if cleaned.get("username"):
        ensure_username_available(db, cleaned["username"])
    return {"success": True, "message": "Profile information is valid", "errors": {}}


def get_profile(db: Session, xmtp_id: str) -> Profile:
    profile = repository.get_by_xmtp_id(db, xmtp_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


def _get_owned_identity_by_xmtp_id(db: Session, caller: CurrentIdentity, xmtp_id: str, action: str) -> DeviceIdentity:
    identity = identity_repository.get_by_xmtp_id(db, xmtp_id)
    if not identity:
        raise HTTPException(status_code=404, detail="Identity not found")
    verify_user_access(db, caller.xmtp_id, identity.user_id, f"Not authorized to {action} this profile")
    return identity


def create_profile(db: Session, caller: CurrentIdentity, xmtp_id: str, data: dict[str, Any]) -> Profile:
    identity = _get_owned_identity_by_xmtp_id(db, caller, xmtp_id, "create")
    if identity.profile is not None:
        raise HTTPException(status_code=409, detail="Profile already exists for this identity")

    cleaned = validate_profile_data(data)
    ensure_username_available(db, cleaned["username"])

    profile = repository.create(db, identity.id, cleaned)
    logger.info("Created profile %s for identity %s", profile.id, identity.id)
    return profile


def update_profile(db: Session, caller: CurrentIdentity, xmtp_id: str, data: dict[str, Any]) -> Profile:
    identity = _get_owned_identity_by_xmtp_id(db, caller, xmtp_id, "update")
    profile = identity.profile
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    cleaned = validate_profile_data(data, partial=True)
    if cleaned.get("username"):
        ensure_username_available(db, cleaned["username"], exclude_profile_id=profile.id)

    return repository.update(db, profile, cleaned)


def get_public_profile_by_username(db: Session, username: str) -> Profile:
    profile = repository.get_by_username(db, username)
    if not profile or not profile.xmtp_id:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


def get_public_profile_by_xmtp_id(db: Session, xmtp_id: str) -> Profile:
    return get_profile(db, xmtp_id)
