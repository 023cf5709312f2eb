"""Unauthenticated profile lookups used by share links and web previews."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.db.client import get_db
from src.profiles import service
from src.profiles.schemas import PublicProfileResponse

router = APIRouter(prefix="/api/v1/public/profiles", tags=["Public Profiles"])


@router.get("/username/{username}", response_model=PublicProfileResponse, summary="Public profile by username")
def by_username(username: str, db: Session = Depends(get_db)):
    return service.get_public_profile_by_username(db, username)


@router.get("/xmtpId/{xmtp_id}", response_model=PublicProfileResponse, summary="Public profile by inbox id")
def by_xmtp_id(xmtp_id: str, db: Session = Depends(get_db)):
    return service.get_public_profile_by_xmtp_id(db, xmtp_id)


@router.get("/{username}", response_model=PublicProfileResponse, summary="Public profile by username")
def get(username: str, db: Session = Depends(get_db)):
    return service.get_public_profile_by_username(db, username)
