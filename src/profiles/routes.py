"""Profile endpoints for authenticated callers."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity, get_current_identity
from src.db.client import get_db
from src.profiles import service
from src.profiles.schemas import (
    BatchProfilesRequest,
    BatchProfilesResponse,
    ProfileInput,
    ProfileResponse,
    ProfileSearchResult,
    UsernameCheckResponse,
    ValidateProfileResponse,
)

router = APIRouter(
    prefix="/api/v1/profiles",
    tags=["Profiles"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("/search", response_model=list[ProfileSearchResult], summary="Search profiles", description="Match name or username substrings, or an exact Ethereum address.")
def search(query: str | None = Query(default=None), db: Session = Depends(get_db)):
    return service.search_profiles(db, query)


@router.post("/batch", response_model=BatchProfilesResponse, summary="Get profiles for many inbox ids")
def batch(body: BatchProfilesRequest, db: Session = Depends(get_db)):
    return {"profiles": service.get_profiles_batch(db, body.xmtp_ids)}


@router.get("/check/{username}", response_model=UsernameCheckResponse, summary="Check if a username is taken")
def check(username: str, db: Session = Depends(get_db)):
    return {"taken": service.check_username(db, username)}


@router.post("/validate", response_model=ValidateProfileResponse, summary="Validate profile fields")
def validate(body: ProfileInput, db: Session = Depends(get_db)):
    return service.validate_profile(db, body.model_dump(exclude_unset=True))


@router.get("/{xmtp_id}", response_model=ProfileResponse, summary="Get a profile")
def get(xmtp_id: str, db: Session = Depends(get_db)):
    return service.get_profile(db, xmtp_id)


@router.post("/{xmtp_id}", status_code=201, response_model=ProfileResponse, summary="Create a profile")
def create(xmtp_id: str, body: ProfileInput, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.create_profile(db, caller, xmtp_id, body.model_dump(exclude_unset=True))


@router.put("/{xmtp_id}", response_model=ProfileResponse, summary="Update a profile")
def update(xmtp_id: str, body: ProfileInput, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.update_profile(db, caller, xmtp_id, body.model_dump(exclude_unset=True))
