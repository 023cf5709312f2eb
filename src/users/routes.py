"""User endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity, get_current_identity
from src.db.client import get_db
from src.users import service
from src.users.schemas import CreateUserRequest, CreatedUserResponse, CurrentUserResponse

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.post("", status_code=201, response_model=CreatedUserResponse, summary="Create a user", description="Create a user together with its first device, identity and profile.")
def create(body: CreateUserRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.create_user(db, body)


@router.get("/me", response_model=CurrentUserResponse, summary="Get the current user")
def me(db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.get_current_user(db, caller)
