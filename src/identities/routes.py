"""Device identity endpoints."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity, get_current_identity
from src.db.client import get_db
from src.identities import service
from src.identities.schemas import (
    CreateIdentityRequest,
    IdentityLinkResponse,
    IdentityResponse,
    LinkDeviceRequest,
    UpdateIdentityRequest,
)
from src.notifications.client import NotificationClient, get_notification_client

router = APIRouter(prefix="/api/v1/identities", tags=["Identities"])


@router.get("/device/{device_id}", response_model=list[IdentityResponse], summary="List identities on a device")
def list_for_device(device_id: str, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.list_device_identities(db, caller, device_id)


@router.get("/user/{user_id}", response_model=list[IdentityResponse], summary="List a user's identities", description="List the caller's identities belonging to the given user.")
def list_for_user(user_id: str, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.list_user_identities(db, caller, user_id)


@router.get("/{identity_id}", response_model=IdentityResponse, summary="Get an identity")
def get(identity_id: str, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.get_identity(db, caller, identity_id)


@router.post("/device/{device_id}", status_code=201, response_model=IdentityResponse, summary="Create an identity on a device", description="Create or update the caller's identity for the device owner and link it to the device.")
def create_with_device(device_id: str, body: CreateIdentityRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.create_identity_with_device(db, caller, device_id, body.turnkey_address)


@router.put("/{identity_id}", response_model=IdentityResponse, summary="Update an identity")
def update(identity_id: str, body: UpdateIdentityRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.update_identity(db, caller, identity_id, body.model_dump(exclude_unset=True))


@router.post("/{identity_id}/link", status_code=201, response_model=IdentityLinkResponse, summary="Link an identity to a device")
def link(identity_id: str, body: LinkDeviceRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return service.link_device(db, caller, identity_id, body.device_id)


@router.delete("/{identity_id}/link", status_code=204, summary="Unlink an identity from a device", description="Remove the link and unregister its installations from push notifications.")
async def unlink(
    identity_id: str,
    body: LinkDeviceRequest,
    db: Session = Depends(get_db),
    caller: CurrentIdentity = Depends(get_current_identity),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    await service.unlink_device(db, caller, identity_id, body.device_id, notification_client)
    return Response(status_code=204)
