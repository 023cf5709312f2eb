"""Device endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.auth.dependencies import CurrentIdentity, get_current_identity
from src.db.client import get_db
from src.devices.schemas import CreateDeviceRequest, DeviceResponse, UpdateDeviceRequest
from src.devices.service import create_device, get_device, list_devices, update_device

router = APIRouter(prefix="/api/v1/devices", tags=["Devices"])


@router.get("/{user_id}", response_model=list[DeviceResponse], summary="List devices", description="List all devices of a user owned by the caller.")
def list_all(user_id: str, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return list_devices(db, caller, user_id)


@router.get("/{user_id}/{device_id}", response_model=DeviceResponse, summary="Get a device")
def get(user_id: str, device_id: str, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return get_device(db, caller, user_id, device_id)


@router.post("/{user_id}", status_code=201, response_model=DeviceResponse, summary="Create a device")
def create(user_id: str, body: CreateDeviceRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return create_device(db, caller, user_id, body.model_dump())


@router.put("/{user_id}/{device_id}", response_model=DeviceResponse, summary="Update a device", description="Update device fields. Changing push tokens also links the calling installation to the device.")
def update(user_id: str, device_id: str, body: UpdateDeviceRequest, db: Session = Depends(get_db), caller: CurrentIdentity = Depends(get_current_identity)):
    return update_device(db, caller, user_id, device_id, body.model_dump(exclude_unset=True))
