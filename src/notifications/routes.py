"""Push notification registration endpoints and the XMTP delivery webhook."""

import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Response
from sqlalchemy.orm import Session

from src.auth.dependencies import get_current_identity
from src.config.settings import get_settings
from src.db.client import get_db
from src.notifications.client import NotificationClient, get_notification_client
from src.notifications.expo import ExpoPushClient, get_push_client
from src.notifications.schemas import (
    RegisteredInstallationResponse,
    RegisterInstallationRequest,
    SubscribeRequest,
    UnsubscribeRequest,
    XmtpNotification,
)
from src.notifications.service import handle_xmtp_notification, to_subscriptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


def verify_webhook_secret(authorization: str | None = Header(default=None)) -> None:
    expected = f"Bearer {get_settings().XMTP_NOTIFICATION_SECRET}"
    if not authorization or not hmac.compare_digest(authorization, expected):
        logger.warning("Rejected notification webhook call with invalid authorization")
        raise HTTPException(status_code=401, detail="Invalid authentication token")


@router.post("/register", status_code=201, response_model=RegisteredInstallationResponse, dependencies=[Depends(get_current_identity)], summary="Register an installation for push")
async def register(body: RegisterInstallationRequest, client: NotificationClient = Depends(get_notification_client)):
    mechanism = body.delivery_mechanism.delivery_mechanism_type
    registered = await client.register_installation(body.installation_id, mechanism.case, mechanism.value)
    return {"installation_id": registered.installation_id, "valid_until": registered.valid_until}


@router.post("/subscribe", dependencies=[Depends(get_current_identity)], summary="Subscribe an installation to topics", description="Send plain topics, or subscriptions with silent flags and hex-encoded HMAC keys.")
async def subscribe(body: SubscribeRequest, client: NotificationClient = Depends(get_notification_client)):
    if body.subscriptions is not None:
        await client.subscribe_with_metadata(body.installation_id, to_subscriptions(body.subscriptions))
    else:
        await client.subscribe(body.installation_id, body.topics)
    return Response(status_code=200)


@router.post("/unsubscribe", dependencies=[Depends(get_current_identity)], summary="Unsubscribe an installation from topics")
async def unsubscribe(body: UnsubscribeRequest, client: NotificationClient = Depends(get_notification_client)):
    await client.unsubscribe(body.installation_id, body.topics)
    return Response(status_code=200)


@router.delete("/unregister/{installation_id}", dependencies=[Depends(get_current_identity)], summary="Unregister an installation")
async def unregister(installation_id: str, client: NotificationClient = Depends(get_notification_client)):
    await client.delete_installation(installation_id)
    return Response(status_code=200)


@router.post("/xmtp/handle-notification", dependencies=[Depends(verify_webhook_secret)], summary="XMTP notification webhook", description="Called by the notification service for each message; forwards it to the device as an Expo push.")
async def handle_notification(
    notification: XmtpNotification,
    db: Session = Depends(get_db),
    push_client: ExpoPushClient = Depends(get_push_client),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    await handle_xmtp_notification(db, notification, push_client, notification_client)
    return Response(status_code=200)
