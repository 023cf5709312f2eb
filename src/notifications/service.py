"""Notification registration helpers and delivery of XMTP messages as Expo pushes."""

import asyncio
import logging
from dataclasses import dataclass

from fastapi import HTTPException
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from src.db.client import transaction
from src.db.models import Device, IdentitiesOnDevice
from src.devices import repository as device_repository
from src.notifications.client import HmacKey, NotificationClient, Subscription
from src.notifications.expo import ExpoPushClient
from src.notifications.schemas import SubscriptionInput, XmtpNotification
from src.notifications.topics import is_conversation_topic, is_welcome_topic
from src.utils.validators import is_expo_push_token

logger = logging.getLogger(__name__)


async def unregister_installations(notification_client: NotificationClient, installation_ids: list[str]) -> None:
    """Best effort: failures are logged, never raised."""
    results = await asyncio.gather(
        *(notification_client.delete_installation(installation_id) for installation_id in installation_ids),
        return_exceptions=True,
    )
    for installation_id, result in zip(installation_ids, results):
        if isinstance(result, Exception):
            logger.error("Failed to unregister installation %s: %s", installation_id, result)


def to_subscriptions(inputs: list[SubscriptionInput]) -> list[Subscription]:
    subscriptions = []
    for item in inputs:
        try:
            keys = [HmacKey(key.thirty_day_periods_since_epoch, bytes.fromhex(key.key)) for key in item.hmac_keys]
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid hex HMAC key for topic {item.topic}")
        subscriptions.append(Subscription(topic=item.topic, is_silent=item.is_silent, hmac_keys=keys))
    return subscriptions


def _topic_kind(topic: str) -> str:
    if is_welcome_topic(topic):
        return "welcome"
    if is_conversation_topic(topic):
        return "conversation"
    return "unknown"


def _pick_link(device: Device, installation_id: str) -> IdentitiesOnDevice | None:
    for link in device.identities:
        if link.xmtp_installation_id == installation_id:
            return link
    return device.identities[0] if device.identities else None


def build_push_message(notification: XmtpNotification, expo_token: str, eth_address: str) -> dict:
    data = {
        "contentTopic": notification.message.content_topic,
        "messageType": notification.message_context.message_type,
        "encryptedMessage": notification.message.message,
        "timestamp": notification.message.timestamp_ns,
        "ethAddress": eth_address,
    }
    if notification.subscription.is_silent:
        # content-available wakes iOS without an alert; normal priority for Android
        return {"to": expo_token, "data": data, "_contentAvailable": True, "priority": "normal"}
    return {
        "to": expo_token,
        "sound": "default",
        "body": "New message",
        "data": data,
        "priority": "high",
        "mutableContent": True,
    }


@dataclass
class PushTarget:
    device_id: str
    expo_token: str | None
    eth_address: str | None


def _find_push_target(db: Session, push_token: str, installation_id: str) -> PushTarget | None:
    device = device_repository.get_by_push_token(db, push_token)
    if device is None:
        return None
    link = _pick_link(device, installation_id)
    return PushTarget(
        device_id=device.id,
        expo_token=device.expo_token,
        eth_address=link.identity.turnkey_address if link else None,
    )


def _forget_push_tokens(db: Session, device_id: str) -> None:
    device = device_repository.get_by_id(db, device_id)
    if device is None:
        return
    with transaction(db):
        device.push_token = None
        device.expo_token = None
        for link in device.identities:
            link.xmtp_installation_id = None


async def handle_xmtp_notification(
    db: Session,
    notification: XmtpNotification,
    push_client: ExpoPushClient,
    notification_client: NotificationClient,
) -> None:
    installation_id = notification.installation.id
    logger.info(
        "Received %s notification for installation %s on %s",
        _topic_kind(notification.message.content_topic),
        installation_id,
        notification.message.content_topic,
    )

    if not notification.message_context.should_push:
        return

    target = await run_in_threadpool(
        _find_push_target, db, notification.installation.delivery_mechanism.token, installation_id
    )
    if target is None:
        logger.warning("No device for installation %s, unregistering it", installation_id)
        await unregister_installations(notification_client, [installation_id])
        raise HTTPException(status_code=404, detail="Device not found")

    if target.eth_address is None:
        logger.error("Device %s has no linked identity", target.device_id)
        return

    if not is_expo_push_token(target.expo_token):
        logger.error("Device %s has no valid Expo push token", target.device_id)
        return

    message = build_push_message(notification, target.expo_token, target.eth_address)
    tickets = await push_client.send([message])

    for ticket in tickets:
        if ticket.ok:
            continue
        logger.warning("Push to device %s failed: %s (%s)", target.device_id, ticket.message, ticket.error)
        if ticket.device_not_registered:
            await run_in_threadpool(_forget_push_tokens, db, target.device_id)
            logger.info("Cleared push tokens of unregistered device %s", target.device_id)
            await unregister_installations(notification_client, [installation_id])
            break
