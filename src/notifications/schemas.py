"""Schemas for notification registration and the XMTP delivery webhook."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from src.utils.validators import CamelModel


# --- Registration / subscription requests ---

class DeliveryMechanismType(CamelModel):
    case: Literal["apnsDeviceToken", "firebaseDeviceToken", "customToken"]
    value: str


class DeliveryMechanism(CamelModel):
    delivery_mechanism_type: DeliveryMechanismType


class RegisterInstallationRequest(CamelModel):
    installation_id: str
    delivery_mechanism: DeliveryMechanism


class HmacKeyInput(CamelModel):
    thirty_day_periods_since_epoch: int
    key: str = Field(description="Hex-encoded key bytes")


class SubscriptionInput(CamelModel):
    topic: str
    is_silent: bool = False
    hmac_keys: list[HmacKeyInput] = Field(default_factory=list)


class SubscribeRequest(CamelModel):
    installation_id: str
    topics: list[str] | None = None
    subscriptions: list[SubscriptionInput] | None = None

    @model_validator(mode="after")
    def _topics_or_subscriptions(self):
        if self.topics is None and self.subscriptions is None:
            raise ValueError("either topics or subscriptions is required")
        return self


class UnsubscribeRequest(CamelModel):
    installation_id: str
    topics: list[str]


class RegisteredInstallationResponse(CamelModel):
    installation_id: str
    valid_until: int


# --- Webhook payload (snake_case on the wire) ---

class NotificationMessage(BaseModel):
    content_topic: str
    # uint64 arrives as a JSON string; forwarded as received
    timestamp_ns: str | int
    message: str


class MessageContext(BaseModel):
    message_type: str | None = None
    should_push: bool | None = None


class WebhookDeliveryMechanism(BaseModel):
    kind: str
    token: str


class NotificationInstallation(BaseModel):
    id: str
    delivery_mechanism: WebhookDeliveryMechanism


class NotificationSubscription(BaseModel):
    created_at: str | None = None
    topic: str
    is_silent: bool = False


class XmtpNotification(BaseModel):
    idempotency_key: str | None = None
    message: NotificationMessage
    message_context: MessageContext
    installation: NotificationInstallation
    subscription: NotificationSubscription
