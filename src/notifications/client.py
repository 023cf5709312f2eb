"""Client for the XMTP notification service (Connect protocol, JSON over HTTP)."""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

SERVICE_PATH = "notifications.v1.Notifications"


class NotificationServiceError(Exception):
    """Raised when the notification service rejects a call or cannot be reached."""

    def __init__(self, method: str, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(f"{method}: {message}")
        self.method = method
        self.code = code
        self.status_code = status_code


@dataclass
class HmacKey:
    thirty_day_periods_since_epoch: int
    key: bytes


@dataclass
class Subscription:
    topic: str
    is_silent: bool = False
    hmac_keys: list[HmacKey] = field(default_factory=list)


@dataclass
class RegisteredInstallation:
    installation_id: str
    valid_until: int


class NotificationClient:
    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout, connect=5.0),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def _call(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.post(f"/{SERVICE_PATH}/{method}", json=body)
        except httpx.HTTPError as exc:
            raise NotificationServiceError(method, str(exc)) from exc

        if resp.status_code != 200:
            try:
                error = resp.json()
            except ValueError:
                error = {}
            raise NotificationServiceError(
                method,
                error.get("message") or resp.text or f"HTTP {resp.status_code}",
                code=error.get("code"),
                status_code=resp.status_code,
            )
        return resp.json() if resp.content else {}

    async def register_installation(self, installation_id: str, mechanism: str, token: str) -> RegisteredInstallation:
        data = await self._call(
            "RegisterInstallation",
            {"installationId": installation_id, "deliveryMechanism": {mechanism: token}},
        )
        return RegisteredInstallation(
            installation_id=data.get("installationId", installation_id),
            valid_until=int(data.get("validUntil", 0)),
        )

    async def delete_installation(self, installation_id: str) -> None:
        await self._call("DeleteInstallation", {"installationId": installation_id})
        logger.info("Unregistered installation %s", installation_id)

    async def subscribe(self, installation_id: str, topics: list[str]) -> None:
        await self._call("Subscribe", {"installationId": installation_id, "topics": topics})

    async def subscribe_with_metadata(self, installation_id: str, subscriptions: list[Subscription]) -> None:
        await self._call(
            "SubscribeWithMetadata",
            {
                "installationId": installation_id,
                "subscriptions": [
                    {
                        "topic": sub.topic,
                        "isSilent": sub.is_silent,
                        "hmacKeys": [
                            {
                                "thirtyDayPeriodsSinceEpoch": key.thirty_day_periods_since_epoch,
                                "key": base64.b64encode(key.key).decode(),
                            }
                            for key in sub.hmac_keys
                        ],
                    }
                    for sub in subscriptions
                ],
            },
        )

    async def unsubscribe(self, installation_id: str, topics: list[str]) -> None:
        await self._call("Unsubscribe", {"installationId": installation_id, "topics": topics})

    async def aclose(self) -> None:
        await self._client.aclose()


_notification_client: NotificationClient | None = None


def get_notification_client() -> NotificationClient:
    global _notification_client
    if _notification_client is None:
        _notification_client = NotificationClient(get_settings().NOTIFICATION_SERVER_URL)
    return _notification_client
