"""Expo push API client."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

MAX_MESSAGES_PER_REQUEST = 100
DEVICE_NOT_REGISTERED = "DeviceNotRegistered"


class PushServerError(Exception):
    """The Expo push service rejected the whole request."""


@dataclass
class PushTicket:
    status: str
    id: str | None = None
    message: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def device_not_registered(self) -> bool:
        return self.error == DEVICE_NOT_REGISTERED

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "PushTicket":
        details = data.get("details") or {}
        return cls(
            status=data.get("status", "error"),
            id=data.get("id"),
            message=data.get("message"),
            error=details.get("error"),
        )


def chunk_messages(messages: list[dict], size: int = MAX_MESSAGES_PER_REQUEST) -> list[list[dict]]:
    return [messages[i:i + size] for i in range(0, len(messages), size)]


class ExpoPushClient:
    def __init__(self, url: str, access_token: str = "", timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._url = url
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5.0), headers=headers, transport=transport)

    async def send(self, messages: list[dict]) -> list[PushTicket]:
        """Send messages in chunks. Returns one ticket per message, in order."""
        tickets: list[PushTicket] = []
        for chunk in chunk_messages(messages):
            try:
                resp = await self._client.post(self._url, json=chunk)
            except httpx.HTTPError as exc:
                raise PushServerError(f"Expo push request failed: {exc}") from exc
            try:
                body = resp.json()
            except ValueError as exc:
                raise PushServerError(f"Invalid response from Expo (HTTP {resp.status_code})") from exc

            if resp.status_code != 200 or body.get("errors"):
                raise PushServerError(f"Expo rejected push request: {body.get('errors') or resp.status_code}")

            data = body.get("data") or []
            # A single message may be answered with a single object
            if isinstance(data, dict):
                data = [data]
            chunk_tickets = [PushTicket.from_response(item) for item in data]
            logger.info("Push chunk sent: %d messages, %d ok", len(chunk), sum(t.ok for t in chunk_tickets))
            tickets.extend(chunk_tickets)
        return tickets

    async def aclose(self) -> None:
        await self._client.aclose()


_push_client: ExpoPushClient | None = None


def get_push_client() -> ExpoPushClient:
    global _push_client
    if _push_client is None:
        settings = get_settings()
        _push_client = ExpoPushClient(settings.EXPO_PUSH_URL, settings.EXPO_ACCESS_TOKEN)
    return _push_client
