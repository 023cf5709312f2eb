"""Tests for the notification service client, topic helpers, the Expo client and registration routes."""

import asyncio
import base64
import json

import httpx
import pytest

from src.notifications.client import HmacKey, NotificationClient, NotificationServiceError, Subscription
from src.notifications.expo import ExpoPushClient, PushServerError, chunk_messages
from src.notifications.topics import (
    build_conversation_topic,
    build_welcome_topic,
    is_conversation_topic,
    is_welcome_topic,
)


def _recording_transport(requests, status_code=200, payload=None):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json=payload if payload is not None else {})

    return httpx.MockTransport(handler)


# --- Topics ---

def test_topics():
    assert build_welcome_topic("abc") == "/xmtp/mls/1/w-abc/proto"
    assert build_conversation_topic("g1") == "/xmtp/mls/1/g-g1/proto"
    assert is_welcome_topic(build_welcome_topic("abc"))
    assert not is_welcome_topic(build_conversation_topic("g1"))
    assert is_conversation_topic(build_conversation_topic("g1"))
    assert not is_conversation_topic("/xmtp/mls/1/g-g1")


# --- Notification service client ---

def test_register_installation_request_shape():
    requests = []
    transport = _recording_transport(requests, payload={"installationId": "inst-1", "validUntil": "1767225600"})
    client = NotificationClient("http://notifications.test/", transport=transport)

    registered = asyncio.run(client.register_installation("inst-1", "apnsDeviceToken", "apns-token"))

    assert registered.installation_id == "inst-1"
    assert registered.valid_until == 1767225600
    request = requests[0]
    assert request.url.path == "/notifications.v1.Notifications/RegisterInstallation"
    assert json.loads(request.content) == {
        "installationId": "inst-1",
        "deliveryMechanism": {"apnsDeviceToken": "apns-token"},
    }


def test_subscribe_with_metadata_encodes_keys():
    requests = []
    client = NotificationClient("http://notifications.test", transport=_recording_transport(requests))
    subscription = Subscription(topic="/t", is_silent=True, hmac_keys=[HmacKey(20000, b"\x01\x02")])

    asyncio.run(client.subscribe_with_metadata("inst-1", [subscription]))

    body = json.loads(requests[0].content)
    assert requests[0].url.path.endswith("/SubscribeWithMetadata")
    assert body["subscriptions"] == [
        {
            "topic": "/t",
            "isSilent": True,
            "hmacKeys": [{"thirtyDayPeriodsSinceEpoch": 20000, "key": base64.b64encode(b"\x01\x02").decode()}],
        }
    ]


def test_service_error_is_raised():
    requests = []
    transport = _recording_transport(requests, status_code=404, payload={"code": "not_found", "message": "no such installation"})
    client = NotificationClient("http://notifications.test", transport=transport)

    with pytest.raises(NotificationServiceError) as exc_info:
        asyncio.run(client.delete_installation("inst-1"))
    assert exc_info.value.code == "not_found"
    assert exc_info.value.status_code == 404
    assert "no such installation" in str(exc_info.value)


# --- Expo push client ---

def test_chunk_messages():
    chunks = chunk_messages([{"to": str(i)} for i in range(250)])
    assert [len(chunk) for chunk in chunks] == [100, 100, 50]


def test_expo_send_returns_tickets():
    requests = []
    payload = {
        "data": [
            {"status": "ok", "id": "ticket-1"},
            {"status": "error", "message": "gone", "details": {"error": "DeviceNotRegistered"}},
        ]
    }
    client = ExpoPushClient("https://expo.test/push", access_token="secret", transport=_recording_transport(requests, payload=payload))

    tickets = asyncio.run(client.send([{"to": "a"}, {"to": "b"}]))

    assert tickets[0].ok and tickets[0].id == "ticket-1"
    assert not tickets[1].ok
    assert tickets[1].device_not_registered
    assert requests[0].headers["Authorization"] == "Bearer secret"


def test_expo_send_rejects_request_errors():
    requests = []
    payload = {"errors": [{"code": "PUSH_TOO_MANY_EXPERIENCE_IDS", "message": "bad"}]}
    client = ExpoPushClient("https://expo.test/push", transport=_recording_transport(requests, status_code=400, payload=payload))

    with pytest.raises(PushServerError):
        asyncio.run(client.send([{"to": "a"}]))


# --- Routes ---

REGISTER_BODY = {
    "installationId": "inst-1",
    "deliveryMechanism": {"deliveryMechanismType": {"case": "apnsDeviceToken", "value": "apns-token"}},
}


def test_register_route(client, seed, notification_client):
    owner = seed()
    resp = client.post("/api/v1/notifications/register", json=REGISTER_BODY, headers=owner.headers)
    assert resp.status_code == 201
    assert resp.json() == {"installationId": "inst-1", "validUntil": 1767225600}
    assert notification_client.calls == [("register", "inst-1", "apnsDeviceToken", "apns-token")]


def test_register_route_rejects_unknown_mechanism(client, seed):
    owner = seed()
    body = {"installationId": "inst-1", "deliveryMechanism": {"deliveryMechanismType": {"case": "pager", "value": "x"}}}
    resp = client.post("/api/v1/notifications/register", json=body, headers=owner.headers)
    assert resp.status_code == 400


def test_register_route_requires_auth(client):
    assert client.post("/api/v1/notifications/register", json=REGISTER_BODY).status_code == 401


def test_subscribe_topics(client, seed, notification_client):
    owner = seed()
    resp = client.post(
        "/api/v1/notifications/subscribe",
        json={"installationId": "inst-1", "topics": ["/a", "/b"]},
        headers=owner.headers,
    )
    assert resp.status_code == 200
    assert notification_client.calls == [("subscribe", "inst-1", ["/a", "/b"])]


def test_subscribe_with_metadata(client, seed, notification_client):
    owner = seed()
    resp = client.post(
        "/api/v1/notifications/subscribe",
        json={
            "installationId": "inst-1",
            "subscriptions": [
                {"topic": "/a", "isSilent": True, "hmacKeys": [{"thirtyDayPeriodsSinceEpoch": 7, "key": "0aff"}]}
            ],
        },
        headers=owner.headers,
    )
    assert resp.status_code == 200
    method, installation_id, subscriptions = notification_client.calls[0]
    assert method == "subscribe_with_metadata"
    assert subscriptions == [Subscription(topic="/a", is_silent=True, hmac_keys=[HmacKey(7, b"\x0a\xff")])]


def test_subscribe_invalid_hex_key(client, seed):
    owner = seed()
    resp = client.post(
        "/api/v1/notifications/subscribe",
        json={"installationId": "inst-1", "subscriptions": [{"topic": "/a", "hmacKeys": [{"thirtyDayPeriodsSinceEpoch": 7, "key": "zz"}]}]},
        headers=owner.headers,
    )
    assert resp.status_code == 400


def test_subscribe_requires_topics_or_subscriptions(client, seed):
    owner = seed()
    resp = client.post("/api/v1/notifications/subscribe", json={"installationId": "inst-1"}, headers=owner.headers)
    assert resp.status_code == 400


def test_unsubscribe(client, seed, notification_client):
    owner = seed()
    resp = client.post(
        "/api/v1/notifications/unsubscribe",
        json={"installationId": "inst-1", "topics": ["/a"]},
        headers=owner.headers,
    )
    assert resp.status_code == 200
    assert notification_client.calls == [("unsubscribe", "inst-1", ["/a"])]


def test_unregister(client, seed, notification_client):
    owner = seed()
    resp = client.delete("/api/v1/notifications/unregister/inst-1", headers=owner.headers)
    assert resp.status_code == 200
    assert notification_client.deleted() == ["inst-1"]


def test_upstream_failure_maps_to_502(client, seed, notification_client):
    owner = seed()

    async def failing_unsubscribe(installation_id, topics):
        raise NotificationServiceError("Unsubscribe", "unavailable", status_code=503)

    notification_client.unsubscribe = failing_unsubscribe
    resp = client.post(
        "/api/v1/notifications/unsubscribe",
        json={"installationId": "inst-1", "topics": ["/a"]},
        headers=owner.headers,
    )
    assert resp.status_code == 502
    assert resp.json()["error"]["type"] == "upstream_error"
