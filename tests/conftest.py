"""Shared test fixtures."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["NOTIFICATION_SERVER_URL"] = "http://notifications.test"
os.environ["XMTP_NOTIFICATION_SECRET"] = "test-notification-secret"
os.environ["ENV"] = "test"

import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from src.auth.jwt import create_auth_token
from src.db import models
from src.db.client import Base, SessionLocal, engine
from src.main import app
from src.notifications.client import RegisteredInstallation, get_notification_client
from src.notifications.expo import PushTicket, get_push_client


class FakeNotificationClient:
    """Records calls instead of talking to the notification service."""

    def __init__(self):
        self.calls = []
        self.fail_deletes = False

    async def register_installation(self, installation_id, mechanism, token):
        self.calls.append(("register", installation_id, mechanism, token))
        return RegisteredInstallation(installation_id=installation_id, valid_until=1767225600)

    async def delete_installation(self, installation_id):
        self.calls.append(("delete", installation_id))
        if self.fail_deletes:
            raise RuntimeError("notification service unavailable")

    async def subscribe(self, installation_id, topics):
        self.calls.append(("subscribe", installation_id, topics))

    async def subscribe_with_metadata(self, installation_id, subscriptions):
        self.calls.append(("subscribe_with_metadata", installation_id, subscriptions))

    async def unsubscribe(self, installation_id, topics):
        self.calls.append(("unsubscribe", installation_id, topics))

    def deleted(self):
        return [call[1] for call in self.calls if call[0] == "delete"]


class FakePushClient:
    """Returns queued tickets; defaults to one ok ticket per message."""

    def __init__(self):
        self.sent = []
        self.tickets = None
        self.error = None

    async def send(self, messages):
        if self.error:
            raise self.error
        self.sent.extend(messages)
        if self.tickets is not None:
            return self.tickets
        return [PushTicket(status="ok", id=str(uuid.uuid4())) for _ in messages]


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def notification_client():
    return FakeNotificationClient()


@pytest.fixture
def push_client():
    return FakePushClient()


@pytest.fixture(autouse=True)
def override_clients(notification_client, push_client):
    app.dependency_overrides[get_notification_client] = lambda: notification_client
    app.dependency_overrides[get_push_client] = lambda: push_client
    yield
    app.dependency_overrides.pop(get_notification_client, None)
    app.dependency_overrides.pop(get_push_client, None)


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _auth_header(xmtp_id, installation_id=None):
    return {"X-Convos-AuthToken": create_auth_token(xmtp_id, installation_id)}


@pytest.fixture
def auth_header_for():
    return _auth_header


@pytest.fixture
def seed(db):
    """Create a user with one device and one linked identity; returns ids and auth headers."""

    def _seed(
        xmtp_id=None,
        installation_id=None,
        push_token=None,
        expo_token=None,
        profile=None,
        os="ios",
    ):
        xmtp_id = xmtp_id or f"inbox-{uuid.uuid4().hex[:12]}"
        installation_id = installation_id or uuid.uuid4().hex

        user = models.User(turnkey_user_id=f"turnkey-{uuid.uuid4().hex[:12]}")
        device = models.Device(user=user, os=os, name="Phone", push_token=push_token, expo_token=expo_token)
        identity = models.DeviceIdentity(
            user=user,
            xmtp_id=xmtp_id,
            turnkey_address="0x" + uuid.uuid4().hex + uuid.uuid4().hex[:8],
        )
        link = models.IdentitiesOnDevice(device=device, identity=identity, xmtp_installation_id=installation_id)
        db.add_all([user, device, identity, link])
        if profile:
            db.add(models.Profile(device_identity=identity, **profile))
        db.commit()

        return SimpleNamespace(
            user_id=user.id,
            device_id=device.id,
            identity_id=identity.id,
            turnkey_address=identity.turnkey_address,
            xmtp_id=xmtp_id,
            installation_id=installation_id,
            headers=_auth_header(xmtp_id, installation_id),
        )

    return _seed
