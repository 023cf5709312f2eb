"""Tests for conversation metadata endpoints."""


def test_get_metadata_creates_defaults(client, seed):
    owner = seed()
    url = f"/api/v1/metadata/conversation/{owner.identity_id}/conv-1"

    resp = client.get(url, headers=owner.headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["conversationId"] == "conv-1"
    assert data["deviceIdentityId"] == owner.identity_id
    assert data["pinned"] is False
    assert data["muted"] is False
    assert data["readUntil"] is None

    # Same row on the next read
    assert client.get(url, headers=owner.headers).json()["id"] == data["id"]


def test_get_metadata_for_foreign_identity(client, seed):
    owner = seed()
    stranger = seed()
    resp = client.get(f"/api/v1/metadata/conversation/{owner.identity_id}/conv-1", headers=stranger.headers)
    assert resp.status_code == 403


def test_get_many_creates_missing(client, seed):
    owner = seed()
    client.post(
        "/api/v1/metadata/conversation",
        json={"deviceIdentityId": owner.identity_id, "conversationId": "conv-2", "pinned": True},
        headers=owner.headers,
    )

    resp = client.get(
        f"/api/v1/metadata/conversations/{owner.identity_id}",
        params={"conversationIds": "conv-1,conv-2,conv-3,conv-1"},
        headers=owner.headers,
    )
    assert resp.status_code == 200
    rows = resp.json()
    assert [row["conversationId"] for row in rows] == ["conv-1", "conv-2", "conv-3"]
    assert [row["pinned"] for row in rows] == [False, True, False]


def test_get_many_requires_ids(client, seed):
    owner = seed()
    resp = client.get(f"/api/v1/metadata/conversations/{owner.identity_id}", headers=owner.headers)
    assert resp.status_code == 400


def test_upsert_metadata(client, seed):
    owner = seed()
    body = {"deviceIdentityId": owner.identity_id, "conversationId": "conv-1", "muted": True}

    created = client.post("/api/v1/metadata/conversation", json=body, headers=owner.headers)
    assert created.status_code == 201
    assert created.json()["muted"] is True

    updated = client.post(
        "/api/v1/metadata/conversation",
        json={
            "deviceIdentityId": owner.identity_id,
            "conversationId": "conv-1",
            "unread": True,
            "readUntil": "2026-01-02T03:04:05Z",
        },
        headers=owner.headers,
    )
    assert updated.status_code == 201
    data = updated.json()
    assert data["id"] == created.json()["id"]
    assert data["muted"] is True
    assert data["unread"] is True
    assert data["readUntil"].startswith("2026-01-02T03:04:05")


def test_upsert_metadata_for_foreign_identity(client, seed):
    owner = seed()
    stranger = seed()
    resp = client.post(
        "/api/v1/metadata/conversation",
        json={"deviceIdentityId": owner.identity_id, "conversationId": "conv-1"},
        headers=stranger.headers,
    )
    assert resp.status_code == 403


def test_upsert_metadata_invalid_body(client, seed):
    owner = seed()
    resp = client.post(
        "/api/v1/metadata/conversation",
        json={"deviceIdentityId": owner.identity_id, "conversationId": "conv-1", "pinned": "sometimes"},
        headers=owner.headers,
    )
    assert resp.status_code == 400
