"""Tests for profile endpoints and validation rules."""

import pytest

from src.profiles.validation import ProfileValidationError, validate_profile_data

PROFILE = {"name": "Alice A.", "username": "alice", "description": "hi", "avatar": "https://example.com/a.png"}


def test_validate_profile_data_cleans_empty_strings():
    cleaned = validate_profile_data({"name": "Alice", "username": "alice", "description": "", "avatar": ""})
    assert cleaned["description"] is None
    assert cleaned["avatar"] is None


def test_validate_profile_data_reports_every_field():
    with pytest.raises(ProfileValidationError) as exc_info:
        validate_profile_data({"name": "Al", "username": "bad name!", "avatar": "not a url"})
    errors = exc_info.value.to_response()["errors"]
    assert errors["name"]["message"] == "Name must be at least 3 characters long"
    assert errors["username"]["message"] == "Username can only contain letters, numbers and dashes"
    assert errors["avatar"]["message"] == "Avatar must be a valid URL"
    assert exc_info.value.status_code == 400


def test_validate_profile_data_requires_name_and_username():
    with pytest.raises(ProfileValidationError) as exc_info:
        validate_profile_data({})
    errors = exc_info.value.to_response()["errors"]
    assert errors["name"]["type"] == "REQUIRED_FIELD"
    assert errors["username"]["type"] == "REQUIRED_FIELD"


def test_validate_profile_data_partial():
    assert validate_profile_data({"description": "x" * 500}, partial=True) == {"description": "x" * 500}
    with pytest.raises(ProfileValidationError) as exc_info:
        validate_profile_data({"description": "x" * 501}, partial=True)
    assert exc_info.value.to_response()["errors"]["description"]["message"] == "Description cannot exceed 500 characters"


def test_create_profile(client, seed):
    owner = seed()
    resp = client.post(f"/api/v1/profiles/{owner.xmtp_id}", json=PROFILE, headers=owner.headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["username"] == "alice"
    assert data["xmtpId"] == owner.xmtp_id
    assert data["deviceIdentityId"] == owner.identity_id


def test_create_profile_twice(client, seed):
    owner = seed(profile={"name": "Alice", "username": "alice"})
    resp = client.post(f"/api/v1/profiles/{owner.xmtp_id}", json={**PROFILE, "username": "alice2"}, headers=owner.headers)
    assert resp.status_code == 409


def test_create_profile_taken_username_is_case_insensitive(client, seed):
    seed(profile={"name": "Alice", "username": "Alice"})
    owner = seed()
    resp = client.post(f"/api/v1/profiles/{owner.xmtp_id}", json=PROFILE, headers=owner.headers)
    assert resp.status_code == 409
    assert resp.json() == {
        "success": False,
        "errors": {"username": {"type": "USERNAME_TAKEN", "message": "This username is already taken"}},
    }


def test_create_profile_invalid(client, seed):
    owner = seed()
    resp = client.post(f"/api/v1/profiles/{owner.xmtp_id}", json={"name": "A", "username": "alice"}, headers=owner.headers)
    assert resp.status_code == 400
    assert resp.json()["errors"]["name"]["type"] == "INVALID_FORMAT"


def test_create_profile_for_foreign_identity(client, seed):
    owner = seed()
    stranger = seed()
    resp = client.post(f"/api/v1/profiles/{owner.xmtp_id}", json=PROFILE, headers=stranger.headers)
    assert resp.status_code == 403


def test_create_profile_for_unknown_identity(client, seed):
    owner = seed()
    resp = client.post("/api/v1/profiles/unknown-inbox", json=PROFILE, headers=owner.headers)
    assert resp.status_code == 404


def test_get_profile(client, seed):
    owner = seed(profile={"name": "Alice", "username": "alice"})
    reader = seed()
    resp = client.get(f"/api/v1/profiles/{owner.xmtp_id}", headers=reader.headers)
    assert resp.status_code == 200
    assert resp.json()["turnkeyAddress"] == owner.turnkey_address


def test_get_missing_profile(client, seed):
    owner = seed()
    resp = client.get(f"/api/v1/profiles/{owner.xmtp_id}", headers=owner.headers)
    assert resp.status_code == 404


def test_update_profile(client, seed):
    owner = seed(profile={"name": "Alice", "username": "alice", "avatar": "https://example.com/a.png"})
    resp = client.put(
        f"/api/v1/profiles/{owner.xmtp_id}",
        json={"username": "ALICE", "avatar": ""},
        headers=owner.headers,
    )
    # Renaming to a different casing of one's own username is allowed
    assert resp.status_code == 200
    assert resp.json()["username"] == "ALICE"
    assert resp.json()["avatar"] is None
    assert resp.json()["name"] == "Alice"


def test_update_profile_taken_username(client, seed):
    seed(profile={"name": "Bob", "username": "bob"})
    owner = seed(profile={"name": "Alice", "username": "alice"})
    resp = client.put(f"/api/v1/profiles/{owner.xmtp_id}", json={"username": "bob"}, headers=owner.headers)
    assert resp.status_code == 409


def test_update_missing_profile(client, seed):
    owner = seed()
    resp = client.put(f"/api/v1/profiles/{owner.xmtp_id}", json={"name": "Alice"}, headers=owner.headers)
    assert resp.status_code == 404


def test_check_username(client, seed):
    owner = seed(profile={"name": "Alice", "username": "alice"})
    assert client.get("/api/v1/profiles/check/ALICE", headers=owner.headers).json() == {"taken": True}
    assert client.get("/api/v1/profiles/check/bob", headers=owner.headers).json() == {"taken": False}


def test_validate_endpoint(client, seed):
    owner = seed(profile={"name": "Alice", "username": "alice"})
    resp = client.post("/api/v1/profiles/validate", json={"name": "Bob", "username": "bob"}, headers=owner.headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Profile information is valid", "errors": {}}

    resp = client.post("/api/v1/profiles/validate", json={"username": "alice"}, headers=owner.headers)
    assert resp.status_code == 409

    resp = client.post("/api/v1/profiles/validate", json={"name": "x" * 51}, headers=owner.headers)
    assert resp.status_code == 400
    assert resp.json()["errors"]["name"]["message"] == "Name cannot exceed 50 characters"


def test_search_profiles(client, seed):
    alice = seed(profile={"name": "Alice Smith", "username": "alice"})
    seed(profile={"name": "Bob", "username": "bobby"})

    resp = client.get("/api/v1/profiles/search", params={"query": "SMI"}, headers=alice.headers)
    assert resp.status_code == 200
    results = resp.json()
    assert [result["username"] for result in results] == ["alice"]
    assert results[0]["xmtpId"] == alice.xmtp_id


def test_search_by_address(client, seed):
    alice = seed(profile={"name": "Alice", "username": "alice"})
    resp = client.get("/api/v1/profiles/search", params={"query": alice.turnkey_address.upper().replace("0X", "0x")}, headers=alice.headers)
    assert [result["username"] for result in resp.json()] == ["alice"]


def test_search_requires_query(client, seed):
    owner = seed()
    resp = client.get("/api/v1/profiles/search", params={"query": "  "}, headers=owner.headers)
    assert resp.status_code == 400


def test_batch_profiles(client, seed):
    alice = seed(profile={"name": "Alice", "username": "alice"})
    bob = seed(profile={"name": "Bob", "username": "bob"})
    resp = client.post(
        "/api/v1/profiles/batch",
        json={"xmtpIds": [alice.xmtp_id, bob.xmtp_id, "unknown"]},
        headers=alice.headers,
    )
    assert resp.status_code == 200
    profiles = resp.json()["profiles"]
    assert set(profiles) == {alice.xmtp_id, bob.xmtp_id}
    assert profiles[bob.xmtp_id]["username"] == "bob"


def test_batch_profiles_limits(client, seed):
    owner = seed()
    assert client.post("/api/v1/profiles/batch", json={"xmtpIds": []}, headers=owner.headers).status_code == 400
    too_many = [f"inbox-{i}" for i in range(1001)]
    assert client.post("/api/v1/profiles/batch", json={"xmtpIds": too_many}, headers=owner.headers).status_code == 400


def test_profiles_require_auth(client):
    assert client.get("/api/v1/profiles/check/alice").status_code == 401


def test_public_profile_lookups(client, seed):
    alice = seed(profile={"name": "Alice", "username": "alice", "description": "hello"})
    expected = {
        "name": "Alice",
        "username": "alice",
        "description": "hello",
        "avatar": None,
        "xmtpId": alice.xmtp_id,
        "turnkeyAddress": alice.turnkey_address,
    }
    assert client.get("/api/v1/public/profiles/alice").json() == expected
    assert client.get("/api/v1/public/profiles/username/ALICE").json() == expected
    assert client.get(f"/api/v1/public/profiles/xmtpId/{alice.xmtp_id}").json() == expected


def test_public_profile_not_found(client):
    assert client.get("/api/v1/public/profiles/nobody").status_code == 404
    assert client.get("/api/v1/public/profiles/xmtpId/nobody").status_code == 404


def test_search_treats_wildcards_literally(client, seed):
    alice = seed(profile={"name": "Alice", "username": "alice"})
    seed(profile={"name": "Bob J", "username": "bob-j"})
    seed(profile={"name": "top_10", "username": "top-ten"})

    for query, expected in (("_", ["top-ten"]), ("%", []), ("a%e", [])):
        resp = client.get("/api/v1/profiles/search", params={"query": query}, headers=alice.headers)
        assert resp.status_code == 200
        assert [result["username"] for result in resp.json()] == expected
