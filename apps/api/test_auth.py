"""Session context, token revocation and profiles"""
from datetime import timedelta

import pytest

from auth import context_from_payload, create_access_token, decode_token
from conftest import make_headers
from services.token_blacklist import TokenBlacklist, token_blacklist


@pytest.fixture(autouse=True)
def clean_blacklist():
    yield
    token_blacklist.clear()


def test_context_from_token():
    token = create_access_token({"sub": "user-9", "email": "a@example.com",
                                 "user_metadata": {"full_name": "Ana"}})
    ctx = context_from_payload(decode_token(token), token)
    assert ctx.user_id == "user-9"
    assert ctx.full_name == "Ana"
    assert ctx.jti
    assert ctx.expires_at is not None


def test_token_without_subject_has_no_context():
    token = create_access_token({"email": "a@example.com"})
    assert context_from_payload(decode_token(token), token) is None


def test_expired_token_rejected():
    token = create_access_token({"sub": "user-9"}, expires_delta=timedelta(seconds=-10))
    assert decode_token(token) is None


def test_in_memory_blacklist():
    blacklist = TokenBlacklist()
    blacklist.add("token-a", "jti-a", 60)
    assert blacklist.is_blacklisted("token-a", "jti-a")
    assert not blacklist.is_blacklisted("token-b", "jti-b")
    blacklist.clear()
    assert not blacklist.is_blacklisted("token-a", "jti-a")


def test_session_endpoint(client, auth_headers):
    body = client.get("/api/auth/session", headers=auth_headers).json()
    assert body["user_id"] == "user-1"
    assert body["email"] == "patient@example.com"


def test_requests_without_token_rejected(client):
    assert client.get("/api/cart").status_code in (401, 403)


def test_garbage_token_rejected(client):
    response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_signout_revokes_token(client):
    headers = make_headers("user-5")
    assert client.post("/api/auth/signout", headers=headers).status_code == 200
    assert client.get("/api/auth/session", headers=headers).status_code == 401


def test_profile_upsert(client, auth_headers):
    assert client.get("/api/profiles/me", headers=auth_headers).status_code == 404

    created = client.put("/api/profiles/me", json={"phone": "555-0100"}, headers=auth_headers).json()
    assert created["id"] == "user-1"
    assert created["full_name"] == "Pat Doe"
    assert created["email"] == "patient@example.com"

    updated = client.put("/api/profiles/me", json={"full_name": "Pat Q. Doe"}, headers=auth_headers).json()
    assert updated["full_name"] == "Pat Q. Doe"
    assert updated["phone"] == "555-0100"


def test_catalog_endpoints(client, auth_headers, medicine, cheap_medicine, doctor):
    medicines = client.get("/api/medicines", params={"search": "cetirizine"}).json()
    assert [m["name"] for m in medicines] == ["Cetirizine 10mg"]

    doctors = client.get("/api/doctors", params={"specialty": "General Medicine"}).json()
    assert [d["id"] for d in doctors] == [doctor.id]
    assert client.get("/api/doctors/missing").status_code == 404
