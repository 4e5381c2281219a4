import pytest
import requests
from tenacity import wait_none

from backend.carconnect.clients.identity_provider import (
    IdentityProviderClient,
    IdentityProviderError,
    ProviderIdentity,
    identity_from_payload,
)
from backend.carconnect.services.identity_service import IdentityService


class FakeResponse:
    def __init__(self, status_code: int, payload: dict | None = None) -> None:
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status={self.status_code}")


def test_identity_from_clerk_payload():
    identity = identity_from_payload(
        {
            "id": "user_2abc",
            "first_name": "Juan",
            "last_name": "Rodriguez",
            "image_url": "https://img.test/juan.png",
            "primary_email_address_id": "idn_2",
            "email_addresses": [
                {"id": "idn_1", "email_address": "old@test.uy"},
                {"id": "idn_2", "email_address": "Juan@Test.uy"},
            ],
        }
    )
    assert identity == ProviderIdentity(
        provider_id="user_2abc",
        email="juan@test.uy",
        full_name="Juan Rodriguez",
        avatar_url="https://img.test/juan.png",
    )


def test_identity_name_falls_back_to_email_local_part():
    identity = identity_from_payload({"id": "user_x", "email": "ana@test.uy"})
    assert identity.full_name == "ana"


def test_client_resolves_session_then_user(monkeypatch):
    client = IdentityProviderClient("https://idp.test/v1/", "sk_test")
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        if url.endswith("/sessions/sess_1"):
            return FakeResponse(200, {"status": "active", "user_id": "user_1"})
        return FakeResponse(200, {"id": "user_1", "email": "ana@test.uy", "full_name": "Ana"})

    monkeypatch.setattr(client.session, "get", fake_get)
    identity = client.fetch_identity("sess_1")
    assert identity.provider_id == "user_1"
    assert calls == ["https://idp.test/v1/sessions/sess_1", "https://idp.test/v1/users/user_1"]
    assert client.session.headers["Authorization"] == "Bearer sk_test"


def test_client_rejects_unknown_session(monkeypatch):
    client = IdentityProviderClient("https://idp.test", None)
    monkeypatch.setattr(client.session, "get", lambda url, timeout: FakeResponse(404))
    with pytest.raises(IdentityProviderError):
        client.fetch_identity("sess_gone")


def test_client_session_without_user_is_anonymous(monkeypatch):
    client = IdentityProviderClient("https://idp.test", None)
    monkeypatch.setattr(client.session, "get", lambda url, timeout: FakeResponse(200, {"status": "active"}))
    assert client.fetch_identity("sess_anon").provider_id is None


def test_client_retries_connection_errors(monkeypatch):
    monkeypatch.setattr(IdentityProviderClient._get.retry, "wait", wait_none())
    client = IdentityProviderClient("https://idp.test", None)
    attempts = []

    def flaky_get(url, timeout):
        attempts.append(url)
        if len(attempts) < 3:
            raise requests.ConnectionError("reset")
        return FakeResponse(200, {"status": "active"})

    monkeypatch.setattr(client.session, "get", flaky_get)
    client.fetch_identity("sess_flaky")
    assert len(attempts) == 3


def test_upsert_creates_then_updates(db):
    service = IdentityService(db)
    created = service.upsert_from_identity(ProviderIdentity("user_9", "nueva@test.uy", "Nueva"))
    assert created.role == "user"
    assert created.last_login_at is not None

    updated = service.upsert_from_identity(ProviderIdentity("user_9", "cambio@test.uy", "Cambio"))
    assert updated.id == created.id
    assert updated.email == "cambio@test.uy"
    assert updated.full_name == "Cambio"


def test_upsert_without_provider_id_stays_anonymous(db):
    assert IdentityService(db).upsert_from_identity(ProviderIdentity(None, "", "")) is None


def test_unknown_session_token_is_unauthenticated(client):
    res = client.post("/auth/session", json={"session_token": "sess_bogus"})
    assert res.status_code == 401
    assert res.json() == {"error": "unauthenticated", "detail": "Sesion invalida"}


def test_me_reports_capabilities(client, login):
    anon = client.get("/auth/me").json()
    assert anon["user"] is None
    assert anon["capabilities"]["is_authenticated"] is False

    login("user_me", "me@test.uy", full_name="Yo Mismo", role="admin")
    me = client.get("/auth/me").json()
    assert me["user"]["email"] == "me@test.uy"
    assert me["capabilities"] == {
        "is_authenticated": True,
        "is_admin": True,
        "is_brand_admin": False,
        "brand_ids": [],
    }

    client.post("/auth/logout")
    assert client.get("/auth/me").json()["user"] is None


def test_profile_update(client, login):
    login("user_profile", "perfil@test.uy")
    res = client.patch("/api/me", json={"full_name": "Nombre Nuevo", "phone": "099000111"})
    assert res.status_code == 200
    assert res.json()["full_name"] == "Nombre Nuevo"
    assert client.get("/api/me").json()["phone"] == "099000111"


def test_make_admin_by_email(client, db, login):
    target = login("target", "target@test.uy")
    login("boss", "boss@test.uy", role="admin")
    res = client.post("/api/admin/make-admin", json={"email": "TARGET@test.uy"})
    assert res.status_code == 200
    db.refresh(target)
    assert target.role == "admin"

    missing = client.post("/api/admin/make-admin", json={"email": "nadie@test.uy"})
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Usuario con email nadie@test.uy no encontrado"
