import pytest

from backend.carconnect.models import VehicleActivation
from backend.tests.factories import brand_by_slug, make_brand_admin, model_by_slug

VIN = "JTDBR32E720123456"


@pytest.fixture()
def owner(client, login, seeded):
    return login("owner", "dueno@test.uy", full_name="Dueno Corolla")


def _claim(client, db, vin: str = VIN, model: str = "corolla"):
    return client.post(
        "/api/me/activations",
        json={
            "brand_id": brand_by_slug(db, "toyota").id,
            "model_id": model_by_slug(db, model).id,
            "year": 2023,
            "vin": vin,
        },
    )


def test_claim_starts_pending_and_normalizes_vin(client, seeded, owner):
    res = _claim(client, seeded, vin=VIN.lower())
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "pending"
    assert body["vin"] == VIN
    assert body["user_id"] == owner.id

    mine = client.get("/api/me/activations").json()
    assert mine[0]["model"]["slug"] == "corolla"


def test_duplicate_vin_is_rejected(client, seeded, owner):
    assert _claim(client, seeded).status_code == 201
    res = _claim(client, seeded, vin=VIN.lower())
    assert res.status_code == 409
    assert res.json() == {"error": "duplicate", "detail": "Este VIN ya fue registrado"}


def test_model_must_belong_to_brand(client, seeded, owner):
    res = _claim(client, seeded, model="golf")
    assert res.status_code == 422
    assert res.json()["error"] == "invalid"


def test_brand_admin_verification_promotes_owner(client, seeded, login, owner):
    activation_id = _claim(client, seeded).json()["id"]

    reviewer = login("toyota_rev", "rev@test.uy")
    make_brand_admin(seeded, reviewer, brand_by_slug(seeded, "toyota"))
    pending = client.get("/api/marca/activations", params={"status": "pending"}).json()
    assert [a["id"] for a in pending] == [activation_id]

    res = client.post(f"/api/marca/activations/{activation_id}/verify")
    assert res.status_code == 200
    assert res.json()["status"] == "verified"
    assert res.json()["verified_by"] == reviewer.id
    assert res.json()["verified_at"] is not None

    seeded.refresh(owner)
    assert owner.role == "verified_user"


def test_reject_records_reviewer_and_keeps_role(client, seeded, login, owner):
    activation_id = _claim(client, seeded).json()["id"]

    admin = login("admin_rev", "admin@test.uy", role="admin")
    res = client.post(f"/api/admin/activations/{activation_id}/reject")
    assert res.status_code == 200
    activation = seeded.get(VehicleActivation, activation_id)
    seeded.refresh(activation)
    assert activation.status == "rejected"
    assert activation.verified_by == admin.id
    assert activation.verified_at is not None

    seeded.refresh(owner)
    assert owner.role == "user"


def test_foreign_brand_admin_cannot_verify(client, seeded, login, owner):
    activation_id = _claim(client, seeded).json()["id"]

    reviewer = login("vw_rev", "vw@test.uy")
    make_brand_admin(seeded, reviewer, brand_by_slug(seeded, "volkswagen"))
    assert client.post(f"/api/marca/activations/{activation_id}/verify").status_code == 403
    assert client.get("/api/marca/activations").json() == []

    activation = seeded.get(VehicleActivation, activation_id)
    seeded.refresh(activation)
    assert activation.status == "pending"


def test_benefits_listing(client, seeded, login):
    login("admin_ben", "admin@test.uy", role="admin")
    toyota = brand_by_slug(seeded, "toyota")
    payload = {
        "brand_id": toyota.id,
        "title": "Service gratis",
        "description": "Primer service sin costo",
        "valid_from": "2024-01-01",
        "valid_until": "2030-12-31",
    }
    assert client.post("/api/admin/benefits", json=payload).status_code == 201
    client.post("/api/admin/benefits", json={**payload, "title": "Inactivo", "is_active": False})

    public = client.get("/api/benefits").json()
    assert [b["title"] for b in public] == ["Service gratis"]
    assert public[0]["brand"]["slug"] == "toyota"
    assert len(client.get("/api/admin/benefits").json()) == 2
