import pytest

from backend.carconnect.models import Event, Trim
from backend.tests.factories import brand_by_slug, make_brand_admin, make_lead, model_by_slug, trim_by_slug


@pytest.fixture()
def toyota_admin(client, login, seeded):
    user = login("toyota_admin", "toyota@test.uy")
    make_brand_admin(seeded, user, brand_by_slug(seeded, "toyota"))
    return user


def test_foreign_model_edit_is_rejected_without_mutation(client, seeded, toyota_admin):
    golf = model_by_slug(seeded, "golf")
    res = client.patch(f"/api/marca/models/{golf.id}", json={"name": "Hacked"})
    assert res.status_code == 403
    assert res.json() == {"error": "forbidden", "detail": "Sin permisos para esta marca"}
    seeded.refresh(golf)
    assert golf.name == "Golf"


def test_foreign_trim_update_and_delete_are_rejected(client, seeded, toyota_admin):
    gti = trim_by_slug(seeded, "golf-gti")
    assert client.patch(f"/api/marca/trims/{gti.id}", json={"price_usd": 1}).status_code == 403
    assert client.delete(f"/api/marca/trims/{gti.id}").status_code == 403
    seeded.expire_all()
    trim = seeded.get(Trim, gti.id)
    assert trim is not None
    assert float(trim.price_usd) == 45900


def test_trim_cannot_be_created_under_foreign_model(client, seeded, toyota_admin):
    tiguan = model_by_slug(seeded, "tiguan")
    payload = {
        "model_id": tiguan.id,
        "name": "Sneaky",
        "slug": "tiguan-sneaky",
        "year": 2024,
        "price_usd": 10000,
        "engine": "1.4L",
        "transmission": "Manual",
        "fuel_type": "gasolina",
        "horsepower": 150,
        "doors": 5,
        "seats": 5,
    }
    assert client.post("/api/marca/trims", json=payload).status_code == 403
    assert seeded.query(Trim).filter(Trim.slug == "tiguan-sneaky").count() == 0


def test_own_model_edit_succeeds(client, seeded, toyota_admin):
    corolla = model_by_slug(seeded, "corolla")
    res = client.patch(f"/api/marca/models/{corolla.id}", json={"year_end": 2030})
    assert res.status_code == 200
    assert res.json()["year_end"] == 2030


def test_foreign_brand_id_parameter_is_rejected(client, seeded, toyota_admin):
    vw = brand_by_slug(seeded, "volkswagen")
    assert client.get(f"/api/marca/leads?brand_id={vw.id}").status_code == 403


def test_foreign_lead_status_and_event_are_protected(client, seeded, toyota_admin):
    lead = make_lead(seeded, trim_by_slug(seeded, "golf-gti"))
    res = client.patch(f"/api/marca/leads/{lead.id}/status", json={"status": "contacted"})
    assert res.status_code == 403
    seeded.refresh(lead)
    assert lead.status == "new"

    vw_event = seeded.query(Event).filter(Event.slug == "lanzamiento-golf-gti-2024").one()
    assert client.delete(f"/api/marca/events/{vw_event.id}").status_code == 403
    seeded.expire_all()
    assert seeded.get(Event, vw_event.id) is not None


def test_own_lead_status_update(client, seeded, toyota_admin):
    lead = make_lead(seeded, trim_by_slug(seeded, "hilux-srv-4x4"))
    res = client.patch(f"/api/marca/leads/{lead.id}/status", json={"status": "qualified"})
    assert res.status_code == 200
    assert res.json()["status"] == "qualified"


def test_multi_brand_admin_selects_brand(client, seeded, toyota_admin):
    ford = brand_by_slug(seeded, "ford")
    make_brand_admin(seeded, toyota_admin, ford)
    default = client.get("/api/marca/models").json()
    assert {m["slug"] for m in default} == {"corolla", "hilux"}
    chosen = client.get(f"/api/marca/models?brand_id={ford.id}").json()
    assert [m["slug"] for m in chosen] == ["ranger"]


def test_event_created_from_console_belongs_to_active_brand(client, seeded, toyota_admin):
    payload = {
        "title": "Hilux Day",
        "slug": "hilux-day",
        "description": "Prueba de manejo",
        "cover_image": "https://img.test/hilux.jpg",
        "location": "Montevideo",
        "event_date": "2030-05-01",
        "event_time": "10:00",
    }
    res = client.post("/api/marca/events", json=payload)
    assert res.status_code == 201
    assert res.json()["brand_id"] == brand_by_slug(seeded, "toyota").id
