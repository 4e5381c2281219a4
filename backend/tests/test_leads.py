from backend.carconnect.schemas.lead import LeadCreate
from backend.carconnect.services.leads_service import LeadsService
from backend.tests.factories import brand_by_slug, make_lead, trim_by_slug


def _lead_payload(car_id: int, **extra) -> dict:
    payload = {
        "car_id": car_id,
        "name": "Juan Rodriguez",
        "email": "juan@test.uy",
        "phone": "099111222",
        "department": "Montevideo",
    }
    payload.update(extra)
    return payload


def test_created_lead_is_always_new(client, seeded):
    xei = trim_by_slug(seeded, "corolla-xei-cvt")
    res = client.post("/api/leads", json=_lead_payload(xei.id, status="converted"))
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "new"
    assert body["user_id"] is None


def test_lead_for_missing_car_is_not_found(client, seeded):
    res = client.post("/api/leads", json=_lead_payload(99999))
    assert res.status_code == 404
    assert res.json()["error"] == "not_found"


def test_lead_validation_errors(client, seeded):
    xei = trim_by_slug(seeded, "corolla-xei-cvt")
    res = client.post("/api/leads", json=_lead_payload(xei.id, email="not-an-email"))
    assert res.status_code == 422


def test_count_new_follows_status_changes(seeded):
    db = seeded
    toyota = brand_by_slug(db, "toyota")
    service = LeadsService(db)
    first = service.create(LeadCreate(**_lead_payload(trim_by_slug(db, "corolla-xei-cvt").id)))
    service.create(LeadCreate(**_lead_payload(trim_by_slug(db, "hilux-srv-4x4").id)))
    service.create(LeadCreate(**_lead_payload(trim_by_slug(db, "golf-gti").id)))
    assert service.count_new_by_brand(toyota.id) == 2

    service.update_status(first.id, "contacted")
    assert service.count_new_by_brand(toyota.id) == 1

    # any status may follow any other
    service.update_status(first.id, "new")
    assert service.count_new_by_brand(toyota.id) == 2


def test_recent_leads_are_limited_and_newest_first(seeded):
    db = seeded
    toyota = brand_by_slug(db, "toyota")
    xei = trim_by_slug(db, "corolla-xei-cvt")
    created = [make_lead(db, xei, name=f"Cliente {i}") for i in range(7)]
    make_lead(db, trim_by_slug(db, "onix-premier"), name="Otro")

    recent = LeadsService(db).list_recent_by_brand(toyota.id)
    assert len(recent) == 5
    assert [lead.id for lead in recent] == [lead.id for lead in reversed(created)][:5]
    assert all(lead.car.brand.slug == "toyota" for lead in recent)

    assert len(LeadsService(db).list_recent_by_brand(toyota.id, limit=2)) == 2
    assert len(LeadsService(db).list_by_brand(toyota.id)) == 7


def test_lead_stats(seeded):
    db = seeded
    xei = trim_by_slug(db, "corolla-xei-cvt")
    make_lead(db, xei)
    make_lead(db, xei, status="lost")
    make_lead(db, trim_by_slug(db, "golf-gti"))

    overall = LeadsService(db).stats()
    assert overall.total == 3
    assert overall.by_status["new"] == 2
    assert overall.by_status["lost"] == 1
    assert overall.by_status["converted"] == 0

    toyota = LeadsService(db).stats(brand_by_slug(db, "toyota").id)
    assert toyota.total == 2


def test_signed_in_lead_shows_in_my_leads(client, seeded, login):
    user = login("juan", "juan@test.uy", full_name="Juan Rodriguez")
    xei = trim_by_slug(seeded, "corolla-xei-cvt")
    res = client.post("/api/leads", json=_lead_payload(xei.id))
    assert res.json()["user_id"] == user.id

    mine = client.get("/api/me/leads").json()
    assert len(mine) == 1
    assert mine[0]["car"]["slug"] == "corolla-xei-cvt"
