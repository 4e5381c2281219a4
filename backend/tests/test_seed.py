import json

from sqlalchemy import func, select

from backend.carconnect.models import Brand, CarModel, Community, Event, Trim
from backend.carconnect.services.seed_service import load_seed, seed_database
from backend.carconnect.services.settings_service import SettingsService
from backend.tests.factories import brand_by_slug, model_by_slug, trim_by_slug


def _count(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_seed_file_parses():
    seed = load_seed()
    assert len(seed.brands) == 4
    assert {m.brand for m in seed.models} <= {b.slug for b in seed.brands}
    assert {t.model for t in seed.trims} <= {m.slug for m in seed.models}


def test_seed_inserts_catalog_and_content(db):
    result = seed_database(db)
    assert result.seeded is True
    assert result.message == "Database seeded successfully!"

    assert _count(db, Brand) == 4
    assert _count(db, CarModel) == 6
    assert _count(db, Trim) == 7
    assert _count(db, Community) == 3
    assert _count(db, Event) == 2

    xei = trim_by_slug(db, "corolla-xei-cvt")
    assert xei.model_id == model_by_slug(db, "corolla").id
    assert model_by_slug(db, "corolla").brand_id == brand_by_slug(db, "toyota").id
    assert float(xei.price_usd) == 32900
    assert xei.is_featured is True

    page = json.loads(SettingsService(db).get("page_terminos"))
    assert page["title"] == "Terminos y Condiciones"


def test_seed_is_idempotent(db):
    seed_database(db)
    again = seed_database(db)
    assert again.seeded is False
    assert again.message == "Database already seeded"
    assert _count(db, Brand) == 4
    assert _count(db, Trim) == 7


def test_admin_seed_endpoint(client, login):
    login("admin_seed", "admin@test.uy", role="admin")
    first = client.post("/api/admin/seed").json()
    second = client.post("/api/admin/seed").json()
    assert first["seeded"] is True
    assert second == {"seeded": False, "message": "Database already seeded"}
    assert len(client.get("/api/brands").json()) == 4


def test_seed_keeps_content_saved_before_it(db):
    settings = SettingsService(db)
    settings.set("hero_title", "Custom")
    settings.set("page_terminos", '{"title": "Propios", "content": "Texto"}')
    db.add(Community(name="Mia", slug="vw-club", description="Ya existia", member_count=0))
    db.commit()

    result = seed_database(db)
    assert result.seeded is True
    assert _count(db, Brand) == 4
    assert _count(db, Community) == 3
    assert _count(db, Event) == 2
    assert settings.get("hero_title") == "Custom"
    assert json.loads(settings.get("page_terminos"))["title"] == "Propios"
    assert json.loads(settings.get("page_privacidad"))["title"] == "Politica de Privacidad"
    kept = db.execute(select(Community).where(Community.slug == "vw-club")).scalar_one()
    assert kept.description == "Ya existia"
