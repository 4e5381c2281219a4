from backend.carconnect.services.assembly import Assembler
from backend.carconnect.services.catalog_service import CatalogService
from backend.carconnect.services.leads_service import LeadsService
from backend.tests.factories import brand_by_slug, make_lead, model_by_slug, trim_by_slug


def test_car_assembles_trim_model_and_brand(seeded):
    car = Assembler(seeded).car(trim_by_slug(seeded, "corolla-xei-cvt").id)
    assert car.name == "XEi CVT"
    assert car.model.name == "Corolla"
    assert car.brand.name == "Toyota"
    assert car.price_usd == 32900


def test_missing_trim_resolves_to_none(seeded):
    assembler = Assembler(seeded)
    assert assembler.car(None) is None
    assert assembler.car(99999) is None


def test_deleted_model_degrades_to_null(client, seeded):
    db = seeded
    xei = trim_by_slug(db, "corolla-xei-cvt")
    lead = make_lead(db, xei)
    toyota = brand_by_slug(db, "toyota")

    CatalogService(db).delete_model(model_by_slug(db, "corolla").id)

    assert Assembler(db).car(xei.id) is None
    views = LeadsService(db).list_all()
    assert [v.id for v in views] == [lead.id]
    assert views[0].car is None
    # orphaned leads fall out of the brand's lists
    assert LeadsService(db).count_new_by_brand(toyota.id) == 0

    slugs = [car.slug for car in CatalogService(db).list_cars_with_details()]
    assert "corolla-xei-cvt" not in slugs
    assert len(slugs) == 5
    assert client.get(f"/api/cars/{xei.id}").status_code == 404


def test_deleted_brand_leaves_car_without_brand(client, seeded):
    db = seeded
    gti = trim_by_slug(db, "golf-gti")
    make_lead(db, gti)

    CatalogService(db).delete_brand(brand_by_slug(db, "volkswagen").id)

    car = Assembler(db).car(gti.id)
    assert car is not None
    assert car.model.slug == "golf"
    assert car.brand is None
    assert Assembler(db).car(gti.id, require_brand=True) is None
    assert LeadsService(db).list_all()[0].car.brand is None
    assert client.get("/api/cars/slug/golf-gti").status_code == 404
