from backend.tests.factories import brand_by_slug, make_brand_admin, trim_by_slug


def test_brand_create_and_fetch_by_slug(client, login):
    login("admin_cat", "admin@test.uy", role="admin")
    payload = {"name": "Renault", "slug": "renault", "country": "Francia"}
    res = client.post("/api/admin/brands", json=payload)
    assert res.status_code == 201
    created = res.json()

    fetched = client.get("/api/brands/renault").json()
    assert fetched["id"] == created["id"]
    assert fetched["name"] == "Renault"
    assert fetched["is_active"] is True

    dup = client.post("/api/admin/brands", json=payload)
    assert dup.status_code == 409
    assert dup.json()["error"] == "duplicate"


def test_unknown_brand_slug_is_not_found(client):
    res = client.get("/api/brands/nope")
    assert res.status_code == 404
    assert res.json()["error"] == "not_found"


def test_inactive_brands_hidden_from_public_list(client, seeded, login):
    login("admin_inactive", "admin@test.uy", role="admin")
    ford = brand_by_slug(seeded, "ford")
    client.patch(f"/api/admin/brands/{ford.id}", json={"is_active": False})
    slugs = {b["slug"] for b in client.get("/api/brands").json()}
    assert "ford" not in slugs
    assert len(client.get("/api/brands?active_only=false").json()) == 4


def test_car_filters(client, seeded):
    pickups = client.get("/api/cars", params={"segment": "pickup"}).json()
    assert {c["slug"] for c in pickups} == {"hilux-srv-4x4", "ranger-limited-v6"}

    diesel = client.get("/api/cars", params={"fuel_type": "diesel"}).json()
    assert all(c["fuel_type"] == "diesel" for c in diesel)
    assert len(diesel) == 2

    ranged = client.get("/api/cars", params={"price_min": 30000, "price_max": 40000}).json()
    assert {c["slug"] for c in ranged} == {"corolla-xei-cvt", "corolla-seg-cvt"}

    toyota = brand_by_slug(seeded, "toyota")
    by_brand = client.get("/api/cars", params={"brand_id": toyota.id}).json()
    assert len(by_brand) == 3


def test_car_by_slug(client, seeded):
    car = client.get("/api/cars/slug/golf-gti").json()
    assert car["model"]["name"] == "Golf"
    assert car["brand"]["slug"] == "volkswagen"
    assert client.get("/api/cars/slug/missing").status_code == 404


def test_lead_reaches_admin_and_brand_views_with_car(client, seeded, login):
    xei = trim_by_slug(seeded, "corolla-xei-cvt")
    res = client.post(
        "/api/leads",
        json={
            "car_id": xei.id,
            "name": "Juan Rodriguez",
            "email": "juan@test.uy",
            "phone": "099111222",
            "department": "Montevideo",
            "message": "Quiero coordinar una prueba de manejo",
        },
    )
    assert res.status_code == 201

    login("admin_leads", "admin@test.uy", role="admin")
    leads = client.get("/api/admin/leads").json()
    assert len(leads) == 1
    lead = leads[0]
    assert lead["name"] == "Juan Rodriguez"
    assert lead["status"] == "new"
    assert lead["car"]["brand"]["name"] == "Toyota"
    assert lead["car"]["model"]["name"] == "Corolla"
    assert lead["car"]["price_usd"] == 32900

    user = login("toyota_leads", "toyota@test.uy")
    make_brand_admin(seeded, user, brand_by_slug(seeded, "toyota"))
    assert client.get("/api/marca/leads/new-count").json() == {"count": 1}
    assert client.get("/api/marca/leads").json()[0]["name"] == "Juan Rodriguez"


def test_saved_cars_are_idempotent(client, seeded, login):
    login("saver", "saver@test.uy")
    xei = trim_by_slug(seeded, "corolla-xei-cvt")
    client.post(f"/api/me/saved-cars/{xei.id}")
    client.post(f"/api/me/saved-cars/{xei.id}")
    assert client.get("/api/me/saved-cars/ids").json() == {"ids": [xei.id]}

    saved = client.get("/api/me/saved-cars").json()
    assert len(saved) == 1
    assert saved[0]["brand"]["slug"] == "toyota"

    client.delete(f"/api/me/saved-cars/{xei.id}")
    assert client.get("/api/me/saved-cars/ids").json() == {"ids": []}


def test_saved_car_ids_empty_when_anonymous(client):
    assert client.get("/api/me/saved-cars/ids").json() == {"ids": []}
