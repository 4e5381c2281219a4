from backend.tests.factories import brand_by_slug, make_brand_admin


def test_console_pages_redirect_home_without_session(client):
    for path in ("/admin", "/marca", "/perfil"):
        res = client.get(path, follow_redirects=False)
        assert res.status_code == 302
        assert res.headers["location"] == "/"


def test_redirect_leaves_flash_notice_for_home(client):
    res = client.get("/admin")
    assert res.status_code == 200
    assert res.json()["flash"] == "Inicia sesion para continuar"
    # shown once
    assert client.get("/").json()["flash"] is None


def test_plain_user_is_redirected_from_consoles(client, login):
    login("user_1", "ana@test.uy")
    assert client.get("/perfil").status_code == 200
    for path in ("/admin", "/marca"):
        res = client.get(path, follow_redirects=False)
        assert res.status_code == 302
        assert res.headers["location"] == "/"


def test_admin_and_brand_admin_reach_their_consoles(client, login, seeded):
    login("admin_1", "admin@test.uy", role="admin")
    res = client.get("/admin")
    assert res.status_code == 200
    assert res.json()["stats"]["brands"] == 4
    # admin is not implicitly a brand admin
    assert client.get("/marca", follow_redirects=False).status_code == 302

    user = login("brand_1", "marca@test.uy")
    make_brand_admin(seeded, user, brand_by_slug(seeded, "toyota"))
    res = client.get("/marca")
    assert res.status_code == 200
    assert res.json()["brand"]["slug"] == "toyota"


def test_json_admin_routes_answer_typed_errors(client, login):
    res = client.get("/api/admin/stats")
    assert res.status_code == 401
    assert res.json()["error"] == "unauthenticated"

    login("user_2", "beto@test.uy")
    res = client.get("/api/admin/stats")
    assert res.status_code == 403
    assert res.json()["error"] == "forbidden"


def test_brand_routes_reject_plain_user_and_admin(client, login, seeded):
    login("user_3", "carla@test.uy")
    assert client.get("/api/marca/leads").status_code == 403

    login("admin_2", "jefe@test.uy", role="admin")
    assert client.get("/api/marca/leads").status_code == 403


def test_brand_admin_role_without_rows_has_no_brand_scope(client, login):
    login("orphan", "orphan@test.uy", role="brand_admin")
    res = client.get("/auth/me").json()
    assert res["capabilities"]["is_brand_admin"] is False
    assert client.get("/api/marca/leads").status_code == 403
