import pytest
from sqlalchemy import func, select

from backend.carconnect.errors import CarConnectError, ErrorKind
from backend.carconnect.models import Community, CommunityMember, CommunityPost
from backend.carconnect.schemas.content import CommunityIn, CommunityPostIn
from backend.carconnect.services.communities_service import CommunitiesService
from backend.tests.factories import make_user


def _community(db, slug: str = "toyota-owners") -> Community:
    return db.execute(select(Community).where(Community.slug == slug)).scalar_one()


def test_join_is_idempotent(seeded):
    db = seeded
    community = _community(db)
    user = make_user(db, "member_1", "m1@test.uy")
    service = CommunitiesService(db)

    service.join(community.id, user)
    joined = service.join(community.id, user)
    assert joined.member_count == 1
    assert service.is_member(community.id, user)
    assert [c.slug for c in service.my_memberships(user)] == ["toyota-owners"]


def test_leave_never_goes_negative(seeded):
    db = seeded
    community = _community(db)
    user = make_user(db, "member_2", "m2@test.uy")
    service = CommunitiesService(db)

    service.join(community.id, user)
    assert service.leave(community.id, user).member_count == 0
    assert service.leave(community.id, user).member_count == 0

    community.member_count = 0
    db.add(CommunityMember(community_id=community.id, user_id=user.id))
    db.commit()
    assert service.leave(community.id, user).member_count == 0


def test_delete_community_removes_posts_and_members(seeded):
    db = seeded
    community = _community(db, "4x4-uruguay")
    user = make_user(db, "member_3", "m3@test.uy")
    service = CommunitiesService(db)
    service.join(community.id, user)
    service.create_post(community.id, CommunityPostIn(title="Ruta", content="Salida al Chuy"), user)

    service.delete(community.id)
    assert db.get(Community, community.id) is None
    posts = db.execute(select(func.count()).select_from(CommunityPost).where(CommunityPost.community_id == community.id))
    members = db.execute(
        select(func.count()).select_from(CommunityMember).where(CommunityMember.community_id == community.id)
    )
    assert posts.scalar_one() == 0
    assert members.scalar_one() == 0


def test_posts_and_votes_over_api(client, seeded, login):
    community = _community(seeded, "vw-club")
    login("poster", "poster@test.uy", full_name="Posteador")
    res = client.post(f"/api/communities/{community.id}/posts", json={"title": "Hola", "content": "Primer post"})
    assert res.status_code == 201
    post_id = res.json()["id"]
    assert res.json()["upvotes"] == 0

    client.post(f"/api/communities/posts/{post_id}/vote", json={"type": "up"})
    voted = client.post(f"/api/communities/posts/{post_id}/vote", json={"type": "down"}).json()
    assert (voted["upvotes"], voted["downvotes"]) == (1, 1)

    page = client.get("/api/communities/vw-club").json()
    assert page["is_member"] is False
    assert page["posts"][0]["author"]["full_name"] == "Posteador"
    assert page["posts"][0]["community"]["slug"] == "vw-club"


def test_only_author_edits_post(client, seeded, login):
    community = _community(seeded)
    login("author", "author@test.uy")
    post_id = client.post(
        f"/api/communities/{community.id}/posts", json={"title": "Mio", "content": "Contenido"}
    ).json()["id"]

    login("intruder", "intruder@test.uy")
    assert client.patch(f"/api/communities/posts/{post_id}", json={"title": "Ajeno"}).status_code == 403
    assert client.delete(f"/api/communities/posts/{post_id}").status_code == 403

    login("author", "author@test.uy")
    assert client.patch(f"/api/communities/posts/{post_id}", json={"title": "Editado"}).json()["title"] == "Editado"


def test_create_community_checks_brand_and_model(seeded):
    service = CommunitiesService(seeded)
    with pytest.raises(CarConnectError) as exc:
        service.create(CommunityIn(name="Fantasma", slug="fantasma", description="x", brand_id=9999))
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert exc.value.message == "Marca no encontrado"

    with pytest.raises(CarConnectError) as exc:
        service.create(CommunityIn(name="Fantasma", slug="fantasma", description="x", model_id=9999))
    assert exc.value.message == "Modelo no encontrado"


def test_admin_community_with_unknown_brand_is_not_found(client, seeded, login):
    login("admin_com", "admin@test.uy", role="admin")
    res = client.post(
        "/api/admin/communities",
        json={"name": "Fantasma", "slug": "fantasma", "description": "x", "brand_id": 9999},
    )
    assert res.status_code == 404
    assert res.json()["error"] == "not_found"
