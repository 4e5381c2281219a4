import pytest
from sqlalchemy import func, select

from backend.carconnect.models import Comment, ReviewPost
from backend.tests.factories import trim_by_slug


@pytest.fixture()
def review_id(client, seeded, login):
    login("editor", "editor@test.uy", full_name="Editora", role="admin")
    res = client.post(
        "/api/admin/reviews",
        json={
            "car_id": trim_by_slug(seeded, "golf-gti").id,
            "title": "Golf GTI a fondo",
            "slug": "golf-gti-a-fondo",
            "excerpt": "Probamos el hot hatch",
            "content": "Texto completo",
            "cover_image": "https://img.test/gti.jpg",
            "pros": ["Motor"],
            "cons": ["Precio"],
            "rating": 8.5,
        },
    )
    assert res.status_code == 201
    return res.json()["id"]


def test_new_review_is_unpublished(client, review_id):
    assert client.get("/api/reviews").json() == []
    assert client.get("/api/reviews/golf-gti-a-fondo").status_code == 404


def test_published_review_shows_with_car_and_counts_views(client, seeded, review_id):
    client.post(f"/api/admin/reviews/{review_id}/publish")
    assert [r["slug"] for r in client.get("/api/reviews").json()] == ["golf-gti-a-fondo"]

    detail = client.get("/api/reviews/golf-gti-a-fondo").json()
    assert detail["author"]["full_name"] == "Editora"
    assert detail["car"]["brand"]["slug"] == "volkswagen"
    again = client.get("/api/reviews/golf-gti-a-fondo").json()
    assert (detail["views"], again["views"]) == (1, 2)

    review = seeded.get(ReviewPost, review_id)
    seeded.refresh(review)
    assert review.views == 2

    client.post(f"/api/admin/reviews/{review_id}/unpublish")
    assert client.get("/api/reviews").json() == []


def test_comments_need_approval(client, seeded, login, review_id):
    client.post(f"/api/admin/reviews/{review_id}/publish")
    login("lector", "lector@test.uy", full_name="Lector")
    res = client.post(f"/api/reviews/{review_id}/comments", json={"content": "Gran nota"})
    assert res.status_code == 201
    assert res.json()["is_approved"] is False
    comment_id = res.json()["id"]
    assert client.get(f"/api/reviews/{review_id}/comments").json() == []

    login("editor", "editor@test.uy")
    pending = client.get("/api/admin/comments").json()
    assert [c["id"] for c in pending] == [comment_id]
    client.post(f"/api/admin/comments/{comment_id}/approve")

    shown = client.get(f"/api/reviews/{review_id}/comments").json()
    assert shown[0]["content"] == "Gran nota"
    assert shown[0]["author"]["full_name"] == "Lector"


def test_rejected_comment_is_removed(client, seeded, login, review_id):
    login("lector2", "lector2@test.uy")
    comment_id = client.post(f"/api/reviews/{review_id}/comments", json={"content": "Spam"}).json()["id"]
    login("editor", "editor@test.uy")
    client.post(f"/api/admin/comments/{comment_id}/reject")
    assert seeded.get(Comment, comment_id) is None


def test_delete_review_removes_comments(client, seeded, login, review_id):
    login("lector3", "lector3@test.uy")
    client.post(f"/api/reviews/{review_id}/comments", json={"content": "Uno"})
    client.post(f"/api/reviews/{review_id}/comments", json={"content": "Dos"})

    login("editor", "editor@test.uy")
    assert client.delete(f"/api/admin/reviews/{review_id}").status_code == 200
    seeded.expire_all()
    assert seeded.get(ReviewPost, review_id) is None
    left = seeded.execute(select(func.count()).select_from(Comment).where(Comment.post_id == review_id))
    assert left.scalar_one() == 0


def test_duplicate_review_slug(client, review_id):
    res = client.post(
        "/api/admin/reviews",
        json={
            "title": "Otra",
            "slug": "golf-gti-a-fondo",
            "excerpt": "x",
            "content": "y",
            "cover_image": "https://img.test/x.jpg",
            "rating": 5,
        },
    )
    assert res.status_code == 409


def test_reply_needs_parent_from_same_review(client, seeded, login, review_id):
    other_id = client.post(
        "/api/admin/reviews",
        json={
            "title": "Otra nota",
            "slug": "otra-nota",
            "excerpt": "x",
            "content": "y",
            "cover_image": "https://img.test/x.jpg",
            "rating": 6,
        },
    ).json()["id"]
    login("lector4", "lector4@test.uy")
    foreign = client.post(f"/api/reviews/{other_id}/comments", json={"content": "Ajeno"}).json()["id"]
    parent = client.post(f"/api/reviews/{review_id}/comments", json={"content": "Padre"}).json()["id"]

    missing = client.post(f"/api/reviews/{review_id}/comments", json={"content": "hola", "parent_id": 9999})
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Comentario no encontrado"

    crossed = client.post(f"/api/reviews/{review_id}/comments", json={"content": "hola", "parent_id": foreign})
    assert crossed.status_code == 422
    assert crossed.json()["error"] == "invalid"

    reply = client.post(f"/api/reviews/{review_id}/comments", json={"content": "Respuesta", "parent_id": parent})
    assert reply.status_code == 201
    assert reply.json()["parent_id"] == parent
