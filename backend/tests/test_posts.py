import pytest

from app.services.posts import normalize_slug
from app.services.session_store import SqlSessionStore
from app.services.sessions import SessionService
from app.services.users import SqlUserLookup
from conftest import make_user


@pytest.fixture
def admin_cookie(session_factory, clock):
    db = session_factory()
    try:
        admin = make_user(db, "admin", roles=("USER", "ADMIN"))
        token = SessionService(SqlSessionStore(db), SqlUserLookup(db), clock=clock).create(admin.id)
        db.commit()
    finally:
        db.close()
    return {"Cookie": f"sid={token}"}


@pytest.fixture
def user_cookie(session_factory, clock):
    db = session_factory()
    try:
        user = make_user(db, "reader")
        token = SessionService(SqlSessionStore(db), SqlUserLookup(db), clock=clock).create(user.id)
        db.commit()
    finally:
        db.close()
    return {"Cookie": f"sid={token}"}


def _create(client, headers, **payload):
    body = {"title": "Hello World", "content": "First post"}
    body.update(payload)
    return client.post("/api/posts", json=body, headers=headers)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Hello World", "hello-world"),
        ("  Mixed   CASE  title ", "mixed-case-title"),
        ("C++ & Rust: a tale!", "c-rust-a-tale"),
        ("already--dashed---slug", "already-dashed-slug"),
        ("!!!", "post"),
        (None, "post"),
    ],
)
def test_normalize_slug(raw, expected):
    assert normalize_slug(raw) == expected


def test_create_requires_admin(client, user_cookie):
    assert _create(client, {}).status_code == 401
    assert _create(client, user_cookie).status_code == 403


def test_create_derives_slug_and_location(client, admin_cookie):
    response = _create(client, admin_cookie)

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "hello-world"
    assert response.headers["location"] == "/api/posts/slug/hello-world"


def test_create_suffixes_taken_slugs(client, admin_cookie):
    slugs = [_create(client, admin_cookie).json()["slug"] for _ in range(3)]
    explicit = _create(client, admin_cookie, slug="Hello World").json()["slug"]

    assert slugs == ["hello-world", "hello-world-2", "hello-world-3"]
    assert explicit == "hello-world-4"


def test_reads_are_public(client, admin_cookie):
    first = _create(client, admin_cookie, title="First").json()
    second = _create(client, admin_cookie, title="Second").json()

    listing = client.get("/api/posts").json()
    assert [p["id"] for p in listing] == [second["id"], first["id"]]
    assert client.get(f"/api/posts/{first['id']}").json()["title"] == "First"
    assert client.get("/api/posts/slug/second").json()["id"] == second["id"]


def test_missing_posts_are_404(client, admin_cookie):
    assert client.get("/api/posts/999").status_code == 404
    assert client.get("/api/posts/slug/nope").status_code == 404
    assert client.patch("/api/posts/999", json={"title": "x"}, headers=admin_cookie).status_code == 404
    assert client.delete("/api/posts/999", headers=admin_cookie).status_code == 404


def test_patch_updates_only_given_fields(client, admin_cookie):
    post = _create(client, admin_cookie, hero_image="/img/hero.png").json()

    response = client.patch(
        f"/api/posts/{post['id']}",
        json={"content": "Edited", "slug": "New Slug"},
        headers=admin_cookie,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Hello World"
    assert data["content"] == "Edited"
    assert data["slug"] == "new-slug"
    assert data["hero_image"] == "/img/hero.png"


def test_patch_rejects_slug_of_another_post(client, admin_cookie):
    first = _create(client, admin_cookie, title="First").json()
    second = _create(client, admin_cookie, title="Second").json()

    conflict = client.patch(f"/api/posts/{second['id']}", json={"slug": "first"}, headers=admin_cookie)
    same = client.patch(f"/api/posts/{first['id']}", json={"slug": "First"}, headers=admin_cookie)

    assert conflict.status_code == 409
    assert same.status_code == 200


def test_delete_post(client, admin_cookie, user_cookie):
    post = _create(client, admin_cookie).json()

    assert client.delete(f"/api/posts/{post['id']}", headers=user_cookie).status_code == 403
    assert client.delete(f"/api/posts/{post['id']}", headers=admin_cookie).status_code == 204
    assert client.get(f"/api/posts/{post['id']}").status_code == 404
