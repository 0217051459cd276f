from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from blogger.app import create_app
from blogger.shared.config import (AppConfig, AssetStoreConfig, DatabaseConfig,
                                   SecurityConfig)

PASSWORD = "secret123"


@pytest.fixture()
def uploads_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def app(tmp_path: Path, uploads_dir: Path) -> Flask:
    config = AppConfig(
        APP_ENV="test",
        SECRET_KEY="integration-secret",
        JWT_SECRET="integration-jwt-secret-0123456789abcdef",
        database=DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'blog.db'}"),
        security=SecurityConfig(ENABLE_RATE_LIMIT=False),
        assets=AssetStoreConfig(ASSET_BACKEND="local", UPLOADS_DIR=uploads_dir),
    )
    return create_app(config)


def _login(client: FlaskClient, username: str) -> None:
    assert client.post("/register", json={"username": username, "password": PASSWORD}).status_code == 200
    assert client.post("/login", json={"username": username, "password": PASSWORD}).status_code == 200


def _form(title: str, **extra):
    return {"title": title, "summary": "short", "content": "<p>body</p>", **extra}


def test_health_and_liveness(app: Flask) -> None:
    with app.test_client() as client:
        assert client.get("/").get_data(as_text=True) == "Server running"
        health = client.get("/api/health")

    assert health.status_code == 200
    assert health.get_json() == {"ok": True, "database": "ok"}
    assert health.headers["X-Content-Type-Options"] == "nosniff"


def test_register_twice_is_rejected(app: Flask) -> None:
    with app.test_client() as client:
        _login(client, "alice")
        again = client.post("/register", json={"username": "alice", "password": PASSWORD})

    assert again.status_code == 400
    assert again.get_json()["error"] == "user_already_exists"


def test_post_lifecycle_with_cover_and_second_user(app: Flask, uploads_dir: Path) -> None:
    alice = app.test_client()
    bob = app.test_client()
    _login(alice, "alice")
    _login(bob, "bob")

    created = alice.post(
        "/post",
        data=_form("Hello", file=(BytesIO(b"first-cover"), "a.png", "image/png")),
        content_type="multipart/form-data",
    )
    assert created.status_code == 200
    post = created.get_json()
    first_cover = post["cover"]["id"]
    assert post["author"]["username"] == "alice"
    assert (uploads_dir / first_cover).read_bytes() == b"first-cover"
    assert alice.get(f"/uploads/{first_cover}").data == b"first-cover"

    updated = alice.put(
        "/post",
        data=_form("Hello2", id=str(post["id"]), file=(BytesIO(b"second-cover"), "b.png", "image/png")),
        content_type="multipart/form-data",
    )
    assert updated.status_code == 200
    second_cover = updated.get_json()["cover"]["id"]
    assert second_cover != first_cover
    assert not (uploads_dir / first_cover).exists()

    hijack = bob.put(
        "/post", data=_form("Pwned", id=str(post["id"])), content_type="multipart/form-data"
    )
    assert hijack.status_code == 403
    assert alice.get(f"/post/{post['id']}").get_json()["title"] == "Hello2"

    assert bob.delete(f"/post/{post['id']}").status_code == 403
    assert alice.delete(f"/post/{post['id']}").status_code == 200
    assert alice.get(f"/post/{post['id']}").status_code == 404
    assert not (uploads_dir / second_cover).exists()


def test_anonymous_cannot_create(app: Flask) -> None:
    with app.test_client() as client:
        response = client.post("/post", data=_form("Hello"), content_type="multipart/form-data")
        listing = client.get("/post")

    assert response.status_code == 401
    assert listing.get_json() == []


def test_listing_is_newest_first(app: Flask) -> None:
    with app.test_client() as client:
        _login(client, "alice")
        for title in ("one", "two", "three"):
            client.post("/post", data=_form(title), content_type="multipart/form-data")

        titles = [p["title"] for p in client.get("/post").get_json()]

    assert titles == ["three", "two", "one"]


def test_logout_then_profile_is_unauthorized(app: Flask) -> None:
    with app.test_client() as client:
        _login(client, "alice")
        assert client.get("/profile").get_json()["username"] == "alice"
        client.post("/logout")
        assert client.get("/profile").status_code == 401


def test_oversized_post_id_is_not_found(app: Flask) -> None:
    huge = "99999999999999999999"
    with app.test_client() as client:
        _login(client, "alice")
        fetched = client.get(f"/post/{huge}")
        deleted = client.delete(f"/post/{huge}")
        updated = client.put("/post", data=_form("Hello", id=huge), content_type="multipart/form-data")

    for response in (fetched, deleted, updated):
        assert response.status_code == 404
        assert response.get_json()["error"] == "post_not_found"


def test_svg_cover_is_rejected(app: Flask, uploads_dir: Path) -> None:
    with app.test_client() as client:
        _login(client, "alice")
        response = client.post(
            "/post",
            data=_form("Hello", file=(BytesIO(b"<svg onload='alert(1)'/>"), "x.svg", "image/svg+xml")),
            content_type="multipart/form-data",
        )

    assert response.status_code == 422
    assert response.get_json()["context"]["fields"] == ["file"]
    assert list(uploads_dir.iterdir()) == []
