from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from reflectai.core.auth.models import JWTBlocklist
from reflectai.core.users.models import User
from reflectai.extensions import db
from reflectai.platform.outbox.models import OutboxMessage


def _register(client, **overrides):
    payload = {"email": "New.Person@Example.com", "password": "secret123", "username": "new_person"}
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


def test_register_creates_free_user_and_tokens(client):
    resp = _register(client)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["user"]["email"] == "new.person@example.com"
    assert body["user"]["subscription_plan"] == "free"
    assert body["access_token"]
    assert body["refresh_token"]
    assert OutboxMessage.query.filter_by(event_type="auth.user.registered").count() == 1


def test_register_rejects_weak_password_and_duplicates(client):
    weak = _register(client, password="password")
    assert weak.status_code == 400

    assert _register(client).status_code == 201
    duplicate = _register(client, username="someone_else")
    assert duplicate.status_code == 409
    assert duplicate.get_json()["message"] == "email_already_exists"


def test_login_me_and_logout(client):
    _register(client)

    bad = client.post("/auth/login", json={"email": "new.person@example.com", "password": "wrong123"})
    assert bad.status_code == 401

    login = client.post("/auth/login", json={"email": "NEW.PERSON@example.com", "password": "secret123"})
    assert login.status_code == 200
    tokens = login.get_json()

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["username"] == "new_person"

    refresh_headers = {"Authorization": f"Bearer {tokens['refresh_token']}"}
    assert client.post("/auth/refresh", headers=refresh_headers).status_code == 200
    assert client.post("/auth/logout", headers=refresh_headers).status_code == 200
    assert JWTBlocklist.query.count() == 1
    assert client.post("/auth/refresh", headers=refresh_headers).status_code == 401


def test_inactive_user_cannot_login(client):
    _register(client)
    user = User.query.filter_by(email="new.person@example.com").one()
    user.is_active = False
    db.session.commit()

    resp = client.post("/auth/login", json={"email": "new.person@example.com", "password": "secret123"})
    assert resp.status_code == 401


def test_csrf_header_required_when_enabled(app, client):
    _register(client)
    login = client.post("/auth/login", json={"email": "new.person@example.com", "password": "secret123"}).get_json()
    app.config["WTF_CSRF_ENABLED"] = True
    bearer = {"Authorization": f"Bearer {login['access_token']}"}

    rejected = client.patch("/auth/me/preferences", json={"theme": "dark"}, headers=bearer)
    assert rejected.status_code == 403
    assert rejected.get_json()["error"] == "csrf_failed"

    token = client.get("/auth/me", headers=bearer).get_json()["csrf_token"]
    accepted = client.patch("/auth/me/preferences", json={"theme": "dark"}, headers={**bearer, "X-CSRF-Token": token})
    assert accepted.status_code == 200


def test_blocklist_ignores_repeated_jti(app):
    JWTBlocklist.block("jti-1")
    db.session.commit()
    JWTBlocklist.block("jti-1")
    db.session.commit()

    assert JWTBlocklist.contains("jti-1")
    assert not JWTBlocklist.contains("jti-2")
    assert JWTBlocklist.query.count() == 1
