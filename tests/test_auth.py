# tests/test_auth.py
from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from sitecms.core.settings import settings
from sitecms.main import app
from sitecms.models.auth import User
from sitecms.security.jwt import create_refresh_token, decode_token

PASSWORD = "secret123"  # matches conftest

client = TestClient(app)

AUTH = f"{settings.API_V1_STR}/auth"


def _login(email: str, password: str = PASSWORD):
    return client.post(f"{AUTH}/login", json={"email": email, "password": password})


def test_login_returns_token_pair(editor: User):
    r = _login("Editor@Example.com")
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert decode_token(body["access_token"])["type"] == "access"
    assert decode_token(body["refresh_token"])["sub"] == str(editor.id)


def test_login_bad_password(editor: User):
    assert _login("editor@example.com", "wrong").status_code == 401
    assert _login("nobody@example.com").status_code == 401


def test_login_inactive_user(db: Session, editor: User):
    editor.is_active = False
    db.commit()
    assert _login("editor@example.com").status_code == 403


def test_me_lists_memberships(editor: User, editor_headers: dict):
    r = client.get(f"{AUTH}/me", headers=editor_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == "editor@example.com"
    assert body["is_superadmin"] is False
    assert body["sites"] == [{"site_id": settings.SITE_ID, "role": "editor"}]
    assert body["tenant_ids"] == []


def test_me_requires_token():
    assert client.get(f"{AUTH}/me").status_code == 401
    assert client.get(f"{AUTH}/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_refresh(editor: User):
    r = client.post(f"{AUTH}/refresh", json={"refresh_token": create_refresh_token(editor.id)})
    assert r.status_code == 200
    assert decode_token(r.json()["access_token"])["sub"] == str(editor.id)


def test_refresh_rejects_access_token(editor_headers: dict):
    access = editor_headers["Authorization"].split(" ", 1)[1]
    r = client.post(f"{AUTH}/refresh", json={"refresh_token": access})
    assert r.status_code == 401
    assert r.json()["detail"] == "Wrong token type"


def test_refresh_token_is_not_an_access_token(editor: User):
    headers = {"Authorization": f"Bearer {create_refresh_token(editor.id)}"}
    assert client.get(f"{AUTH}/me", headers=headers).status_code == 401


def test_logout():
    assert client.post(f"{AUTH}/logout").status_code == 204
