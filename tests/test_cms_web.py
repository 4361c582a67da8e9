# tests/test_cms_web.py
from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from sitecms.main import app
from sitecms.models.site import Site
from sitecms.services import site_service

PASSWORD = "secret123"  # matches conftest


@pytest.fixture()
def web() -> TestClient:
    """Own client per test so session cookies never leak between tests."""
    return TestClient(app, follow_redirects=False)


def _login(web: TestClient, email: str) -> None:
    r = web.post("/login", data={"email": email, "password": PASSWORD, "next": "/cms/sites"})
    assert r.status_code == 302, r.text
    assert r.headers["location"] == "/cms/sites"


@pytest.fixture()
def editor_web(web: TestClient, editor) -> TestClient:
    _login(web, editor.email)
    return web


@pytest.fixture()
def about(db: Session, site: Site):
    page = site_service.create_page(db, site_id=site.id, page_id="about", title="About", blocks=[
        {"id": "a", "type": "text", "content": "<p>A</p>"},
        {"id": "b", "type": "hero", "title": "B"},
    ])
    db.commit()
    return page


def _editor_url(site: Site, page_id: str = "about") -> str:
    return f"/cms/sites/{site.id}/pages/{page_id}"


def _block_ids(db: Session, site: Site, page_id: str = "about") -> list[str]:
    db.expire_all()
    return [b["id"] for b in site_service.get_page(db, site_id=site.id, page_id=page_id).blocks]


# ---------- login ----------
def test_cms_requires_login(web: TestClient):
    r = web.get("/cms/sites")
    assert r.status_code == 303
    assert r.headers["location"].startswith("/login?next=")


def test_login_page_and_bad_credentials(web: TestClient, editor):
    assert web.get("/login").status_code == 200
    r = web.post("/login", data={"email": editor.email, "password": "wrong"})
    assert r.status_code == 401
    assert "Invalid credentials" in r.text


def test_login_ignores_offsite_next(web: TestClient, editor):
    r = web.post("/login", data={"email": editor.email, "password": PASSWORD, "next": "//evil.example.com"})
    assert r.headers["location"] == "/cms/sites"


def test_logout_clears_session(editor_web: TestClient):
    assert editor_web.get("/cms/sites").status_code == 200
    editor_web.post("/logout")
    assert editor_web.get("/cms/sites").status_code == 303


def test_cms_root_redirects(editor_web: TestClient):
    r = editor_web.get("/cms")
    assert r.headers["location"] == "/cms/sites"


# ---------- sites / pages ----------
def test_site_list_and_page_index(editor_web: TestClient, site: Site, about):
    r = editor_web.get("/cms/sites")
    assert "Demo Site" in r.text
    assert "Create site" not in r.text  # superadmin only
    r = editor_web.get(f"/cms/sites/{site.id}")
    assert r.status_code == 200
    assert "<code>/about</code>" in r.text


def test_no_access_to_foreign_site(db: Session, editor_web: TestClient):
    db.add(Site(id="other", name="Other"))
    db.commit()
    assert editor_web.get("/cms/sites/other").status_code == 403


def test_create_page_from_form(db: Session, editor_web: TestClient, site: Site):
    r = editor_web.post(f"/cms/sites/{site.id}/pages", data={"title": "Our Story"})
    assert r.status_code == 303
    assert r.headers["location"] == _editor_url(site, "our-story")
    page = editor_web.get(r.headers["location"])
    assert "Page created" in page.text
    assert "This page has no blocks yet." in page.text


def test_create_page_failure_is_flashed(editor_web: TestClient, site: Site, about):
    r = editor_web.post(f"/cms/sites/{site.id}/pages", data={"title": "Again", "page_id": "about"})
    assert r.headers["location"] == f"/cms/sites/{site.id}"
    assert "Failed to create page" in editor_web.get(r.headers["location"]).text


def test_page_settings_and_delete(db: Session, editor_web: TestClient, site: Site, about):
    editor_web.post(f"{_editor_url(site)}/settings", data={"title": "About us", "description": "Team"})
    db.expire_all()
    page = site_service.get_page(db, site_id=site.id, page_id="about")
    assert page.title == "About us"
    assert page.is_published is False  # unchecked box

    r = editor_web.post(f"{_editor_url(site)}/delete")
    assert r.headers["location"] == f"/cms/sites/{site.id}"
    assert site_service.find_page(db, site_id=site.id, page_id="about") is None


# ---------- blocks ----------
def test_editor_lists_blocks(editor_web: TestClient, site: Site, about):
    r = editor_web.get(_editor_url(site))
    assert r.status_code == 200
    assert "Text Content" in r.text
    assert "Hero Section" in r.text
    assert "Move up" in r.text and "Add below" in r.text


def test_add_block_at_end_and_above(db: Session, editor_web: TestClient, site: Site, about):
    editor_web.post(f"{_editor_url(site)}/blocks/add", data={"block_type": "cta"})
    r = editor_web.post(f"{_editor_url(site)}/blocks/add", data={"block_type": "map", "position": "0"})
    assert r.headers["location"] == _editor_url(site)
    db.expire_all()
    blocks = site_service.get_page(db, site_id=site.id, page_id="about").blocks
    assert [b["type"] for b in blocks] == ["map", "text", "hero", "cta"]
    assert [b["order"] for b in blocks] == [0, 1, 2, 3]
    assert "Block added" in editor_web.get(_editor_url(site)).text


def test_add_unknown_block_type_is_flashed(editor_web: TestClient, site: Site, about):
    editor_web.post(f"{_editor_url(site)}/blocks/add", data={"block_type": "carousel"})
    assert "Failed to add block" in editor_web.get(_editor_url(site)).text


def test_move_and_delete_block(db: Session, editor_web: TestClient, site: Site, about):
    editor_web.post(f"{_editor_url(site)}/blocks/1/move", data={"direction": "up"})
    assert _block_ids(db, site) == ["b", "a"]
    editor_web.post(f"{_editor_url(site)}/blocks/0/delete")
    assert _block_ids(db, site) == ["a"]
    assert editor_web.post(f"{_editor_url(site)}/blocks/0/move", data={"direction": "sideways"}).status_code == 400


def test_delete_out_of_range_is_flashed(db: Session, editor_web: TestClient, site: Site, about):
    editor_web.post(f"{_editor_url(site)}/blocks/9/delete")
    assert "Failed to delete block" in editor_web.get(_editor_url(site)).text
    assert _block_ids(db, site) == ["a", "b"]


def test_edit_block_through_descriptor(db: Session, editor_web: TestClient, site: Site, about):
    r = editor_web.get(f"{_editor_url(site)}/blocks/1")
    assert r.status_code == 200
    assert 'name="backgroundImage"' in r.text

    ctas = [{"id": "c1", "text": "Join", "url": "/join"}]
    r = editor_web.post(f"{_editor_url(site)}/blocks/1", data={
        "title": "New hero",
        "subtitle": "",
        "alignment": "left",
        "overlayOpacity": "0.5",
        "ctas": json.dumps(ctas),
    })
    assert r.headers["location"] == _editor_url(site)
    db.expire_all()
    hero = site_service.get_page(db, site_id=site.id, page_id="about").blocks[1]
    assert hero["id"] == "b" and hero["type"] == "hero" and hero["order"] == 1
    assert hero["title"] == "New hero"
    assert hero["alignment"] == "left"
    assert hero["overlayOpacity"] == 0.5
    assert hero["ctas"] == ctas
    assert "subtitle" not in hero


def test_edit_block_bad_json_is_flashed(db: Session, editor_web: TestClient, site: Site, about):
    r = editor_web.post(f"{_editor_url(site)}/blocks/1", data={"title": "X", "ctas": "[not json"})
    assert r.headers["location"] == f"{_editor_url(site)}/blocks/1"
    assert "Failed to save block" in editor_web.get(r.headers["location"]).text
    db.expire_all()
    assert site_service.get_page(db, site_id=site.id, page_id="about").blocks[1]["title"] == "B"


def test_unknown_block_uses_raw_json_editor(db: Session, editor_web: TestClient, site: Site, about):
    page = site_service.get_page(db, site_id=site.id, page_id="about")
    page.blocks = [{"id": "x", "type": "carousel", "slides": [1]}]
    db.commit()
    r = editor_web.get(f"{_editor_url(site)}/blocks/0")
    assert 'name="__json__"' in r.text

    editor_web.post(f"{_editor_url(site)}/blocks/0", data={"__json__": json.dumps({"type": "carousel", "slides": [1, 2]})})
    db.expire_all()
    block = site_service.get_page(db, site_id=site.id, page_id="about").blocks[0]
    assert block == {"id": "x", "type": "carousel", "order": 0, "slides": [1, 2]}


def test_missing_block_is_404(editor_web: TestClient, site: Site, about):
    assert editor_web.get(f"{_editor_url(site)}/blocks/7").status_code == 404


# ---------- navigation / footer / settings ----------
def test_navigation_form(db: Session, editor_web: TestClient, site: Site):
    nav = {"items": [{"id": "home", "label": "Home", "url": "/"}]}
    editor_web.post(f"/cms/sites/{site.id}/navigation", data={"document": json.dumps(nav)})
    assert site_service.get_navigation(db, site_id=site.id) == nav
    r = editor_web.get(f"/cms/sites/{site.id}/navigation")
    assert "Navigation saved" in r.text

    editor_web.post(f"/cms/sites/{site.id}/navigation", data={"document": "{broken"})
    assert "Failed to save navigation" in editor_web.get(f"/cms/sites/{site.id}/navigation").text
    assert site_service.get_navigation(db, site_id=site.id) == nav


def test_footer_form(db: Session, editor_web: TestClient, site: Site):
    editor_web.post(f"/cms/sites/{site.id}/footer", data={"document": json.dumps({"tagline": "See you"})})
    assert site_service.get_footer(db, site_id=site.id) == {"tagline": "See you"}


def test_settings_form(db: Session, editor_web: TestClient, site: Site):
    r = editor_web.post(f"/cms/sites/{site.id}/settings", data={
        "name": "Renamed", "tagline": "", "primary_color": "#112233", "secondary_color": "#abcdef",
    })
    assert r.headers["location"] == f"/cms/sites/{site.id}/settings"
    db.expire_all()
    site = db.get(Site, site.id)
    assert site.name == "Renamed"
    assert site.tagline is None
    assert site.theme == {"primaryColor": "#112233", "secondaryColor": "#abcdef"}
    assert "Settings saved" in editor_web.get(f"/cms/sites/{site.id}/settings").text


def test_settings_form_clears_theme_value(db: Session, editor_web: TestClient, site: Site):
    editor_web.post(f"/cms/sites/{site.id}/settings", data={
        "name": site.name, "primary_color": "", "secondary_color": "", "font_family": "Inter",
    })
    db.expire_all()
    assert db.get(Site, site.id).theme == {"fontFamily": "Inter"}
    assert 'name="primary_color" value=""' in editor_web.get(f"/cms/sites/{site.id}/settings").text


def test_superadmin_creates_site(db: Session, web: TestClient, superadmin):
    _login(web, superadmin.email)
    r = web.post("/cms/sites", data={"site_id": "fresh", "name": "Fresh"})
    assert r.headers["location"] == "/cms/sites/fresh"
    assert db.get(Site, "fresh") is not None
