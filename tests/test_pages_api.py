# tests/test_pages_api.py
from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from sitecms.core.settings import settings
from sitecms.main import app
from sitecms.models.site import Site

client = TestClient(app)

API = settings.API_V1_STR


def _pages(site_id: str) -> str:
    return f"{API}/sites/{site_id}/pages"


def _text(block_id: str) -> dict:
    return {"id": block_id, "type": "text", "order": 0, "content": f"<p>{block_id}</p>"}


def _create(headers: dict, site: Site, page_id: str = "about", blocks=None, **extra):
    body = {"id": page_id, "title": page_id.title(), "blocks": blocks or [], **extra}
    r = client.post(_pages(site.id), json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_requires_auth(site: Site):
    assert client.get(_pages(site.id)).status_code == 401
    r = client.get(_pages(site.id), headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_non_member_forbidden(outsider_headers: dict, site: Site):
    assert client.get(_pages(site.id), headers=outsider_headers).status_code == 403


def test_create_and_get_page(editor_headers: dict, site: Site):
    doc = _create(editor_headers, site, blocks=[_text("a")], description="About the team")
    assert doc["id"] == "about"
    assert doc["siteId"] == site.id
    assert doc["isPublished"] is True
    assert doc["blocks"] == [{"id": "a", "type": "text", "order": 0, "content": "<p>a</p>"}]

    r = client.get(f"{_pages(site.id)}/about", headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["description"] == "About the team"


def test_create_page_with_generated_id(editor_headers: dict, site: Site):
    r = client.post(_pages(site.id), json={"title": "Summer Camp"}, headers=editor_headers)
    assert r.status_code == 201
    assert r.json()["id"] == "summer-camp"


def test_invalid_page_id_is_400(editor_headers: dict, site: Site):
    r = client.post(_pages(site.id), json={"id": ".secret", "title": "X"}, headers=editor_headers)
    assert r.status_code == 400
    assert client.get(f"{_pages(site.id)}/.env", headers=editor_headers).status_code == 400


def test_duplicate_page_is_409(editor_headers: dict, site: Site):
    _create(editor_headers, site)
    r = client.post(_pages(site.id), json={"id": "about", "title": "Again"}, headers=editor_headers)
    assert r.status_code == 409


def test_missing_page_is_404(editor_headers: dict, site: Site):
    assert client.get(f"{_pages(site.id)}/nope", headers=editor_headers).status_code == 404


def test_invalid_block_is_422(editor_headers: dict, site: Site):
    r = client.post(
        _pages(site.id),
        json={"id": "bad", "title": "Bad", "blocks": [{"id": "m", "type": "media-row", "columns": 7}]},
        headers=editor_headers,
    )
    assert r.status_code == 422


def test_list_pages_in_order(editor_headers: dict, site: Site):
    _create(editor_headers, site, "contact", order=2)
    _create(editor_headers, site, "home", order=0)
    r = client.get(_pages(site.id), headers=editor_headers)
    assert [p["id"] for p in r.json()] == ["home", "contact"]


def test_put_saves_by_id(editor_headers: dict, site: Site):
    r = client.put(f"{_pages(site.id)}/home", json={"title": "Home", "blocks": [_text("a")]}, headers=editor_headers)
    assert r.status_code == 200
    r = client.put(f"{_pages(site.id)}/home", json={"title": "Welcome", "blocks": []}, headers=editor_headers)
    assert r.json()["title"] == "Welcome"
    assert r.json()["blocks"] == []


def test_patch_page_metadata(editor_headers: dict, site: Site):
    _create(editor_headers, site, blocks=[_text("a")])
    r = client.patch(f"{_pages(site.id)}/about", json={"isPublished": False}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["isPublished"] is False
    assert r.json()["title"] == "About"
    assert len(r.json()["blocks"]) == 1


def test_patch_page_rejects_null_required_fields(editor_headers: dict, site: Site):
    _create(editor_headers, site)
    for body in ({"title": None}, {"isPublished": None}):
        r = client.patch(f"{_pages(site.id)}/about", json=body, headers=editor_headers)
        assert r.status_code == 422
    doc = client.get(f"{_pages(site.id)}/about", headers=editor_headers).json()
    assert doc["title"] == "About"
    assert doc["isPublished"] is True


def test_patch_page_clears_optional_fields(editor_headers: dict, site: Site):
    _create(editor_headers, site, description="Team")
    r = client.patch(f"{_pages(site.id)}/about", json={"description": None}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["description"] is None


def test_delete_page(editor_headers: dict, site: Site):
    _create(editor_headers, site)
    r = client.delete(f"{_pages(site.id)}/about", headers=editor_headers)
    assert r.status_code == 204
    assert client.get(f"{_pages(site.id)}/about", headers=editor_headers).status_code == 404


def test_block_endpoints(editor_headers: dict, site: Site):
    _create(editor_headers, site, blocks=[_text("a"), _text("b")])
    blocks = f"{_pages(site.id)}/about/blocks"

    r = client.post(blocks, json={"block": _text("c"), "position": 0}, headers=editor_headers)
    assert r.status_code == 201
    assert [(b["id"], b["order"]) for b in r.json()["blocks"]] == [("c", 0), ("a", 1), ("b", 2)]

    r = client.post(blocks, json={"type": "cta"}, headers=editor_headers)
    assert r.status_code == 201
    assert r.json()["blocks"][-1]["type"] == "cta"

    r = client.post(f"{blocks}/reorder", json={"fromIndex": 3, "toIndex": 0}, headers=editor_headers)
    assert r.status_code == 200
    assert [b["type"] for b in r.json()["blocks"]][0] == "cta"

    r = client.put(f"{blocks}/1", json={**_text("c"), "title": "Edited"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["blocks"][1]["title"] == "Edited"
    assert r.json()["blocks"][1]["order"] == 1

    r = client.delete(f"{blocks}/0", headers=editor_headers)
    assert r.status_code == 200
    assert [b["id"] for b in r.json()["blocks"]] == ["c", "a", "b"]
    assert [b["order"] for b in r.json()["blocks"]] == [0, 1, 2]

    r = client.put(blocks, json={"blocks": [_text("z")]}, headers=editor_headers)
    assert r.status_code == 200
    assert [b["id"] for b in r.json()["blocks"]] == ["z"]


def test_block_errors(editor_headers: dict, site: Site):
    _create(editor_headers, site, blocks=[_text("a")])
    blocks = f"{_pages(site.id)}/about/blocks"
    assert client.delete(f"{blocks}/5", headers=editor_headers).status_code == 400
    assert client.post(f"{blocks}/reorder", json={"fromIndex": 0, "toIndex": 4}, headers=editor_headers).status_code == 400
    assert client.post(blocks, json={"type": "carousel"}, headers=editor_headers).status_code == 400
    assert client.post(blocks, json={}, headers=editor_headers).status_code == 422
    assert client.post(blocks, json={"type": "text", "position": -1}, headers=editor_headers).status_code == 422
    # nothing above was written
    r = client.get(f"{_pages(site.id)}/about", headers=editor_headers)
    assert [b["id"] for b in r.json()["blocks"]] == ["a"]


def test_oversized_page_is_413(editor_headers: dict, site: Site, monkeypatch):
    monkeypatch.setattr(settings, "MAX_PAGE_DATA_KB", 1)
    big = {"id": "t", "type": "text", "content": "x" * 4096}
    r = client.put(f"{_pages(site.id)}/home", json={"title": "Home", "blocks": [big]}, headers=editor_headers)
    assert r.status_code == 413


# ---------- sites ----------
def test_sites_listing_respects_membership(db: Session, editor_headers: dict, outsider_headers: dict, site: Site):
    db.add(Site(id="other", name="Other"))
    db.commit()
    r = client.get(f"{API}/sites", headers=editor_headers)
    assert [s["id"] for s in r.json()] == [site.id]
    assert client.get(f"{API}/sites", headers=outsider_headers).json() == []


def test_create_site_superadmin_only(admin_headers: dict, outsider_headers: dict):
    body = {"id": "new-site", "name": "New", "theme": {"primaryColor": "#000"}}
    assert client.post(f"{API}/sites", json=body, headers=outsider_headers).status_code == 403
    r = client.post(f"{API}/sites", json=body, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["theme"] == {"primaryColor": "#000"}
    assert client.post(f"{API}/sites", json=body, headers=admin_headers).status_code == 409


def test_patch_site(editor_headers: dict, site: Site):
    r = client.patch(f"{API}/sites/{site.id}", json={"tagline": "Fresh"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json()["tagline"] == "Fresh"
    assert r.json()["name"] == "Demo Site"


def test_patch_site_rejects_null_name(editor_headers: dict, site: Site):
    r = client.patch(f"{API}/sites/{site.id}", json={"name": None}, headers=editor_headers)
    assert r.status_code == 422
    assert client.get(f"{API}/sites/{site.id}", headers=editor_headers).json()["name"] == "Demo Site"


def test_navigation_and_footer_api(editor_headers: dict, site: Site):
    base = f"{API}/sites/{site.id}"
    assert client.get(f"{base}/navigation", headers=editor_headers).json() == {"items": []}
    assert client.get(f"{base}/footer", headers=editor_headers).status_code == 404

    nav = {"items": [{"id": "home", "label": "Home", "url": "/"}]}
    r = client.put(f"{base}/navigation", json=nav, headers=editor_headers)
    assert r.status_code == 200
    assert client.get(f"{base}/navigation", headers=editor_headers).json() == nav

    r = client.put(f"{base}/footer", json={"copyright": "© Demo"}, headers=editor_headers)
    assert r.status_code == 200
    assert client.get(f"{base}/footer", headers=editor_headers).json() == {"copyright": "© Demo"}

    r = client.put(f"{base}/navigation", json={"items": [{"id": "x"}]}, headers=editor_headers)
    assert r.status_code == 422


def test_page_index_api(editor_headers: dict, site: Site):
    _create(editor_headers, site, "home", order=0)
    _create(editor_headers, site, "about", order=1)
    r = client.get(f"{API}/sites/{site.id}/page-index", headers=editor_headers)
    assert r.status_code == 200
    assert [(p["id"], p["path"]) for p in r.json()["pages"]] == [("home", "/"), ("about", "/about")]
    r = client.post(f"{API}/sites/{site.id}/page-index/rebuild", headers=editor_headers)
    assert r.status_code == 200


def test_block_types_catalog():
    r = client.get(f"{API}/block-types")
    assert r.status_code == 200
    assert len(r.json()) == 13
    r = client.get(f"{API}/block-types/hero/default")
    assert r.json()["type"] == "hero"
    assert client.get(f"{API}/block-types/carousel/default").status_code == 404
