# sitecms/web/cms/router.py
# Server-rendered CMS: sites, page list, block editor, navigation, footer, settings.
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from sitecms.blocks.dispatch import editor_for, is_diagnostic_editor
from sitecms.blocks.normalize import normalize_blocks
from sitecms.blocks.types import BLOCK_TYPE_META, BLOCK_TYPES
from sitecms.db.session import get_db
from sitecms.errors import NotFoundError, SiteCMSError
from sitecms.models.auth import SiteMember, SiteRole, User
from sitecms.models.site import Site
from sitecms.services import site_service
from sitecms.web.auth.router import SESSION_USER_KEY
from sitecms.web.cms.forms import FormError, field_form_value, parse_block_form, parse_json_document
from sitecms.web.flash import flash, pop_flashes
from sitecms.web.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cms", include_in_schema=False)


# --------------------------- Helpers ---------------------------
def web_user(request: Request, db: Session = Depends(get_db)) -> User:
    data = request.session.get(SESSION_USER_KEY)
    user = db.get(User, int(data["id"])) if data else None
    if user is None or not user.is_active:
        request.session.pop(SESSION_USER_KEY, None)
        raise HTTPException(status_code=303, headers={"Location": f"/login?next={quote(request.url.path)}"})
    return user


def _site_for(db: Session, user: User, site_id: str) -> Site:
    if not site_service.user_can_edit_site(db, user=user, site_id=site_id):
        raise HTTPException(status_code=403, detail="No access to this site")
    try:
        return site_service.get_site(db, site_id=site_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _render(request: Request, name: str, ctx: dict, status_code: int = 200):
    ctx = {**ctx, "flashes": pop_flashes(request), "session_user": request.session.get(SESSION_USER_KEY)}
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def _editor_url(site_id: str, page_id: str) -> str:
    return f"/cms/sites/{site_id}/pages/{page_id}"


def _mutate(request: Request, db: Session, ok_message: str, fail_message: str, fn, **kwargs) -> bool:
    """Runs a site_service mutation, commits, and records a toast either way."""
    try:
        fn(db, **kwargs)
        db.commit()
    except (SiteCMSError, ValidationError, FormError, ValueError) as e:
        db.rollback()
        logger.warning("%s: %s", fail_message, e)
        flash(request, f"{fail_message}: {e}", "error")
        return False
    flash(request, ok_message)
    return True


# --------------------------- Sites ---------------------------
@router.get("")
def cms_root():
    return _redirect("/cms/sites")


@router.get("/sites")
def site_list(request: Request, db: Session = Depends(get_db), user: User = Depends(web_user)):
    sites = site_service.list_sites_for_user(db, user=user)
    return _render(request, "cms/sites.html", {"sites": sites, "user": user})


@router.post("/sites")
def site_create(
    request: Request,
    site_id: str = Form(...),
    name: str = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    if not user.is_superadmin:
        raise HTTPException(status_code=403, detail="Superadmin only")

    def _create(db: Session, **kw):
        site = site_service.create_site(db, **kw)
        db.add(SiteMember(user_id=user.id, site_id=site.id, role=SiteRole.owner))
        return site

    if _mutate(request, db, "Site created", "Failed to create site", _create, site_id=site_id.strip(), name=name.strip()):
        return _redirect(f"/cms/sites/{site_id.strip()}")
    return _redirect("/cms/sites")


@router.get("/sites/{site_id}")
def site_editor(site_id: str, request: Request, db: Session = Depends(get_db), user: User = Depends(web_user)):
    site = _site_for(db, user, site_id)
    index = site_service.get_page_index(db, site_id=site_id)
    return _render(request, "cms/site.html", {"site": site, "pages": index.get("pages", [])})


@router.post("/sites/{site_id}/pages")
def page_create(
    site_id: str,
    request: Request,
    title: str = Form(...),
    page_id: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    created = {}

    def _create(db: Session, **kw):
        created["page"] = site_service.create_page(db, **kw)

    ok = _mutate(
        request, db, "Page created", "Failed to create page", _create,
        site_id=site_id, title=title.strip(), page_id=(page_id or "").strip() or None,
    )
    if ok:
        return _redirect(_editor_url(site_id, created["page"].id))
    return _redirect(f"/cms/sites/{site_id}")


# --------------------------- Page editor ---------------------------
@router.get("/sites/{site_id}/pages/{page_id}")
def page_editor(
    site_id: str,
    page_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    site = _site_for(db, user, site_id)
    try:
        page = site_service.get_page(db, site_id=site_id, page_id=page_id)
    except SiteCMSError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    blocks = normalize_blocks(page.blocks)
    return _render(request, "cms/page.html", {
        "site": site,
        "page": page,
        "blocks": blocks,
        "block_types": [(t, BLOCK_TYPE_META[t]) for t in BLOCK_TYPES],
        "block_meta": BLOCK_TYPE_META,
    })


@router.post("/sites/{site_id}/pages/{page_id}/settings")
def page_settings(
    site_id: str,
    page_id: str,
    request: Request,
    title: str = Form(...),
    description: Optional[str] = Form(None),
    is_published: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    _mutate(
        request, db, "Page saved", "Failed to save page", site_service.update_page,
        site_id=site_id, page_id=page_id,
        data={"title": title.strip(), "description": (description or "").strip() or None,
              "is_published": is_published is not None},
    )
    return _redirect(_editor_url(site_id, page_id))


@router.post("/sites/{site_id}/pages/{page_id}/delete")
def page_delete(
    site_id: str,
    page_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    if _mutate(request, db, "Page deleted", "Failed to delete page", site_service.delete_page,
               site_id=site_id, page_id=page_id):
        return _redirect(f"/cms/sites/{site_id}")
    return _redirect(_editor_url(site_id, page_id))


@router.post("/sites/{site_id}/pages/{page_id}/blocks/add")
def block_add(
    site_id: str,
    page_id: str,
    request: Request,
    block_type: str = Form(...),
    position: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    """Add at the end, or above / below a block when the form carries a position."""
    _site_for(db, user, site_id)
    _mutate(
        request, db, "Block added", "Failed to add block", site_service.add_default_block,
        site_id=site_id, page_id=page_id, block_type=block_type, position=position,
    )
    return _redirect(_editor_url(site_id, page_id))


@router.post("/sites/{site_id}/pages/{page_id}/blocks/{index}/move")
def block_move(
    site_id: str,
    page_id: str,
    index: int,
    request: Request,
    direction: str = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    if direction not in ("up", "down"):
        raise HTTPException(status_code=400, detail="direction must be 'up' or 'down'")
    _mutate(
        request, db, "Block moved", "Failed to move block", site_service.move_block,
        site_id=site_id, page_id=page_id, index=index, direction=direction,
    )
    return _redirect(_editor_url(site_id, page_id))


@router.post("/sites/{site_id}/pages/{page_id}/blocks/{index}/delete")
def block_delete(
    site_id: str,
    page_id: str,
    index: int,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    _mutate(
        request, db, "Block deleted", "Failed to delete block", site_service.remove_block,
        site_id=site_id, page_id=page_id, index=index,
    )
    return _redirect(_editor_url(site_id, page_id))


def _block_at(db: Session, site_id: str, page_id: str, index: int) -> dict:
    try:
        page = site_service.get_page(db, site_id=site_id, page_id=page_id)
    except SiteCMSError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    blocks = normalize_blocks(page.blocks)
    if index < 0 or index >= len(blocks):
        raise HTTPException(status_code=404, detail="Block not found")
    return blocks[index]


@router.get("/sites/{site_id}/pages/{page_id}/blocks/{index}")
def block_edit_form(
    site_id: str,
    page_id: str,
    index: int,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    site = _site_for(db, user, site_id)
    block = _block_at(db, site_id, page_id, index)
    fields = editor_for(block.get("type"))
    return _render(request, "cms/block_edit.html", {
        "site": site,
        "page_id": page_id,
        "index": index,
        "block": block,
        "fields": fields,
        "diagnostic": is_diagnostic_editor(fields),
        "meta": BLOCK_TYPE_META.get(block.get("type"), {"label": block.get("type") or "Unknown"}),
        "field_value": field_form_value,
    })


@router.post("/sites/{site_id}/pages/{page_id}/blocks/{index}")
async def block_edit_submit(
    site_id: str,
    page_id: str,
    index: int,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    existing = _block_at(db, site_id, page_id, index)
    form = await request.form()
    try:
        block = parse_block_form(editor_for(existing.get("type")), form, existing)
    except FormError as e:
        flash(request, f"Failed to save block: {e}", "error")
        return _redirect(f"{_editor_url(site_id, page_id)}/blocks/{index}")
    if _mutate(request, db, "Block saved", "Failed to save block", site_service.update_block,
               site_id=site_id, page_id=page_id, index=index, block=block):
        return _redirect(_editor_url(site_id, page_id))
    return _redirect(f"{_editor_url(site_id, page_id)}/blocks/{index}")


# --------------------------- Navigation / footer ---------------------------
@router.get("/sites/{site_id}/navigation")
def navigation_form(site_id: str, request: Request, db: Session = Depends(get_db), user: User = Depends(web_user)):
    site = _site_for(db, user, site_id)
    navigation = site_service.get_navigation(db, site_id=site_id)
    return _render(request, "cms/document_edit.html", {
        "site": site,
        "title": "Navigation",
        "action": f"/cms/sites/{site_id}/navigation",
        "document": navigation,
    })


@router.post("/sites/{site_id}/navigation")
def navigation_save(
    site_id: str,
    request: Request,
    document: str = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)

    def _save(db: Session, **kw):
        site_service.update_navigation(db, site_id=site_id, navigation=parse_json_document(document, "Navigation"))

    _mutate(request, db, "Navigation saved", "Failed to save navigation", _save)
    return _redirect(f"/cms/sites/{site_id}/navigation")


@router.get("/sites/{site_id}/footer")
def footer_form(site_id: str, request: Request, db: Session = Depends(get_db), user: User = Depends(web_user)):
    site = _site_for(db, user, site_id)
    footer = site_service.get_footer(db, site_id=site_id) or {}
    return _render(request, "cms/document_edit.html", {
        "site": site,
        "title": "Footer",
        "action": f"/cms/sites/{site_id}/footer",
        "document": footer,
    })


@router.post("/sites/{site_id}/footer")
def footer_save(
    site_id: str,
    request: Request,
    document: str = Form(...),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)

    def _save(db: Session, **kw):
        site_service.update_footer(db, site_id=site_id, footer=parse_json_document(document, "Footer"))

    _mutate(request, db, "Footer saved", "Failed to save footer", _save)
    return _redirect(f"/cms/sites/{site_id}/footer")


# --------------------------- Site settings ---------------------------
@router.get("/sites/{site_id}/settings")
def settings_form(site_id: str, request: Request, db: Session = Depends(get_db), user: User = Depends(web_user)):
    site = _site_for(db, user, site_id)
    return _render(request, "cms/settings.html", {"site": site, "theme": site.theme or {}})


@router.post("/sites/{site_id}/settings")
def settings_save(
    site_id: str,
    request: Request,
    name: str = Form(...),
    tagline: Optional[str] = Form(None),
    domain: Optional[str] = Form(None),
    primary_color: Optional[str] = Form(None),
    secondary_color: Optional[str] = Form(None),
    font_family: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    user: User = Depends(web_user),
):
    _site_for(db, user, site_id)
    # a blank input removes that theme key
    theme = {
        k: (v or "").strip() or None
        for k, v in (("primaryColor", primary_color), ("secondaryColor", secondary_color), ("fontFamily", font_family))
    }
    data = {
        "name": name.strip(),
        "tagline": (tagline or "").strip() or None,
        "domain": (domain or "").strip() or None,
        "theme": theme,
    }
    _mutate(request, db, "Settings saved", "Failed to save settings", site_service.update_site,
            site_id=site_id, data=data)
    return _redirect(f"/cms/sites/{site_id}/settings")
