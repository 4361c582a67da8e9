# sitecms/services/site_service.py
# Sites, pages and their blocks; navigation, footer and page index singletons.
#
# Functions flush but never commit: the caller (endpoint / web route) owns the
# transaction. Block edits re-fetch the page, run a pure ordering helper and
# write the whole array back.
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from sitecms.blocks import ordering
from sitecms.blocks.defaults import default_block, generate_id
from sitecms.blocks.normalize import normalize_blocks
from sitecms.blocks.types import validate_block_document
from sitecms.errors import ConflictError, InvalidPageIdError, NotFoundError, SiteCMSError
from sitecms.models.auth import SiteMember, User
from sitecms.models.site import Page, Site, SiteDocument
from sitecms.schemas.site import Footer, Navigation
from sitecms.utils.page_ids import is_valid_page_id, resolve_page_path

logger = logging.getLogger(__name__)

# (collection, doc_id) of the per-site singleton documents
NAVIGATION_DOC = ("navigation", "main")
FOOTER_DOC = ("components", "footer")
PAGE_INDEX_DOC = ("pageIndex", "main")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


# -------- Serialization --------
def site_document(site: Site) -> Dict[str, Any]:
    return {
        "id": site.id,
        "name": site.name,
        "tagline": site.tagline,
        "domain": site.domain,
        "theme": site.theme,
        "createdAt": _iso(site.created_at),
        "updatedAt": _iso(site.updated_at),
    }


def page_document(page: Page) -> Dict[str, Any]:
    """Page as served to clients; stored blocks are normalized on read."""
    return {
        "id": page.id,
        "siteId": page.site_id,
        "title": page.title,
        "slug": page.slug,
        "description": page.description,
        "blocks": normalize_blocks(page.blocks),
        "order": page.order,
        "isPublished": bool(page.is_published),
        "updatedAt": _iso(page.updated_at),
    }


def _clean_blocks(blocks: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Validates each block document and renumbers `order`."""
    return ordering.compact_order([validate_block_document(b) for b in blocks])


# -------- Sites --------
def list_sites(db: Session) -> List[Site]:
    return list(db.scalars(select(Site).order_by(Site.name, Site.id)))


def list_sites_for_user(db: Session, *, user: User) -> List[Site]:
    if user.is_superadmin:
        return list_sites(db)
    stmt = (
        select(Site)
        .join(SiteMember, SiteMember.site_id == Site.id)
        .where(SiteMember.user_id == user.id)
        .order_by(Site.name, Site.id)
    )
    return list(db.scalars(stmt))


def user_can_edit_site(db: Session, *, user: User, site_id: str) -> bool:
    if user.is_superadmin:
        return True
    member = db.scalar(
        select(SiteMember).where(and_(SiteMember.user_id == user.id, SiteMember.site_id == site_id))
    )
    return member is not None


def get_site(db: Session, *, site_id: str) -> Site:
    site = db.get(Site, site_id)
    if site is None:
        raise NotFoundError("Site", site_id)
    return site


def create_site(
    db: Session,
    *,
    site_id: str,
    name: str,
    tagline: Optional[str] = None,
    domain: Optional[str] = None,
    theme: Optional[dict] = None,
) -> Site:
    if not is_valid_page_id(site_id):
        raise SiteCMSError(f"Invalid site id: {site_id!r}")
    if db.get(Site, site_id) is not None:
        raise ConflictError("Site", site_id)
    site = Site(id=site_id, name=name, tagline=tagline, domain=domain, theme=theme)
    db.add(site)
    db.flush()
    logger.info("site created site=%s", site_id)
    return site


# columns that cannot be cleared; a None in a merge write leaves them untouched
_REQUIRED_SITE_KEYS = ("name",)
_REQUIRED_PAGE_KEYS = ("title", "is_published")


def _merge_theme(current: Optional[Dict[str, Any]], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Key-by-key merge; a key whose new value is None is removed."""
    merged = {**(current or {}), **updates}
    return {k: v for k, v in merged.items() if v is not None}


def update_site(db: Session, *, site_id: str, data: Dict[str, Any]) -> Site:
    """Merge write: only keys present in `data` change; theme is merged key by key."""
    site = get_site(db, site_id=site_id)
    for key in ("name", "tagline", "domain"):
        if key not in data:
            continue
        if data[key] is None and key in _REQUIRED_SITE_KEYS:
            continue
        setattr(site, key, data[key])
    if "theme" in data:
        theme = data["theme"]
        site.theme = None if theme is None else _merge_theme(site.theme, theme)
    site.updated_at = _utcnow()
    db.flush()
    return site


# -------- Pages --------
def list_pages(db: Session, *, site_id: str) -> List[Page]:
    get_site(db, site_id=site_id)
    stmt = (
        select(Page)
        .where(Page.site_id == site_id)
        .order_by(Page.order.is_(None), Page.order, Page.id)
    )
    return list(db.scalars(stmt))


def find_page(db: Session, *, site_id: str, page_id: str) -> Optional[Page]:
    return db.get(Page, (site_id, page_id))


def get_page(db: Session, *, site_id: str, page_id: str) -> Page:
    if not is_valid_page_id(page_id):
        raise InvalidPageIdError(page_id)
    page = find_page(db, site_id=site_id, page_id=page_id)
    if page is None:
        raise NotFoundError("Page", f"{site_id}/{page_id}")
    return page


_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def _slugify(text: str) -> str:
    return _SLUG_STRIP.sub("-", (text or "").lower()).strip("-")[:80]


def _generate_page_id(db: Session, site_id: str, title: str) -> str:
    base = _slugify(title)
    if not base:
        return generate_id()
    candidate = base
    n = 2
    while find_page(db, site_id=site_id, page_id=candidate) is not None:
        candidate = f"{base}-{n}"
        n += 1
    return candidate


def create_page(
    db: Session,
    *,
    site_id: str,
    title: str,
    page_id: Optional[str] = None,
    slug: Optional[str] = None,
    description: Optional[str] = None,
    blocks: Optional[Sequence[Dict[str, Any]]] = None,
    order: Optional[int] = None,
    is_published: bool = True,
) -> Page:
    get_site(db, site_id=site_id)
    if page_id is None:
        page_id = _generate_page_id(db, site_id, title)
    elif not is_valid_page_id(page_id):
        raise InvalidPageIdError(page_id)
    if find_page(db, site_id=site_id, page_id=page_id) is not None:
        raise ConflictError("Page", f"{site_id}/{page_id}")

    if order is None:
        order = len(list_pages(db, site_id=site_id))
    page = Page(
        site_id=site_id,
        id=page_id,
        title=title,
        slug=slug or page_id,
        description=description,
        blocks=_clean_blocks(blocks or []),
        order=order,
        is_published=is_published,
        updated_at=_utcnow(),
    )
    db.add(page)
    db.flush()
    rebuild_page_index(db, site_id=site_id)
    logger.info("page created site=%s page=%s", site_id, page_id)
    return page


def save_page_by_id(
    db: Session,
    *,
    site_id: str,
    page_id: str,
    title: str,
    blocks: Sequence[Dict[str, Any]],
) -> Page:
    """Deterministic-id write of title + blocks; creates the page when missing."""
    if not is_valid_page_id(page_id):
        raise InvalidPageIdError(page_id)
    page = find_page(db, site_id=site_id, page_id=page_id)
    if page is None:
        return create_page(db, site_id=site_id, page_id=page_id, title=title, blocks=blocks)
    page.title = title
    page.blocks = _clean_blocks(blocks)
    page.updated_at = _utcnow()
    db.flush()
    rebuild_page_index(db, site_id=site_id)
    logger.info("page saved site=%s page=%s blocks=%d", site_id, page_id, len(page.blocks))
    return page


def update_page(db: Session, *, site_id: str, page_id: str, data: Dict[str, Any]) -> Page:
    """Merge write of page metadata. Blocks go through the block helpers."""
    page = get_page(db, site_id=site_id, page_id=page_id)
    for key in ("title", "slug", "description", "order", "is_published"):
        if key not in data:
            continue
        if data[key] is None and key in _REQUIRED_PAGE_KEYS:
            continue
        setattr(page, key, data[key])
    page.updated_at = _utcnow()
    db.flush()
    if {"title", "order"} & set(data):
        rebuild_page_index(db, site_id=site_id)
    return page


def delete_page(db: Session, *, site_id: str, page_id: str) -> None:
    page = get_page(db, site_id=site_id, page_id=page_id)
    db.delete(page)
    db.flush()
    rebuild_page_index(db, site_id=site_id)
    logger.info("page deleted site=%s page=%s", site_id, page_id)


# -------- Blocks --------
def _page_blocks(page: Page) -> List[Dict[str, Any]]:
    return normalize_blocks(page.blocks)


def _write_blocks(page: Page, blocks: List[Dict[str, Any]]) -> None:
    # always assign a new list so the JSON column is marked dirty
    page.blocks = list(blocks)
    page.updated_at = _utcnow()


def update_page_blocks(db: Session, *, site_id: str, page_id: str, blocks: Sequence[Dict[str, Any]]) -> Page:
    """Full overwrite of the blocks array."""
    page = get_page(db, site_id=site_id, page_id=page_id)
    _write_blocks(page, _clean_blocks(blocks))
    db.flush()
    logger.info("blocks replaced site=%s page=%s count=%d", site_id, page_id, len(page.blocks))
    return page


def add_block(
    db: Session,
    *,
    site_id: str,
    page_id: str,
    block: Dict[str, Any],
    position: Optional[int] = None,
) -> Page:
    page = get_page(db, site_id=site_id, page_id=page_id)
    new_block = validate_block_document({**block, "id": block.get("id") or generate_id()})
    _write_blocks(page, ordering.insert_block(_page_blocks(page), new_block, position))
    db.flush()
    logger.info("block added site=%s page=%s type=%s position=%s", site_id, page_id, new_block.get("type"), position)
    return page


def add_default_block(
    db: Session,
    *,
    site_id: str,
    page_id: str,
    block_type: str,
    position: Optional[int] = None,
) -> Page:
    return add_block(db, site_id=site_id, page_id=page_id, block=default_block(block_type), position=position)


def update_block(db: Session, *, site_id: str, page_id: str, index: int, block: Dict[str, Any]) -> Page:
    page = get_page(db, site_id=site_id, page_id=page_id)
    updated = validate_block_document(block)
    _write_blocks(page, ordering.replace_block(_page_blocks(page), index, updated))
    db.flush()
    logger.info("block updated site=%s page=%s index=%d", site_id, page_id, index)
    return page


def remove_block(db: Session, *, site_id: str, page_id: str, index: int) -> Page:
    page = get_page(db, site_id=site_id, page_id=page_id)
    _write_blocks(page, ordering.remove_block(_page_blocks(page), index))
    db.flush()
    logger.info("block removed site=%s page=%s index=%d", site_id, page_id, index)
    return page


def reorder_blocks(db: Session, *, site_id: str, page_id: str, from_index: int, to_index: int) -> Page:
    page = get_page(db, site_id=site_id, page_id=page_id)
    _write_blocks(page, ordering.reorder_blocks(_page_blocks(page), from_index, to_index))
    db.flush()
    logger.info("blocks reordered site=%s page=%s %d->%d", site_id, page_id, from_index, to_index)
    return page


def move_block(db: Session, *, site_id: str, page_id: str, index: int, direction: str) -> Page:
    page = get_page(db, site_id=site_id, page_id=page_id)
    _write_blocks(page, ordering.move_block(_page_blocks(page), index, direction))
    db.flush()
    return page


# -------- Singleton documents --------
def _get_doc(db: Session, site_id: str, key: tuple[str, str]) -> Optional[SiteDocument]:
    collection, doc_id = key
    return db.get(SiteDocument, (site_id, collection, doc_id))


def _put_doc(db: Session, site_id: str, key: tuple[str, str], data: Dict[str, Any]) -> SiteDocument:
    """Overwrite (setDoc without merge)."""
    collection, doc_id = key
    doc = _get_doc(db, site_id, key)
    if doc is None:
        doc = SiteDocument(site_id=site_id, collection=collection, doc_id=doc_id)
        db.add(doc)
    doc.data = dict(data)
    doc.updated_at = _utcnow()
    db.flush()
    return doc


def get_navigation(db: Session, *, site_id: str) -> Dict[str, Any]:
    doc = _get_doc(db, site_id, NAVIGATION_DOC)
    if doc is None:
        return {"items": []}
    return Navigation.model_validate(doc.data).to_document()


def update_navigation(db: Session, *, site_id: str, navigation: Dict[str, Any]) -> Dict[str, Any]:
    get_site(db, site_id=site_id)
    data = Navigation.model_validate(navigation).to_document()
    _put_doc(db, site_id, NAVIGATION_DOC, data)
    return data


def get_footer(db: Session, *, site_id: str) -> Optional[Dict[str, Any]]:
    doc = _get_doc(db, site_id, FOOTER_DOC)
    if doc is None:
        return None
    return Footer.model_validate(doc.data).to_document()


def update_footer(db: Session, *, site_id: str, footer: Dict[str, Any]) -> Dict[str, Any]:
    get_site(db, site_id=site_id)
    data = Footer.model_validate(footer).to_document()
    _put_doc(db, site_id, FOOTER_DOC, data)
    return data


def _build_page_index(pages: Sequence[Page]) -> Dict[str, Any]:
    entries = []
    for i, p in enumerate(pages):
        entries.append({
            "id": p.id,
            "title": p.title,
            "path": resolve_page_path(p.id),
            "order": p.order if p.order is not None else i,
        })
    return {"pages": entries}


def get_page_index(db: Session, *, site_id: str) -> Dict[str, Any]:
    """Stored index, or one generated from the pages when none was written yet."""
    doc = _get_doc(db, site_id, PAGE_INDEX_DOC)
    if doc is not None:
        return doc.data
    return _build_page_index(list_pages(db, site_id=site_id))


def rebuild_page_index(db: Session, *, site_id: str) -> Dict[str, Any]:
    data = _build_page_index(list_pages(db, site_id=site_id))
    _put_doc(db, site_id, PAGE_INDEX_DOC, data)
    return data
