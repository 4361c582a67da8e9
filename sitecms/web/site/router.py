# sitecms/web/site/router.py
# Public HTML site for settings.SITE_ID. Every route resolves its page id
# through resolve_page_id; there is no other URL -> page mapping.
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from sitecms.blocks.normalize import normalize_blocks
from sitecms.core.settings import settings
from sitecms.db.session import get_db
from sitecms.models.site import Site
from sitecms.services import site_service
from sitecms.utils.page_ids import HOME_PAGE_ID, is_valid_page_id, resolve_page_id
from sitecms.web.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)

NAMED_PATHS = ("/about", "/programs", "/schedule", "/gallery", "/contact")


def _chrome(db: Session, site: Site) -> dict:
    """Header navigation and footer shared by every public page."""
    return {
        "site": site,
        "navigation": site_service.get_navigation(db, site_id=site.id),
        "footer": site_service.get_footer(db, site_id=site.id),
    }


def render_site_path(request: Request, db: Session, path: str):
    site = db.get(Site, settings.SITE_ID)
    if site is None:
        logger.error("configured SITE_ID %r does not exist", settings.SITE_ID)
        return templates.TemplateResponse(
            request, "site/not_found.html", {"site": None, "navigation": {"items": []}, "footer": None, "page_id": ""},
            status_code=404,
        )

    page_id = resolve_page_id(path)
    ctx = {**_chrome(db, site), "page_id": page_id}

    if not is_valid_page_id(page_id):
        return templates.TemplateResponse(request, "site/invalid.html", ctx, status_code=400)

    page = site_service.find_page(db, site_id=site.id, page_id=page_id)
    if page is None or not page.is_published:
        return templates.TemplateResponse(request, "site/not_found.html", ctx, status_code=404)

    ctx.update(page=page, blocks=normalize_blocks(page.blocks))
    return templates.TemplateResponse(request, "site/page.html", ctx)


@router.get("/")
def home(request: Request, db: Session = Depends(get_db)):
    return render_site_path(request, db, "/")


@router.get(f"/{HOME_PAGE_ID}")
def home_alias(request: Request):
    # "/" is the only canonical path for the home page
    return RedirectResponse(url="/", status_code=301)


def _named_route(path: str):
    def endpoint(request: Request, db: Session = Depends(get_db)):
        return render_site_path(request, db, path)
    endpoint.__name__ = f"site_{path.strip('/')}"
    return endpoint


for _path in NAMED_PATHS:
    router.add_api_route(_path, _named_route(_path), methods=["GET"])


# registered last in main.py so it never shadows /cms, /api, /delivery
@router.get("/{page_path:path}")
def any_page(page_path: str, request: Request, db: Session = Depends(get_db)):
    return render_site_path(request, db, page_path)
