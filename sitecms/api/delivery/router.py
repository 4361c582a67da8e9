#  sitecms/api/delivery/router.py
# Public, read-only JSON for headless front ends. Only published pages.
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response
from sqlalchemy.orm import Session

from sitecms.db.session import get_db
from sitecms.models.site import Page, Site
from sitecms.services import site_service
from sitecms.services.cache_headers import (
    apply_delivery_cache_headers,
    compute_etag_from_bytes,
    etag_matches,
    parse_httpdate,
    to_utc_seconds,
)
from sitecms.utils.page_ids import is_valid_page_id, resolve_page_id

router = APIRouter(prefix="/delivery/v1", tags=["Delivery"])


def _conditional_json(
    payload: Any,
    *,
    if_none_match: Optional[str],
    if_modified_since: Optional[str] = None,
    last_modified: Optional[datetime],
    is_page: bool,
) -> Response:
    """
    200 with ETag, or 304 when the client's validator still matches.
    If-None-Match wins over If-Modified-Since when both are sent.
    """
    body_bytes = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    etag = compute_etag_from_bytes(body_bytes)
    last_modified = to_utc_seconds(last_modified)

    if if_none_match:
        not_modified = etag_matches(if_none_match, etag)
    else:
        since = parse_httpdate(if_modified_since) if if_modified_since else None
        not_modified = bool(since and last_modified and last_modified <= since)

    if not_modified:
        resp = Response(status_code=304)
    else:
        resp = Response(content=body_bytes, media_type="application/json")
    apply_delivery_cache_headers(resp, etag=etag, last_modified=last_modified, is_page=is_page)
    return resp


def _published_page(db: Session, site_id: str, page_id: str) -> Page:
    if not is_valid_page_id(page_id):
        raise HTTPException(status_code=400, detail=f"Invalid page id: {page_id!r}")
    page = site_service.find_page(db, site_id=site_id, page_id=page_id)
    if page is None or not page.is_published:
        raise HTTPException(status_code=404, detail="Page not found or not published")
    return page


# declared before /pages/{page_id} so "resolve" is not read as a page id
@router.get("/sites/{site_id}/pages/resolve", summary="Resolve a URL path to a published page")
def resolve_page(
    site_id: str,
    path: str = Query("/", description="URL path, e.g. / or /about"),
    db: Session = Depends(get_db),
    if_none_match: str | None = Header(default=None, alias="If-None-Match"),
    if_modified_since: str | None = Header(default=None, alias="If-Modified-Since"),
):
    page = _published_page(db, site_id, resolve_page_id(path))
    return _conditional_json(
        site_service.page_document(page),
        if_none_match=if_none_match,
        if_modified_since=if_modified_since,
        last_modified=page.updated_at,
        is_page=True,
    )


@router.get("/sites/{site_id}/pages/{page_id}", summary="Published page by id")
def get_page(
    site_id: str,
    page_id: str,
    db: Session = Depends(get_db),
    if_none_match: str | None = Header(default=None, alias="If-None-Match"),
    if_modified_since: str | None = Header(default=None, alias="If-Modified-Since"),
):
    page = _published_page(db, site_id, page_id)
    return _conditional_json(
        site_service.page_document(page),
        if_none_match=if_none_match,
        if_modified_since=if_modified_since,
        last_modified=page.updated_at,
        is_page=True,
    )


@router.get("/sites/{site_id}/navigation")
def get_navigation(
    site_id: str,
    db: Session = Depends(get_db),
    if_none_match: str | None = Header(default=None, alias="If-None-Match"),
):
    if db.get(Site, site_id) is None:
        raise HTTPException(status_code=404, detail="Site not found")
    return _conditional_json(
        site_service.get_navigation(db, site_id=site_id),
        if_none_match=if_none_match,
        last_modified=None,
        is_page=False,
    )


@router.get("/sites/{site_id}/footer")
def get_footer(
    site_id: str,
    db: Session = Depends(get_db),
    if_none_match: str | None = Header(default=None, alias="If-None-Match"),
):
    footer = site_service.get_footer(db, site_id=site_id)
    if footer is None:
        raise HTTPException(status_code=404, detail="Footer not found")
    return _conditional_json(
        footer,
        if_none_match=if_none_match,
        last_modified=None,
        is_page=False,
    )
