# sitecms/services/cache_headers.py
# ETag / Last-Modified / Cache-Control helpers for the delivery API
from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from fastapi import Response

from sitecms.core.settings import settings


def compute_etag_from_bytes(body: bytes) -> str:
    """Quoted sha256 hex of the response body."""
    return '"' + hashlib.sha256(body).hexdigest() + '"'


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    if not if_none_match:
        return False
    if if_none_match.strip() == "*":
        return True
    candidates = [c.strip() for c in if_none_match.split(",")]
    # weak validators compare equal for GET
    return any(c.removeprefix("W/") == etag for c in candidates)


def _to_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_utc_seconds(dt: datetime | None) -> datetime | None:
    if not dt:
        return None
    return _to_utc(dt).replace(microsecond=0)


def httpdate(dt: datetime) -> str:
    """RFC 7231 HTTP-date."""
    return format_datetime(_to_utc(dt), usegmt=True)


def parse_httpdate(value: str) -> datetime | None:
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if dt is None:
        return None
    return _to_utc(dt)


def cache_policy(*, is_page: bool) -> dict[str, str]:
    if is_page:
        max_age = settings.DELIVERY_PAGE_MAX_AGE
        swr = settings.DELIVERY_PAGE_STALE_WHILE_REVALIDATE
    else:
        # navigation / footer change rarely but must show up quickly after a save
        max_age = settings.DELIVERY_CHROME_MAX_AGE
        swr = settings.DELIVERY_CHROME_STALE_WHILE_REVALIDATE
    return {"Cache-Control": f"public, max-age={max_age}, stale-while-revalidate={swr}"}


def apply_delivery_cache_headers(
    resp: Response,
    *,
    etag: str | None,
    last_modified: datetime | None,
    is_page: bool,
) -> None:
    if etag:
        resp.headers["ETag"] = etag
    if last_modified:
        resp.headers["Last-Modified"] = httpdate(last_modified)
    for k, v in cache_policy(is_page=is_page).items():
        resp.headers[k] = v
