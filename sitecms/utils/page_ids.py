# sitecms/utils/page_ids.py
"""
URL path <-> page document id mapping.

Every place that derives a page id from a URL goes through these helpers:

    "/" or ""     -> "home"
    "/about"      -> "about"
    "/programs/"  -> "programs"

"/" is the only path that maps to "home", and "home" is the only id that
maps back to "/". There is no fallback: an id that does not exist simply
fails the document lookup downstream.
"""
from __future__ import annotations

HOME_PAGE_ID = "home"
MAX_PAGE_ID_LENGTH = 100


def resolve_page_id(path: str) -> str:
    route = (path or "").strip("/")
    if route == "":
        return HOME_PAGE_ID
    return route


def resolve_page_path(page_id: str) -> str:
    if page_id == HOME_PAGE_ID:
        return "/"
    return f"/{page_id}"


def is_valid_page_id(page_id: str) -> bool:
    """True when `page_id` can be used as a document id."""
    if not page_id:
        return False
    if "/" in page_id:
        return False
    if page_id.startswith("."):
        return False
    if len(page_id) > MAX_PAGE_ID_LENGTH:
        return False
    return True
