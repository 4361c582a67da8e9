# sitecms/web/auth/router.py
from __future__ import annotations

from fastapi import APIRouter, Request, Depends, Form, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from sitecms.api.v1.auth import authenticate
from sitecms.db.session import get_db
from sitecms.web.templating import templates

router = APIRouter(include_in_schema=False)

# Session keys (must match cms router)
SESSION_USER_KEY = "user"

DEFAULT_NEXT = "/cms/sites"


def _safe_next(next_url: str | None) -> str:
    # only relative paths; "//host" would leave the site
    target = next_url or DEFAULT_NEXT
    if not target.startswith("/") or target.startswith("//"):
        return DEFAULT_NEXT
    return target


@router.get("/login")
def login_get(request: Request, next: str | None = Query(default=None)):
    if request.session.get(SESSION_USER_KEY):
        return RedirectResponse(url=_safe_next(next), status_code=302)
    return templates.TemplateResponse(request, "auth/login.html", {"next": next or ""})


@router.post("/login")
def login_post(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    next: str | None = Form(default=None),
    db: Session = Depends(get_db),
):
    user = authenticate(db, (email or "").strip(), password or "")
    if not user or not user.is_active:
        ctx = {"error": "Invalid credentials or inactive user.", "next": next or ""}
        return templates.TemplateResponse(request, "auth/login.html", ctx, status_code=401)

    # compact web-session user
    request.session[SESSION_USER_KEY] = {
        "id": int(user.id),
        "email": user.email,
        "is_superadmin": bool(user.is_superadmin),
        "full_name": user.full_name or "",
    }
    return RedirectResponse(url=_safe_next(next), status_code=302)


@router.post("/logout")
def logout_post(request: Request):
    request.session.clear()
    return RedirectResponse(url="/login", status_code=302)


@router.get("/logout")
def logout_get(request: Request):
    request.session.clear()
    return RedirectResponse(url="/login", status_code=302)
