# sitecms/api/v1/auth.py
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Response
from pydantic import BaseModel, EmailStr
from sqlalchemy import select
from sqlalchemy.orm import Session

from sitecms.db.session import get_db
from sitecms.deps.auth import get_current_user, user_from_token
from sitecms.models.auth import User
from sitecms.security.jwt import create_access_token, create_refresh_token
from sitecms.services.passwords import verify_password

router = APIRouter(tags=["auth"])  # prefix set in api/v1/router.py


# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------
class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshIn(BaseModel):
    refresh_token: str


class MeOut(BaseModel):
    id: int
    email: EmailStr
    full_name: Optional[str] = None
    is_superadmin: bool
    sites: list[dict]
    tenant_ids: list[str]


def _tokens_for(user: User) -> TokenOut:
    extra = {"email": user.email, "is_superadmin": user.is_superadmin}
    return TokenOut(
        access_token=create_access_token(user.id, extra),
        refresh_token=create_refresh_token(user.id, extra),
    )


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Shared by the JSON login and the CMS login form."""
    user = db.scalar(select(User).where(User.email == email.lower()))
    if not user or not verify_password(password, user.hashed_password or ""):
        return None
    return user


# ---------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------
@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User inactive")
    return _tokens_for(user)


@router.post("/refresh", response_model=TokenOut)
def refresh(body: RefreshIn, db: Session = Depends(get_db)):
    user = user_from_token(db, body.refresh_token, expected_type="refresh")
    return _tokens_for(user)


@router.get("/me", response_model=MeOut)
def me(current_user: User = Depends(get_current_user)):
    return MeOut(
        id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        is_superadmin=current_user.is_superadmin,
        sites=[{"site_id": m.site_id, "role": m.role.value} for m in current_user.sites],
        tenant_ids=list(current_user.tenant_ids or []),
    )


@router.post("/logout", status_code=204)
def logout(_: Response):
    # JWT stateless: client-side logout
    return Response(status_code=204)
