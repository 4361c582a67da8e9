# sitecms/deps/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from sitecms.db.session import get_db
from sitecms.models.auth import User
from sitecms.security.jwt import decode_token
from sitecms.services.site_service import user_can_edit_site

# non-fatal if the header is missing; get_current_user answers 401
_bearer = HTTPBearer(auto_error=False)


def _load_user_from_sub(db: Session, sub: str | int | None) -> Optional[User]:
    try:
        uid = int(sub)
    except (TypeError, ValueError):
        return None
    user = db.get(User, uid)
    if not user or not user.is_active:
        return None
    return user


def user_from_token(db: Session, token: str, *, expected_type: str = "access") -> User:
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if payload.get("type") != expected_type:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong token type")

    user = _load_user_from_sub(db, payload.get("sub"))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user


def get_current_user(
    db: Session = Depends(get_db),
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> User:
    if not creds or not creds.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user_from_token(db, creds.credentials)


def require_superadmin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_superadmin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Superadmin only")
    return current_user


def require_site_access(
    site_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Usage: any route with a `{site_id}` path param.
    Superadmins bypass; everyone else needs a site_members row.
    """
    if not user_can_edit_site(db, user=current_user, site_id=site_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No access to this site")
    return current_user


def require_tenant_access(
    tenant_id: str,
    current_user: User = Depends(get_current_user),
) -> User:
    """Legacy sections model: access comes from the user's tenant_ids list."""
    if current_user.is_superadmin or tenant_id in (current_user.tenant_ids or []):
        return current_user
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No access to this tenant")
