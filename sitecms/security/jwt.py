# sitecms/security/jwt.py
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt

from sitecms.core.settings import settings

ALGO = settings.JWT_ALGORITHM or "HS256"
SECRET = settings.JWT_SECRET_KEY or "dev-secret"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _exp_ts(minutes: int) -> int:
    # exp as integer UNIX seconds
    return int((_utcnow() + timedelta(minutes=minutes)).timestamp())


def _create_token(subject: int | str, token_type: str, minutes: int, extra: Dict[str, Any] | None) -> str:
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "type": token_type,
        "iat": int(_utcnow().timestamp()),
        "exp": _exp_ts(minutes),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, SECRET, algorithm=ALGO)


def create_access_token(subject: int | str, extra: Dict[str, Any] | None = None) -> str:
    return _create_token(subject, "access", settings.ACCESS_MIN, extra)


def create_refresh_token(subject: int | str, extra: Dict[str, Any] | None = None) -> str:
    return _create_token(subject, "refresh", settings.REFRESH_MIN, extra)


def decode_token(token: str) -> Dict[str, Any]:
    """Raises jose.JWTError (or ExpiredSignatureError); callers answer 401."""
    return jwt.decode(
        token,
        SECRET,
        algorithms=[ALGO],
        options={"verify_aud": False, "verify_iss": False},
    )
