# sitecms/services/passwords.py
from __future__ import annotations

from passlib.context import CryptContext

# pbkdf2_sha256 is pure-python in passlib; seeds and fixtures hash with it too
_pwd = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


def hash_password(plain: str) -> str:
    return _pwd.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    if not hashed:
        return False
    return _pwd.verify(plain, hashed)
