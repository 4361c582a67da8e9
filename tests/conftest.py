# tests/conftest.py
from __future__ import annotations

import os

# settings are read at import time; the app must never reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.pop("FIREBASE_CREDENTIALS_PATH", None)
os.environ.pop("FIREBASE_STORAGE_BUCKET", None)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from sitecms.core.settings import settings
from sitecms.db.base import Base
from sitecms.db.session import get_db
from sitecms.models import auth as _auth_models  # noqa: F401
from sitecms.models import legacy as _legacy_models  # noqa: F401
from sitecms.models.auth import SiteMember, SiteRole, User
from sitecms.models.site import Site
from sitecms.security.jwt import create_access_token
from sitecms.services.passwords import hash_password

# one in-memory SQLite database shared by every connection of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db() -> Session:
    """Fresh schema per test; endpoints commit through this same session."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _override_get_db(db: Session):
    """
    Every request in a test uses the test's session.
    """
    from sitecms.main import app  # late import to avoid cycles

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


def _mk_user(db: Session, email: str, *, superadmin: bool = False, tenant_ids=None) -> User:
    u = User(
        email=email,
        full_name=email.split("@")[0].title(),
        hashed_password=hash_password(PASSWORD),
        is_active=True,
        is_superadmin=superadmin,
        tenant_ids=list(tenant_ids or []),
    )
    db.add(u)
    db.flush()
    return u


@pytest.fixture()
def superadmin(db: Session) -> User:
    u = _mk_user(db, "admin@example.com", superadmin=True)
    db.commit()
    return u


@pytest.fixture()
def editor(db: Session, site: Site) -> User:
    """Non-superadmin member of the demo site."""
    u = _mk_user(db, "editor@example.com")
    db.add(SiteMember(user_id=u.id, site_id=site.id, role=SiteRole.editor))
    db.commit()
    return u


@pytest.fixture()
def outsider(db: Session) -> User:
    """Non-superadmin with no site memberships."""
    u = _mk_user(db, "outsider@example.com")
    db.commit()
    return u


@pytest.fixture()
def site(db: Session) -> Site:
    s = Site(id=settings.SITE_ID, name="Demo Site", tagline="Just a demo", theme={"primaryColor": "#112233"})
    db.add(s)
    db.commit()
    return s


def _headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def admin_headers(superadmin: User) -> dict:
    return _headers(superadmin)


@pytest.fixture()
def editor_headers(editor: User) -> dict:
    return _headers(editor)


@pytest.fixture()
def outsider_headers(outsider: User) -> dict:
    return _headers(outsider)
