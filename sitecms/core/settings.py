# sitecms/core/settings.py
from __future__ import annotations

import os, json
from typing import List, Union
from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# DATABASE_URL prefixes rewritten to the installed driver (psycopg2-binary)
_PG_PREFIXES = ("postgres://", "postgresql://", "postgresql+psycopg://")
_PG_DRIVER = "postgresql+psycopg2://"


def _split_list(raw: str) -> List[str]:
    """'[a,b]' or 'a,b' -> ['a', 'b'] (quotes stripped)."""
    s = raw.strip()
    if s.startswith("[") and s.endswith("]"):
        s = s[1:-1]
    return [item.strip().strip('"').strip("'") for item in s.split(",") if item.strip()]


class Settings(BaseSettings):
    # ============== App / API ==============
    APP_NAME: str = "SiteCMS"
    API_V1_STR: str = "/api/v1"
    ENV: str = "dev"
    DEBUG: bool = True

    # ============== Public site ==============
    # the site whose pages "/", "/about", ... render
    SITE_ID: str = os.getenv("SITE_ID", "demo-site")

    # ============== Auth / JWT =============
    JWT_SECRET_KEY: str = "dev-secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60)
    JWT_REFRESH_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7)

    @property
    def ACCESS_MIN(self) -> int:
        return int(self.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    @property
    def REFRESH_MIN(self) -> int:
        return int(self.JWT_REFRESH_TOKEN_EXPIRE_MINUTES)

    # ================== DB ==================
    DATABASE_URL: str

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        Heroku hands out postgres://...; SQLAlchemy needs the explicit
        postgresql+psycopg2:// driver. SQLite URLs pass through untouched.
        """
        url = self.DATABASE_URL or ""
        for prefix in _PG_PREFIXES:
            if url.startswith(prefix):
                return _PG_DRIVER + url[len(prefix):]
        return url

    # ================= CORS =================
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        """JSON list, bracketed list without quotes, or plain CSV."""
        if v in (None, "", [], ()):
            return []
        if isinstance(v, (list, tuple)):
            return list(v)
        if not isinstance(v, str):
            return v
        try:
            parsed = json.loads(v)
        except ValueError:
            return _split_list(v)
        return parsed if isinstance(parsed, list) else _split_list(v)

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [str(x) for x in (self.BACKEND_CORS_ORIGINS or [])]

    # ====== Delivery caching (seconds) ======
    DELIVERY_PAGE_MAX_AGE: int = 300
    DELIVERY_PAGE_STALE_WHILE_REVALIDATE: int = 600
    # navigation / footer
    DELIVERY_CHROME_MAX_AGE: int = 60
    DELIVERY_CHROME_STALE_WHILE_REVALIDATE: int = 120

    # ====== Payload size ======
    MAX_PAGE_DATA_KB: int = int(os.getenv("MAX_PAGE_DATA_KB", "512"))

    # ====== Uploads (Firebase Storage) ======
    FIREBASE_CREDENTIALS_PATH: str | None = os.getenv("FIREBASE_CREDENTIALS_PATH")
    FIREBASE_STORAGE_BUCKET: str | None = os.getenv("FIREBASE_STORAGE_BUCKET")
    UPLOAD_MAX_MB: int = int(os.getenv("UPLOAD_MAX_MB", "10"))

    # ======== Session cookies (CMS web) ========
    SESSION_COOKIE_NAME: str = "sitecms_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: str = "lax"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
