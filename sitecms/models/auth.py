from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import (
    String, Integer, Boolean, DateTime, ForeignKey, Enum as SQLEnum,
    UniqueConstraint, Index
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sitecms.db.base import Base, JSONDocument
from sitecms.models.site import Site


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str | None] = mapped_column(String(160), default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_superadmin: Mapped[bool] = mapped_column(Boolean, default=False)
    # legacy sections model: tenants this user may edit
    tenant_ids: Mapped[list] = mapped_column(JSONDocument, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    sites: Mapped[list[SiteMember]] = relationship("SiteMember", back_populates="user", cascade="all, delete-orphan")


class SiteRole(str, Enum):
    owner = "owner"
    editor = "editor"


class SiteMember(Base):
    __tablename__ = "site_members"
    __table_args__ = (
        UniqueConstraint("user_id", "site_id", name="uq_site_member"),
        Index("ix_site_member_site_id", "site_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    site_id: Mapped[str] = mapped_column(ForeignKey("sites.id", ondelete="CASCADE"))
    role: Mapped[SiteRole] = mapped_column(SQLEnum(SiteRole, native_enum=False), default=SiteRole.editor)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    user: Mapped[User] = relationship("User", back_populates="sites")
    site: Mapped[Site] = relationship(Site, passive_deletes=True)
