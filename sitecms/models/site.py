# sitecms/models/site.py
# Site documents: sites/{siteId}, sites/{siteId}/pages/{pageId} and the
# singleton documents (navigation/main, components/footer, pageIndex/main).
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sitecms.db.base import Base, JSONDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Site(Base):
    __tablename__ = "sites"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(160))
    tagline: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    domain: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    theme: Mapped[Optional[dict]] = mapped_column(JSONDocument, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    pages: Mapped[list["Page"]] = relationship(
        "Page", back_populates="site", cascade="all, delete-orphan"
    )
    documents: Mapped[list["SiteDocument"]] = relationship(
        "SiteDocument", back_populates="site", cascade="all, delete-orphan"
    )


class Page(Base):
    __tablename__ = "pages"

    site_id: Mapped[str] = mapped_column(ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True)
    id: Mapped[str] = mapped_column(String(100), primary_key=True)  # document id == URL slug ("home" is "/")

    title: Mapped[str] = mapped_column(String(255), default="")
    slug: Mapped[str] = mapped_column(String(100), default="")
    description: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    # ordered block documents; always written back as a whole array
    blocks: Mapped[list] = mapped_column(JSONDocument, default=list)

    order: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    site: Mapped["Site"] = relationship("Site", back_populates="pages")

    __table_args__ = (
        Index("ix_pages_site_order", "site_id", "order"),
    )


class SiteDocument(Base):
    """Singleton documents keyed by their conceptual path under a site."""
    __tablename__ = "site_documents"

    site_id: Mapped[str] = mapped_column(ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True)
    collection: Mapped[str] = mapped_column(String(64), primary_key=True)   # "navigation" | "components" | "pageIndex"
    doc_id: Mapped[str] = mapped_column(String(64), primary_key=True)       # "main" | "footer"
    data: Mapped[dict] = mapped_column(JSONDocument, default=dict)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    site: Mapped["Site"] = relationship("Site", back_populates="documents")
