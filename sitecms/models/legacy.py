# sitecms/models/legacy.py
# Single-tenant "sections" model: tenants/{tenantId}/content/{sectionId}
from __future__ import annotations
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sitecms.db.base import Base, JSONDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(160))
    domain: Mapped[str] = mapped_column(String(255))
    # section ids this tenant may edit, e.g. ["home", "about", "contact"]
    sections: Mapped[list] = mapped_column(JSONDocument, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    contents: Mapped[list["SectionContent"]] = relationship(
        "SectionContent", back_populates="tenant", cascade="all, delete-orphan"
    )


class SectionContent(Base):
    __tablename__ = "section_contents"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    section_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict] = mapped_column(JSONDocument, default=dict)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="contents")
