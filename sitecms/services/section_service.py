# sitecms/services/section_service.py
# Legacy tenants and their fixed-schema section content.
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft202012Validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from sitecms.errors import NotFoundError, SectionValidationError, UnknownSectionError
from sitecms.models.legacy import SectionContent, Tenant
from sitecms.section_schemas import SECTION_SCHEMAS, default_content

logger = logging.getLogger(__name__)


def validate_section_content(section_id: str, data: Dict[str, Any]) -> None:
    schema = SECTION_SCHEMAS.get(section_id)
    if schema is None:
        raise UnknownSectionError(section_id)
    validator = Draft202012Validator(schema, format_checker=Draft202012Validator.FORMAT_CHECKER)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        e = errors[0]
        path = ".".join([str(p) for p in e.path])
        raise SectionValidationError(section_id, path, e.message)


def default_section_content(section_id: str) -> Dict[str, Any]:
    try:
        return default_content(section_id)
    except KeyError:
        raise UnknownSectionError(section_id) from None


# -------- Tenants --------
def get_tenant(db: Session, *, tenant_id: str) -> Optional[Tenant]:
    return db.get(Tenant, tenant_id)


def require_tenant(db: Session, *, tenant_id: str) -> Tenant:
    tenant = get_tenant(db, tenant_id=tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant", tenant_id)
    return tenant


def list_tenants(db: Session) -> List[Tenant]:
    return list(db.scalars(select(Tenant).order_by(Tenant.name, Tenant.id)))


def get_user_tenants(db: Session, *, tenant_ids: Sequence[str]) -> List[Tenant]:
    """Tenants for the given ids, in the given order; unknown ids are skipped."""
    out = []
    for tid in tenant_ids or []:
        tenant = get_tenant(db, tenant_id=tid)
        if tenant is not None:
            out.append(tenant)
    return out


def has_section_access(tenant: Tenant, section_id: str) -> bool:
    return section_id in (tenant.sections or [])


# -------- Section content --------
def get_section_content(db: Session, *, tenant_id: str, section_id: str) -> Optional[Dict[str, Any]]:
    row = db.get(SectionContent, (tenant_id, section_id))
    return None if row is None else row.data


def save_section_content(
    db: Session,
    *,
    tenant_id: str,
    section_id: str,
    content: Dict[str, Any],
    validate: bool = True,
) -> SectionContent:
    """Full overwrite. When `validate` is on, an invalid payload is never written."""
    if validate:
        validate_section_content(section_id, content)
    require_tenant(db, tenant_id=tenant_id)

    row = db.get(SectionContent, (tenant_id, section_id))
    if row is None:
        row = SectionContent(tenant_id=tenant_id, section_id=section_id)
        db.add(row)
    row.data = dict(content)
    db.flush()
    logger.info("section saved tenant=%s section=%s", tenant_id, section_id)
    return row


def update_section_content(
    db: Session,
    *,
    tenant_id: str,
    section_id: str,
    updates: Dict[str, Any],
) -> SectionContent:
    """Shallow merge into the existing document; no validation."""
    row = db.get(SectionContent, (tenant_id, section_id))
    if row is None:
        raise NotFoundError("Section content", f"{tenant_id}/{section_id}")
    row.data = {**(row.data or {}), **updates}
    db.flush()
    return row
