# sitecms/api/v1/endpoints/legacy.py
# Single-tenant sections model: tenants/{tenantId}/content/{sectionId}
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from sitecms.api.errors import http_error
from sitecms.db.session import get_db
from sitecms.deps.auth import get_current_user, require_tenant_access
from sitecms.errors import SiteCMSError
from sitecms.models.auth import User
from sitecms.services import section_service
from sitecms.utils.payload_guard import enforce_page_data_size

router = APIRouter(tags=["legacy sections"])


class TenantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    domain: str
    sections: List[str]


def _require_section_enabled(db: Session, tenant_id: str, section_id: str):
    try:
        tenant = section_service.require_tenant(db, tenant_id=tenant_id)
    except SiteCMSError as e:
        raise http_error(e)
    if not section_service.has_section_access(tenant, section_id):
        raise HTTPException(status_code=403, detail=f"Section '{section_id}' is not enabled for this tenant")
    return tenant


@router.get("/tenants", response_model=List[TenantOut])
def list_tenants(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if current_user.is_superadmin:
        return section_service.list_tenants(db)
    return section_service.get_user_tenants(db, tenant_ids=current_user.tenant_ids or [])


@router.get("/tenants/{tenant_id}", response_model=TenantOut)
def get_tenant(
    tenant_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_tenant_access),
):
    try:
        return section_service.require_tenant(db, tenant_id=tenant_id)
    except SiteCMSError as e:
        raise http_error(e)


@router.get("/tenants/{tenant_id}/content/{section_id}")
def get_section_content(
    tenant_id: str,
    section_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_tenant_access),
):
    _require_section_enabled(db, tenant_id, section_id)
    data = section_service.get_section_content(db, tenant_id=tenant_id, section_id=section_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Section content not found")
    return data


@router.put("/tenants/{tenant_id}/content/{section_id}")
def save_section_content(
    tenant_id: str,
    section_id: str,
    content: Dict[str, Any] = Body(...),
    validate: bool = Query(True),
    db: Session = Depends(get_db),
    _: User = Depends(require_tenant_access),
):
    _require_section_enabled(db, tenant_id, section_id)
    enforce_page_data_size(content)
    try:
        row = section_service.save_section_content(
            db, tenant_id=tenant_id, section_id=section_id, content=content, validate=validate
        )
        db.commit()
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    return row.data


@router.patch("/tenants/{tenant_id}/content/{section_id}")
def update_section_content(
    tenant_id: str,
    section_id: str,
    updates: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    _: User = Depends(require_tenant_access),
):
    _require_section_enabled(db, tenant_id, section_id)
    try:
        row = section_service.update_section_content(
            db, tenant_id=tenant_id, section_id=section_id, updates=updates
        )
        db.commit()
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    return row.data


@router.get("/sections/{section_id}/defaults")
def get_section_defaults(section_id: str, _: User = Depends(get_current_user)):
    try:
        return section_service.default_section_content(section_id)
    except SiteCMSError as e:
        raise http_error(e)
