# sitecms/api/v1/endpoints/sites.py
# Sites and their singleton documents (navigation, footer, page index)
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from sitecms.api.errors import http_error, validation_http_error
from sitecms.db.session import get_db
from sitecms.deps.auth import get_current_user, require_site_access, require_superadmin
from sitecms.errors import SiteCMSError
from sitecms.models.auth import SiteMember, SiteRole, User
from sitecms.schemas.site import PageIndex, SiteCreate, SiteUpdate
from sitecms.services import site_service
from sitecms.utils.payload_guard import enforce_page_data_size

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("")
def list_sites(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [site_service.site_document(s) for s in site_service.list_sites_for_user(db, user=current_user)]


@router.post("", status_code=201)
def create_site(
    payload: SiteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    try:
        site = site_service.create_site(
            db,
            site_id=payload.id,
            name=payload.name,
            tagline=payload.tagline,
            domain=payload.domain,
            theme=payload.theme.to_document() if payload.theme else None,
        )
        db.add(SiteMember(user_id=current_user.id, site_id=site.id, role=SiteRole.owner))
        db.commit()
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    db.refresh(site)
    return site_service.site_document(site)


@router.get("/{site_id}")
def get_site(
    site_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        return site_service.site_document(site_service.get_site(db, site_id=site_id))
    except SiteCMSError as e:
        raise http_error(e)


@router.patch("/{site_id}")
def update_site(
    site_id: str,
    patch: SiteUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    data: Dict[str, Any] = patch.model_dump(exclude_unset=True)
    if patch.theme is not None:
        data["theme"] = patch.theme.to_document()
    try:
        site = site_service.update_site(db, site_id=site_id, data=data)
        db.commit()
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    db.refresh(site)
    return site_service.site_document(site)


# ---------- Navigation ----------
@router.get("/{site_id}/navigation")
def get_navigation(
    site_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    return site_service.get_navigation(db, site_id=site_id)


@router.put("/{site_id}/navigation")
def put_navigation(
    site_id: str,
    navigation: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    enforce_page_data_size(navigation)
    try:
        data = site_service.update_navigation(db, site_id=site_id, navigation=navigation)
        db.commit()
    except ValidationError as e:
        db.rollback()
        raise validation_http_error(e)
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    return data


# ---------- Footer ----------
@router.get("/{site_id}/footer")
def get_footer(
    site_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    footer = site_service.get_footer(db, site_id=site_id)
    if footer is None:
        raise HTTPException(status_code=404, detail="Footer not found")
    return footer


@router.put("/{site_id}/footer")
def put_footer(
    site_id: str,
    footer: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    enforce_page_data_size(footer)
    try:
        data = site_service.update_footer(db, site_id=site_id, footer=footer)
        db.commit()
    except ValidationError as e:
        db.rollback()
        raise validation_http_error(e)
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    return data


# ---------- Page index ----------
@router.get("/{site_id}/page-index", response_model=PageIndex)
def get_page_index(
    site_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        return site_service.get_page_index(db, site_id=site_id)
    except SiteCMSError as e:
        raise http_error(e)


@router.post("/{site_id}/page-index/rebuild", response_model=PageIndex)
def rebuild_page_index(
    site_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        data = site_service.rebuild_page_index(db, site_id=site_id)
        db.commit()
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    return data

