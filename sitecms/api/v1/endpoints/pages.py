# sitecms/api/v1/endpoints/pages.py
# Pages of a site and the block-level edits on a page
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from sitecms.api.errors import http_error, validation_http_error
from sitecms.db.session import get_db
from sitecms.deps.auth import require_site_access
from sitecms.errors import SiteCMSError
from sitecms.models.auth import User
from sitecms.schemas.site import BlockInsert, BlockReorder, BlocksReplace, PageCreate, PageSave, PageUpdate
from sitecms.services import site_service
from sitecms.utils.payload_guard import enforce_page_data_size

router = APIRouter(prefix="/sites/{site_id}/pages", tags=["pages"])


def _commit_page(db: Session, fn, **kwargs) -> dict:
    """Runs a site_service mutation, commits, and returns the page document."""
    try:
        page = fn(db, **kwargs)
        db.commit()
    except ValidationError as e:
        db.rollback()
        raise validation_http_error(e)
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    db.refresh(page)
    return site_service.page_document(page)


@router.get("")
def list_pages(
    site_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        pages = site_service.list_pages(db, site_id=site_id)
    except SiteCMSError as e:
        raise http_error(e)
    return [site_service.page_document(p) for p in pages]


@router.post("", status_code=201)
def create_page(
    site_id: str,
    payload: PageCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    enforce_page_data_size(payload.blocks)
    return _commit_page(
        db,
        site_service.create_page,
        site_id=site_id,
        page_id=payload.id,
        title=payload.title,
        slug=payload.slug,
        description=payload.description,
        blocks=payload.blocks,
        order=payload.order,
        is_published=payload.is_published,
    )


@router.get("/{page_id}")
def get_page(
    site_id: str,
    page_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        return site_service.page_document(site_service.get_page(db, site_id=site_id, page_id=page_id))
    except SiteCMSError as e:
        raise http_error(e)


@router.put("/{page_id}")
def save_page(
    site_id: str,
    page_id: str,
    payload: PageSave,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    """Deterministic-id save of title + blocks; creates the page when missing."""
    enforce_page_data_size(payload.blocks)
    return _commit_page(
        db,
        site_service.save_page_by_id,
        site_id=site_id,
        page_id=page_id,
        title=payload.title,
        blocks=payload.blocks,
    )


@router.patch("/{page_id}")
def update_page(
    site_id: str,
    page_id: str,
    patch: PageUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    return _commit_page(
        db,
        site_service.update_page,
        site_id=site_id,
        page_id=page_id,
        data=patch.model_dump(exclude_unset=True),
    )


@router.delete("/{page_id}", status_code=204)
def delete_page(
    site_id: str,
    page_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        site_service.delete_page(db, site_id=site_id, page_id=page_id)
        db.commit()
    except SiteCMSError as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)


# ---------- Blocks ----------
@router.put("/{page_id}/blocks")
def replace_blocks(
    site_id: str,
    page_id: str,
    payload: BlocksReplace,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    enforce_page_data_size(payload.blocks)
    return _commit_page(
        db,
        site_service.update_page_blocks,
        site_id=site_id,
        page_id=page_id,
        blocks=payload.blocks,
    )


@router.post("/{page_id}/blocks", status_code=201)
def add_block(
    site_id: str,
    page_id: str,
    payload: BlockInsert,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    if payload.block is not None:
        enforce_page_data_size(payload.block)
        return _commit_page(
            db,
            site_service.add_block,
            site_id=site_id,
            page_id=page_id,
            block=payload.block,
            position=payload.position,
        )
    if payload.type:
        return _commit_page(
            db,
            site_service.add_default_block,
            site_id=site_id,
            page_id=page_id,
            block_type=payload.type,
            position=payload.position,
        )
    raise HTTPException(status_code=422, detail="Provide either 'block' or 'type'")


@router.post("/{page_id}/blocks/reorder")
def reorder_blocks(
    site_id: str,
    page_id: str,
    payload: BlockReorder,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    return _commit_page(
        db,
        site_service.reorder_blocks,
        site_id=site_id,
        page_id=page_id,
        from_index=payload.from_index,
        to_index=payload.to_index,
    )


@router.put("/{page_id}/blocks/{index}")
def update_block(
    site_id: str,
    page_id: str,
    index: int,
    block: dict,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    enforce_page_data_size(block)
    return _commit_page(
        db,
        site_service.update_block,
        site_id=site_id,
        page_id=page_id,
        index=index,
        block=block,
    )


@router.delete("/{page_id}/blocks/{index}")
def remove_block(
    site_id: str,
    page_id: str,
    index: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    return _commit_page(
        db,
        site_service.remove_block,
        site_id=site_id,
        page_id=page_id,
        index=index,
    )
