# sitecms/api/v1/endpoints/uploads.py
# Multipart image uploads to Firebase Storage
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from sitecms.api.errors import http_error
from sitecms.db.session import get_db
from sitecms.deps.auth import require_site_access
from sitecms.errors import SiteCMSError
from sitecms.models.auth import User
from sitecms.services import firebase_storage, site_service

router = APIRouter(prefix="/sites/{site_id}", tags=["uploads"])


def _file_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    f = upload.file
    f.seek(0, 2)
    size = f.tell()
    f.seek(0)
    return size


def _upload(upload: UploadFile, dest_path: str) -> dict:
    if not firebase_storage.is_firebase_configured():
        raise HTTPException(status_code=503, detail="Storage is not configured")
    url = firebase_storage.upload_file_to_firebase(upload.file, upload.content_type, dest_path)
    return {"url": url, "path": dest_path}


@router.post("/pages/{page_id}/blocks/{block_id}/images", status_code=201)
def upload_block_image(
    site_id: str,
    page_id: str,
    block_id: str,
    file: UploadFile = File(...),
    filename: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        site_service.get_page(db, site_id=site_id, page_id=page_id)
        firebase_storage.validate_image_upload(file.content_type, _file_size(file))
        dest = firebase_storage.block_image_path(
            site_id, page_id, block_id, original_name=file.filename, filename=filename
        )
    except SiteCMSError as e:
        raise http_error(e)
    return _upload(file, dest)


@router.post("/assets", status_code=201)
def upload_site_asset(
    site_id: str,
    file: UploadFile = File(...),
    filename: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_site_access),
):
    try:
        site_service.get_site(db, site_id=site_id)
        firebase_storage.validate_image_upload(file.content_type, _file_size(file))
        dest = firebase_storage.site_asset_path(site_id, original_name=file.filename, filename=filename)
    except SiteCMSError as e:
        raise http_error(e)
    return _upload(file, dest)


@router.delete("/pages/{page_id}/blocks/{block_id}/images", status_code=200)
def delete_block_images(
    site_id: str,
    page_id: str,
    block_id: str,
    _: User = Depends(require_site_access),
):
    if not firebase_storage.is_firebase_configured():
        raise HTTPException(status_code=503, detail="Storage is not configured")
    deleted = firebase_storage.delete_block_images(site_id, page_id, block_id)
    return {"deleted": deleted}
