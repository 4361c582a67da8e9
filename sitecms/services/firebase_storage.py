from __future__ import annotations

import logging
import os
import time
import urllib.parse
import uuid
from typing import BinaryIO

import firebase_admin
from firebase_admin import credentials, storage
from google.api_core.exceptions import GoogleAPIError, NotFound

from sitecms.core.settings import settings
from sitecms.errors import PayloadTooLargeError, UploadValidationError

logger = logging.getLogger(__name__)

_FIREBASE_APP = None

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")


def _normalize_bucket(bucket: str) -> str:
    if bucket.startswith("gs://"):
        return bucket[5:]
    return bucket


def is_firebase_configured() -> bool:
    cred_path = settings.FIREBASE_CREDENTIALS_PATH or ""
    bucket = settings.FIREBASE_STORAGE_BUCKET or ""
    if not cred_path or not bucket:
        return False
    return os.path.exists(cred_path)


def _get_firebase_app():
    global _FIREBASE_APP
    if _FIREBASE_APP is not None:
        return _FIREBASE_APP
    try:
        _FIREBASE_APP = firebase_admin.get_app()
        return _FIREBASE_APP
    except ValueError:
        pass

    cred_path = settings.FIREBASE_CREDENTIALS_PATH or ""
    bucket = settings.FIREBASE_STORAGE_BUCKET or ""
    if not cred_path:
        raise RuntimeError("FIREBASE_CREDENTIALS_PATH is not set")
    if not os.path.exists(cred_path):
        raise RuntimeError("FIREBASE_CREDENTIALS_PATH does not exist")
    if not bucket:
        raise RuntimeError("FIREBASE_STORAGE_BUCKET is not set")

    cred = credentials.Certificate(cred_path)
    _FIREBASE_APP = firebase_admin.initialize_app(
        cred,
        {"storageBucket": _normalize_bucket(bucket)},
    )
    return _FIREBASE_APP


def _bucket():
    return storage.bucket(app=_get_firebase_app())


# -------- Paths --------
def _extension(original_name: str | None) -> str:
    name = original_name or ""
    if "." in name:
        ext = name.rsplit(".", 1)[1].strip().lower()
        if ext:
            return ext
    return "jpg"


def _safe_filename(filename: str) -> str:
    if not filename or "/" in filename or filename.startswith("."):
        raise UploadValidationError(f"Invalid filename: {filename!r}")
    return filename


def block_image_path(site_id: str, page_id: str, block_id: str, *, original_name: str | None, filename: str | None = None) -> str:
    """sites/{siteId}/{pageId}/{blockId}/{filename}; default name image-{epoch_ms}.{ext}."""
    final = _safe_filename(filename) if filename else f"image-{int(time.time() * 1000)}.{_extension(original_name)}"
    return f"sites/{site_id}/{page_id}/{block_id}/{final}"


def site_asset_path(site_id: str, *, original_name: str | None, filename: str | None = None) -> str:
    """sites/{siteId}/assets/{filename}; default name asset-{epoch_ms}.{ext}."""
    final = _safe_filename(filename) if filename else f"asset-{int(time.time() * 1000)}.{_extension(original_name)}"
    return f"sites/{site_id}/assets/{final}"


def block_prefix(site_id: str, page_id: str, block_id: str) -> str:
    return f"sites/{site_id}/{page_id}/{block_id}/"


# -------- Validation --------
def validate_image_upload(content_type: str | None, size: int) -> None:
    if (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise UploadValidationError("Invalid file type. Please upload a JPEG, PNG, GIF, or WebP image.")
    max_bytes = int(settings.UPLOAD_MAX_MB) * 1024 * 1024
    if size > max_bytes:
        raise PayloadTooLargeError(f"File size must be less than {settings.UPLOAD_MAX_MB}MB")


# -------- Upload / delete --------
def download_url(dest_path: str, token: str) -> str:
    bucket_name = _normalize_bucket(settings.FIREBASE_STORAGE_BUCKET or "")
    encoded_path = urllib.parse.quote(dest_path, safe="")
    return f"https://firebasestorage.googleapis.com/v0/b/{bucket_name}/o/{encoded_path}?alt=media&token={token}"


def upload_file_to_firebase(file_obj: BinaryIO, content_type: str | None, dest_path: str) -> str:
    bucket = _bucket()

    token = uuid.uuid4().hex
    blob = bucket.blob(dest_path)
    blob.metadata = {"firebaseStorageDownloadTokens": token}
    blob.upload_from_file(file_obj, content_type=(content_type or "application/octet-stream"))
    logger.info("uploaded %s", dest_path)
    return download_url(dest_path, token)


def delete_blob(dest_path: str) -> None:
    """Deletes one object. A missing object is logged, not raised."""
    try:
        _bucket().blob(dest_path).delete()
        logger.info("deleted %s", dest_path)
    except NotFound:
        logger.warning("delete skipped, object not found: %s", dest_path)


def delete_block_images(site_id: str, page_id: str, block_id: str) -> int:
    """Deletes every object under a block's prefix. Errors are logged, not raised."""
    prefix = block_prefix(site_id, page_id, block_id)
    deleted = 0
    try:
        for blob in _bucket().list_blobs(prefix=prefix):
            blob.delete()
            deleted += 1
    except GoogleAPIError:
        logger.exception("failed deleting block images under %s", prefix)
    return deleted
