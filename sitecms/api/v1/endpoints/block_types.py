# sitecms/api/v1/endpoints/block_types.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from sitecms.blocks.defaults import default_block
from sitecms.blocks.dispatch import editor_catalog
from sitecms.errors import UnknownBlockTypeError

router = APIRouter(prefix="/block-types", tags=["blocks"])


@router.get("")
def list_block_types():
    """Catalog for the "add block" picker: label, icon, description and editor fields."""
    return editor_catalog()


@router.get("/{block_type}/default")
def get_default_block(block_type: str):
    try:
        return default_block(block_type)
    except UnknownBlockTypeError as e:
        # the type is part of the resource path here
        raise HTTPException(status_code=404, detail=str(e))
