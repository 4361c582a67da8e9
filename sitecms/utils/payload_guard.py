from __future__ import annotations

import json
from typing import Any

from fastapi import HTTPException

from sitecms.core.settings import settings


def enforce_page_data_size(data: Any) -> None:
    """
    Caps the serialized JSON size (KB) of a page write (blocks, navigation,
    footer). Raises HTTP 413 on overflow, or 400 when it does not serialize.
    """
    limit_kb = float(settings.MAX_PAGE_DATA_KB or 0)
    if limit_kb <= 0:
        return
    try:
        # compact JSON to measure true wire-size
        b = json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid JSON payload")
    kb = len(b) / 1024.0
    if kb > limit_kb:
        raise HTTPException(
            status_code=413,
            detail=f"Payload too large: {kb:.1f}KB, limit is {limit_kb:.0f}KB",
        )
