# sitecms/api/errors.py
from __future__ import annotations

from fastapi import HTTPException
from pydantic import ValidationError

from sitecms.errors import SiteCMSError


def http_error(exc: SiteCMSError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


def validation_http_error(exc: ValidationError) -> HTTPException:
    """Invalid block / navigation / footer documents answer 422 with pydantic's error list."""
    return HTTPException(
        status_code=422,
        detail=exc.errors(include_url=False, include_context=False, include_input=False),
    )
