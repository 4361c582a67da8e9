# sitecms/web/flash.py
# Toast-style messages kept in the session until the next render.
from __future__ import annotations

from typing import Dict, List

from fastapi import Request

SESSION_FLASH_KEY = "flash"


def flash(request: Request, message: str, kind: str = "success") -> None:
    messages = list(request.session.get(SESSION_FLASH_KEY) or [])
    messages.append({"kind": kind, "message": message})
    request.session[SESSION_FLASH_KEY] = messages


def pop_flashes(request: Request) -> List[Dict[str, str]]:
    return request.session.pop(SESSION_FLASH_KEY, None) or []
