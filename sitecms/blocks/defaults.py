# sitecms/blocks/defaults.py
# Starter payloads used by "add block" in the CMS.
from __future__ import annotations

import copy
import random
import string
import time
from typing import Any, Dict

from sitecms.blocks.types import BLOCK_TYPES
from sitecms.errors import UnknownBlockTypeError

_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """`{epoch_ms}-{9 random chars}`, same shape the editor has always used."""
    suffix = "".join(random.choices(_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


_STARTERS: Dict[str, Dict[str, Any]] = {
    "hero": {"title": "Hero Title", "subtitle": "Hero subtitle text goes here", "ctas": []},
    "content-block": {"title": "Content Title", "text": "Content text goes here...", "imagePosition": "right"},
    "text": {"title": "Section Title", "content": "<p>Add your text content here...</p>"},
    "media-row": {"images": [], "columns": 3},
    "image-divider": {"image": "", "height": "medium"},
    "features": {"title": "Our Features", "features": [], "columns": 3},
    "programs": {"title": "Our Programs", "programs": []},
    "schedule": {"title": "Schedule", "sessions": [], "filters": []},
    "cta": {"title": "Ready to Get Started?", "description": "Take the next step today.", "buttons": []},
    "gallery": {"title": "Gallery", "images": [], "layout": "grid"},
    "testimonials": {"title": "What People Say", "testimonials": []},
    "contact-form": {
        "title": "Contact Us",
        "subtitle": "We'd love to hear from you",
        "email": "",
        "fields": [
            {"id": "name", "type": "text", "label": "Name", "required": True},
            {"id": "email", "type": "email", "label": "Email", "required": True},
            {"id": "message", "type": "textarea", "label": "Message", "required": True},
        ],
    },
    "map": {"address": "", "zoom": 14},
}

if set(_STARTERS) != set(BLOCK_TYPES):
    raise RuntimeError(
        f"starter payloads out of sync with block types: "
        f"missing={sorted(set(BLOCK_TYPES) - set(_STARTERS))} extra={sorted(set(_STARTERS) - set(BLOCK_TYPES))}"
    )


def default_block(block_type: str, *, block_id: str | None = None) -> Dict[str, Any]:
    """
    New block document for `block_type` with order 0; the ordering helpers
    assign the real order on insert. Unknown types raise UnknownBlockTypeError.
    """
    if block_type not in _STARTERS:
        raise UnknownBlockTypeError(block_type)
    return {
        "id": block_id or generate_id(),
        "type": block_type,
        "order": 0,
        **copy.deepcopy(_STARTERS[block_type]),
    }
