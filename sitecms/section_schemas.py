# sitecms/section_schemas.py
# JSON Schemas (draft 2020-12) for the legacy fixed sections, plus their
# starter content. Keys are the section ids stored under a tenant.
from __future__ import annotations

import copy
from typing import Any, Dict

_URL = {"type": "string", "pattern": r"^https?://\S+$"}
_REQ_STR = {"type": "string", "minLength": 1}
_OPT_STR = {"type": "string"}


def _obj(required: Dict[str, Any], optional: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {**required, **(optional or {})},
        "required": list(required),
    }


_CHECKERBOARD = _obj({
    "type": {"const": "checkerboard"},
    "title": _REQ_STR,
    "body": _REQ_STR,
    "image": _URL,
    "position": {"enum": ["left", "right"]},
})
_TEXT = _obj({"type": {"const": "text"}, "title": _REQ_STR, "body": _REQ_STR})
_IMAGE = _obj({"type": {"const": "image"}, "image": _URL}, {"caption": _OPT_STR})


SECTION_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "home": _obj({
        "heroTitle": _REQ_STR,
        "heroSubtitle": _REQ_STR,
        "heroImage": _URL,
        "blocks": {"type": "array", "items": {"oneOf": [_CHECKERBOARD, _TEXT, _IMAGE]}},
    }),
    "about": _obj(
        {
            "title": _REQ_STR,
            "subtitle": _REQ_STR,
            "mainImage": _URL,
            "story": {"type": "string", "minLength": 10},
        },
        {
            "mission": _OPT_STR,
            "vision": _OPT_STR,
            "values": {"type": "array", "items": {"type": "string"}},
        },
    ),
    "menu": _obj(
        {
            "title": _REQ_STR,
            "categories": {"type": "array", "items": {"type": "string"}, "minItems": 1},
            "items": {"type": "array", "items": _obj(
                {
                    "id": {"type": "string"},
                    "name": _REQ_STR,
                    "description": _REQ_STR,
                    "price": _REQ_STR,
                    "category": _REQ_STR,
                },
                {"image": _URL, "featured": {"type": "boolean"}},
            )},
        },
        {"subtitle": _OPT_STR},
    ),
    "events": _obj(
        {
            "title": _REQ_STR,
            "events": {"type": "array", "items": _obj(
                {
                    "id": {"type": "string"},
                    "title": _REQ_STR,
                    "description": _REQ_STR,
                    "date": _REQ_STR,
                    "time": _REQ_STR,
                    "location": _REQ_STR,
                },
                {"image": _URL, "registrationLink": _URL},
            )},
        },
        {"subtitle": _OPT_STR},
    ),
    "gallery": _obj(
        {
            "title": _REQ_STR,
            "categories": {"type": "array", "items": {"type": "string"}},
            "images": {"type": "array", "items": _obj(
                {"id": {"type": "string"}, "url": _URL},
                {"caption": _OPT_STR, "category": _OPT_STR},
            )},
        },
        {"subtitle": _OPT_STR},
    ),
    "contact": _obj(
        {
            "title": _REQ_STR,
            "email": {"type": "string", "format": "email"},
            "phone": _REQ_STR,
            "address": _REQ_STR,
        },
        {
            "subtitle": _OPT_STR,
            "hours": _OPT_STR,
            "socialMedia": {
                "type": "object",
                "properties": {k: _URL for k in ("facebook", "instagram", "twitter", "linkedin")},
            },
        },
    ),
}

SECTION_IDS = tuple(SECTION_SCHEMAS)

_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "home": {
        "heroTitle": "Welcome to Our Site",
        "heroSubtitle": "Edit this section to customize your homepage",
        "heroImage": "https://via.placeholder.com/1200x600",
        "blocks": [],
    },
    "about": {
        "title": "About Us",
        "subtitle": "Learn more about our story",
        "mainImage": "https://via.placeholder.com/800x600",
        "story": "Tell your story here...",
        "values": [],
    },
    "menu": {
        "title": "Our Menu",
        "subtitle": "Explore our offerings",
        "categories": ["Appetizers", "Main Courses", "Desserts"],
        "items": [],
    },
    "events": {
        "title": "Upcoming Events",
        "subtitle": "Join us for these exciting events",
        "events": [],
    },
    "gallery": {
        "title": "Photo Gallery",
        "subtitle": "Explore our visual collection",
        "categories": ["All"],
        "images": [],
    },
    "contact": {
        "title": "Contact Us",
        "subtitle": "Get in touch",
        "email": "contact@example.com",
        "phone": "(555) 123-4567",
        "address": "123 Main St, City, State 12345",
    },
}


def default_content(section_id: str) -> Dict[str, Any]:
    if section_id not in _DEFAULTS:
        raise KeyError(section_id)
    return copy.deepcopy(_DEFAULTS[section_id])
