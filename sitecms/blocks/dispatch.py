# sitecms/blocks/dispatch.py
"""
Block type -> renderer / editor registries.

RENDERERS maps each block type to the Jinja partial that draws it on the
public site; EDITORS maps it to the ordered form fields the CMS shows.
Both must cover every type in BLOCK_TYPES (checked at import). Types outside
the catalog fall back to a diagnostic view that dumps the raw document.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Environment
from markupsafe import Markup

from sitecms.blocks.types import BLOCK_TYPES, BLOCK_TYPE_META

logger = logging.getLogger(__name__)

UNKNOWN_TEMPLATE = "site/blocks/_unknown.html"


# ---------- Public renderers ----------
RENDERERS: Dict[str, str] = {
    "hero": "site/blocks/hero.html",
    "content-block": "site/blocks/content_block.html",
    "media-row": "site/blocks/media_row.html",
    "image-divider": "site/blocks/image_divider.html",
    "features": "site/blocks/features.html",
    "programs": "site/blocks/programs.html",
    "schedule": "site/blocks/schedule.html",
    "cta": "site/blocks/cta.html",
    "text": "site/blocks/text.html",
    "gallery": "site/blocks/gallery.html",
    "testimonials": "site/blocks/testimonials.html",
    "contact-form": "site/blocks/contact_form.html",
    "map": "site/blocks/map.html",
}


# ---------- Editor descriptors ----------
@dataclass(frozen=True)
class EditorField:
    name: str          # camelCase document key
    label: str
    widget: str        # text | textarea | html | image | number | select | checkbox | list | json
    options: Tuple[Any, ...] = ()
    item_fields: Tuple["EditorField", ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "label": self.label, "widget": self.widget}
        if self.options:
            out["options"] = list(self.options)
        if self.item_fields:
            out["itemFields"] = [f.to_dict() for f in self.item_fields]
        return out


def _f(name: str, label: str, widget: str = "text", **kw: Any) -> EditorField:
    return EditorField(name=name, label=label, widget=widget, **kw)


_CTA_FIELDS = (
    _f("text", "Button text"),
    _f("url", "Link URL"),
    _f("variant", "Style", "select", options=("primary", "secondary", "outline")),
)
_IMAGE_FIELDS = (
    _f("src", "Image", "image"),
    _f("alt", "Alt text"),
    _f("caption", "Caption"),
)

EDITORS: Dict[str, Tuple[EditorField, ...]] = {
    "hero": (
        _f("title", "Title"),
        _f("subtitle", "Subtitle", "textarea"),
        _f("backgroundImage", "Background image", "image"),
        _f("overlayOpacity", "Overlay opacity", "number"),
        _f("alignment", "Alignment", "select", options=("left", "center", "right")),
        _f("ctas", "Buttons", "list", item_fields=_CTA_FIELDS),
    ),
    "content-block": (
        _f("label", "Label"),
        _f("title", "Title"),
        _f("text", "Text", "textarea"),
        _f("image", "Image", "image"),
        _f("imagePosition", "Image position", "select", options=("left", "right")),
    ),
    "media-row": (
        _f("columns", "Columns", "select", options=(2, 3, 4)),
        _f("images", "Images", "list", item_fields=_IMAGE_FIELDS),
    ),
    "image-divider": (
        _f("image", "Image", "image"),
        _f("alt", "Alt text"),
        _f("height", "Height", "select", options=("small", "medium", "large")),
    ),
    "features": (
        _f("title", "Title"),
        _f("subtitle", "Subtitle"),
        _f("columns", "Columns", "select", options=(2, 3, 4)),
        _f("features", "Features", "list", item_fields=(
            _f("icon", "Icon"),
            _f("title", "Title"),
            _f("description", "Description", "textarea"),
        )),
    ),
    "programs": (
        _f("title", "Title"),
        _f("subtitle", "Subtitle"),
        _f("programs", "Programs", "list", item_fields=(
            _f("name", "Name"),
            _f("description", "Description", "textarea"),
            _f("image", "Image", "image"),
            _f("age", "Age"),
            _f("schedule", "Schedule"),
        )),
    ),
    "schedule": (
        _f("title", "Title"),
        _f("sessions", "Sessions", "list", item_fields=(
            _f("name", "Name"),
            _f("day", "Day"),
            _f("time", "Time"),
            _f("category", "Category"),
            _f("instructor", "Instructor"),
            _f("location", "Location"),
        )),
    ),
    "cta": (
        _f("title", "Title"),
        _f("description", "Description", "textarea"),
        _f("backgroundImage", "Background image", "image"),
        _f("backgroundColor", "Background color"),
        _f("buttons", "Buttons", "list", item_fields=_CTA_FIELDS),
    ),
    "text": (
        _f("title", "Title"),
        _f("content", "Content", "html"),
    ),
    "gallery": (
        _f("title", "Title"),
        _f("layout", "Layout", "select", options=("grid", "masonry", "carousel")),
        _f("images", "Images", "list", item_fields=_IMAGE_FIELDS),
    ),
    "testimonials": (
        _f("title", "Title"),
        _f("testimonials", "Testimonials", "list", item_fields=(
            _f("quote", "Quote", "textarea"),
            _f("author", "Author"),
            _f("role", "Role"),
            _f("image", "Photo", "image"),
        )),
    ),
    "contact-form": (
        _f("title", "Title"),
        _f("subtitle", "Subtitle"),
        _f("email", "Send submissions to"),
        _f("fields", "Form fields", "list", item_fields=(
            _f("label", "Label"),
            _f("type", "Type", "select", options=("text", "email", "phone", "textarea", "select")),
            _f("required", "Required", "checkbox"),
        )),
    ),
    "map": (
        _f("address", "Address"),
        _f("lat", "Latitude", "number"),
        _f("lng", "Longitude", "number"),
        _f("zoom", "Zoom", "number"),
    ),
}

# raw JSON editor for anything outside the catalog
DIAGNOSTIC_EDITOR: Tuple[EditorField, ...] = (_f("__json__", "Raw block JSON", "json"),)


def _check_registry(name: str, registry: Dict[str, Any]) -> None:
    missing = set(BLOCK_TYPES) - set(registry)
    extra = set(registry) - set(BLOCK_TYPES)
    if missing or extra:
        raise RuntimeError(f"{name} out of sync with block types: missing={sorted(missing)} extra={sorted(extra)}")


_check_registry("RENDERERS", RENDERERS)
_check_registry("EDITORS", EDITORS)


def template_for(block_type: Optional[str]) -> str:
    template = RENDERERS.get(block_type or "")
    if template is None:
        logger.warning("No renderer for block type %r; using diagnostic fallback", block_type)
        return UNKNOWN_TEMPLATE
    return template


def editor_for(block_type: Optional[str]) -> Tuple[EditorField, ...]:
    return EDITORS.get(block_type or "", DIAGNOSTIC_EDITOR)


def is_diagnostic_editor(fields: Tuple[EditorField, ...]) -> bool:
    return fields is DIAGNOSTIC_EDITOR


def block_json(block: Dict[str, Any]) -> str:
    return json.dumps(block, indent=2, ensure_ascii=False, default=str)


def render_block(env: Environment, block: Dict[str, Any]) -> Markup:
    tmpl = env.get_template(template_for(block.get("type")))
    return Markup(tmpl.render(block=block, block_json=block_json(block)))


def render_blocks(env: Environment, blocks: List[Dict[str, Any]]) -> Markup:
    """Renders blocks in list order and concatenates the HTML."""
    return Markup("\n").join(render_block(env, b) for b in blocks)


def editor_catalog() -> List[Dict[str, Any]]:
    """Block type catalog for the "add block" picker and API clients."""
    return [
        {"type": t, **BLOCK_TYPE_META[t], "fields": [f.to_dict() for f in EDITORS[t]]}
        for t in BLOCK_TYPES
    ]
