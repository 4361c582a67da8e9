# sitecms/blocks/normalize.py
# Brings older public-site block shapes up to the current block schema.
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def _image_src(value: Any) -> Optional[str]:
    """Legacy images are {src, alt, placeholder}; current ones are plain URLs."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        src = value.get("src") or value.get("url")
        return src if isinstance(src, str) else None
    return None


def _image_alt(value: Any) -> Optional[str]:
    if isinstance(value, dict) and isinstance(value.get("alt"), str):
        return value["alt"]
    return None


def _text(value: Any) -> Optional[str]:
    # descriptions used to be stored as a list of paragraphs
    if isinstance(value, list):
        return "\n\n".join(str(p) for p in value if p is not None)
    if isinstance(value, str):
        return value
    return None


def _cta(value: Any, fallback_id: str) -> Optional[Dict[str, Any]]:
    if not isinstance(value, dict):
        return None
    out = dict(value)
    out.setdefault("id", fallback_id)
    if "url" not in out and "href" in out:
        out["url"] = out.pop("href")
    out.setdefault("url", "")
    if "text" not in out and "label" in out:
        out["text"] = out.pop("label")
    out.setdefault("text", "")
    return out


def _ctas(values: Any, prefix: str) -> List[Dict[str, Any]]:
    if not isinstance(values, list):
        return []
    out = []
    for i, v in enumerate(values):
        c = _cta(v, f"{prefix}-{i}")
        if c is not None:
            out.append(c)
    return out


def _media_images(values: Any, prefix: str) -> List[Dict[str, Any]]:
    if not isinstance(values, list):
        return []
    out: List[Dict[str, Any]] = []
    for i, item in enumerate(values):
        if isinstance(item, str):
            out.append({"id": f"{prefix}-{i}", "src": item})
            continue
        if not isinstance(item, dict):
            continue
        img = dict(item)
        nested = img.pop("image", None)
        src = img.get("src") or _image_src(nested) or img.pop("url", None)
        img["src"] = src or ""
        if "alt" not in img and _image_alt(nested):
            img["alt"] = _image_alt(nested)
        img.setdefault("id", f"{prefix}-{i}")
        out.append(img)
    return out


def _items_with_ids(values: Any, prefix: str) -> List[Dict[str, Any]]:
    if not isinstance(values, list):
        return []
    out = []
    for i, item in enumerate(values):
        if isinstance(item, dict):
            d = dict(item)
            d.setdefault("id", f"{prefix}-{i}")
            out.append(d)
    return out


def normalize_block(raw: Dict[str, Any], index: int) -> Dict[str, Any]:
    """
    Returns a copy of `raw` in the current schema. Known legacy keys are
    rewritten; anything else is left as stored. Blocks without an id get a
    stable one derived from their type and position.
    """
    b = dict(raw)
    btype = b.get("type") or "unknown"
    b["type"] = btype
    if not b.get("id"):
        b["id"] = f"{btype}-{index}"
    b["order"] = index
    bid = str(b["id"])

    if btype == "hero":
        if "backgroundImage" not in b and "image" in b:
            b["backgroundImage"] = _image_src(b.pop("image"))
        legacy = b.pop("buttons", None)
        if legacy is None and isinstance(b.get("cta"), dict):
            legacy = [b.pop("cta")]
        if "ctas" in b:
            b["ctas"] = _ctas(b["ctas"], f"{bid}-cta")
        elif legacy is not None:
            b["ctas"] = _ctas(legacy, f"{bid}-cta")
        b.pop("cta", None)

    elif btype == "content-block":
        if "image" in b:
            alt = _image_alt(b["image"])
            b["image"] = _image_src(b["image"])
            if alt and "alt" not in b:
                b["alt"] = alt
        if "text" not in b and "description" in b:
            b["text"] = _text(b.pop("description")) or ""
        if "reverse" in b and "imagePosition" not in b:
            b["imagePosition"] = "left" if b.pop("reverse") else "right"
        if "cta" in b:
            cta = _cta(b["cta"], f"{bid}-cta")
            if cta is None:
                b.pop("cta")
            else:
                b["cta"] = cta

    elif btype in ("media-row", "gallery"):
        if "images" not in b and "items" in b:
            b["images"] = _media_images(b.pop("items"), bid)
        else:
            b["images"] = _media_images(b.get("images"), bid)

    elif btype == "image-divider":
        if "image" in b:
            alt = _image_alt(b["image"])
            b["image"] = _image_src(b["image"]) or ""
            if alt and "alt" not in b:
                b["alt"] = alt

    elif btype == "features":
        if "features" not in b and "items" in b:
            b["features"] = b.pop("items")
        b["features"] = _items_with_ids(b.get("features"), f"{bid}-feature")
        for f in b["features"]:
            if "description" in f:
                f["description"] = _text(f["description"]) or ""

    elif btype == "programs":
        programs = _items_with_ids(b.get("programs") or b.pop("items", None), f"{bid}-program")
        for p in programs:
            if "name" not in p and "title" in p:
                p["name"] = p.pop("title")
            if "image" in p:
                p["image"] = _image_src(p["image"])
            if "description" in p:
                p["description"] = _text(p["description"]) or ""
            if "cta" in p:
                cta = _cta(p["cta"], f"{p['id']}-cta")
                if cta is None:
                    p.pop("cta")
                else:
                    p["cta"] = cta
        b["programs"] = programs

    elif btype == "schedule":
        b["sessions"] = _items_with_ids(b.get("sessions"), f"{bid}-session")

    elif btype == "cta":
        if "description" in b:
            b["description"] = _text(b["description"])
        if "backgroundImage" not in b and "image" in b:
            b["backgroundImage"] = _image_src(b.pop("image"))
        buttons = b.get("buttons")
        if buttons is None and isinstance(b.get("cta"), dict):
            buttons = [b.pop("cta")]
        b["buttons"] = _ctas(buttons, f"{bid}-button")

    elif btype == "testimonials":
        if "testimonials" not in b and "items" in b:
            b["testimonials"] = b.pop("items")
        b["testimonials"] = _items_with_ids(b.get("testimonials"), f"{bid}-testimonial")
        for t in b["testimonials"]:
            if "image" in t:
                t["image"] = _image_src(t["image"])

    # drop keys whose value normalized to None
    return {k: v for k, v in b.items() if v is not None}


def normalize_blocks(raw_blocks: Any) -> List[Dict[str, Any]]:
    """Normalizes a stored `blocks` field; non-list values read as empty."""
    if not isinstance(raw_blocks, list):
        if raw_blocks is not None:
            logger.warning("blocks field is %s, expected a list", type(raw_blocks).__name__)
        return []
    blocks = [b for b in raw_blocks if isinstance(b, dict)]
    return [normalize_block(b, i) for i, b in enumerate(blocks)]
