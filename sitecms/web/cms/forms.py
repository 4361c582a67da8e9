# sitecms/web/cms/forms.py
# Turns submitted editor forms back into block / document dicts.
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Sequence

from sitecms.blocks.dispatch import EditorField, is_diagnostic_editor


class FormError(ValueError):
    pass


def _number(raw: str, name: str) -> int | float | None:
    raw = raw.strip()
    if raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        raise FormError(f"{name}: not a number") from None


def _json_value(raw: str, name: str, expected: type) -> Any:
    raw = (raw or "").strip()
    if raw == "":
        return expected()
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FormError(f"{name}: invalid JSON ({e.msg})") from None
    if not isinstance(value, expected):
        raise FormError(f"{name}: expected a JSON {expected.__name__}")
    return value


def _field_value(f: EditorField, form: Mapping[str, Any]) -> Any:
    raw = form.get(f.name)
    if f.widget == "list":
        return _json_value(raw or "", f.label, list)
    if f.widget == "checkbox":
        return raw is not None
    if raw is None:
        return None
    raw = str(raw)
    if f.widget == "number":
        return _number(raw, f.label)
    if f.widget == "select":
        if raw == "":
            return None
        # keep int options (columns) as ints
        for opt in f.options:
            if str(opt) == raw:
                return opt
        raise FormError(f"{f.label}: unexpected value {raw!r}")
    return raw if raw.strip() != "" else None


def parse_block_form(
    fields: Sequence[EditorField],
    form: Mapping[str, Any],
    existing: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Applies the editor form on top of the stored block. Blank optional inputs
    remove the key; `id`, `type` and `order` always come from the stored block.
    """
    if is_diagnostic_editor(fields):
        block = _json_value(str(form.get("__json__") or ""), "Raw block JSON", dict)
    else:
        block = dict(existing)
        for f in fields:
            value = _field_value(f, form)
            if value is None:
                block.pop(f.name, None)
            else:
                block[f.name] = value
    block["id"] = existing.get("id")
    block["type"] = existing.get("type")
    block["order"] = existing.get("order", 0)
    return block


def field_form_value(f: EditorField, block: Dict[str, Any]) -> str:
    """Current value as the string an input / textarea shows."""
    value = block.get(f.name)
    if f.widget == "list":
        return json.dumps(value or [], indent=2, ensure_ascii=False)
    if value is None:
        return ""
    return str(value)


def parse_json_document(raw: str, label: str) -> Dict[str, Any]:
    """Navigation / footer are edited as one JSON document."""
    return _json_value(raw, label, dict)
