# sitecms/web/templating.py
# One Jinja2Templates instance shared by the public site and the CMS.
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from sitecms.blocks import dispatch
from sitecms.utils.page_ids import resolve_page_path

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _render_blocks(blocks: List[Dict[str, Any]]) -> Markup:
    return dispatch.render_blocks(templates.env, blocks)


templates.env.globals["render_blocks"] = _render_blocks
templates.env.globals["page_path"] = resolve_page_path
templates.env.globals["block_json"] = dispatch.block_json
