# scripts/create_site.py
"""
Create (or reuse) a site with a home page, navigation and footer.
Idempotent: existing pages and documents are left alone.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

# --- Ensure repo root is on sys.path so "sitecms.*" imports work when run as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.orm import Session

from sitecms.blocks.defaults import default_block
from sitecms.core.settings import settings
from sitecms.db.session import SessionLocal
from sitecms.models.site import Site
from sitecms.services import site_service
from sitecms.utils.page_ids import HOME_PAGE_ID


def _home_blocks(name: str) -> list[dict]:
    hero = default_block("hero")
    hero.update(title=name, subtitle="Welcome to our new website")
    text = default_block("text")
    text.update(title="About us", content="<p>Tell visitors who you are.</p>")
    return [hero, text, default_block("contact-form")]


def run(site_id: str, name: str, domain: Optional[str] = None) -> None:
    db: Session = SessionLocal()
    try:
        site = db.get(Site, site_id)
        if site is None:
            site = site_service.create_site(db, site_id=site_id, name=name, domain=domain)
            print(f"[OK] Site created id={site.id}")
        else:
            print(f"[SKIP] Site exists id={site.id}")

        if site_service.find_page(db, site_id=site_id, page_id=HOME_PAGE_ID) is None:
            site_service.create_page(
                db, site_id=site_id, page_id=HOME_PAGE_ID, title="Home", blocks=_home_blocks(name), order=0,
            )
            print("[OK] Home page created")

        if not site_service.get_navigation(db, site_id=site_id)["items"]:
            site_service.update_navigation(db, site_id=site_id, navigation={
                "items": [
                    {"id": "home", "label": "Home", "url": "/"},
                    {"id": "contact", "label": "Contact", "url": "/contact"},
                ],
            })
            print("[OK] Navigation written")

        if site_service.get_footer(db, site_id=site_id) is None:
            site_service.update_footer(db, site_id=site_id, footer={
                "tagline": name,
                "columns": [],
                "copyright": f"© {name}",
                "socialLinks": [],
            })
            print("[OK] Footer written")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(
        description="Create (or reuse) a site with starter content.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--id", default=settings.SITE_ID, help="Site id (used in URLs and as SITE_ID)")
    ap.add_argument("--name", default="Demo Site", help="Display name")
    ap.add_argument("--domain", default=None, help="Public domain")
    args = ap.parse_args()

    run(site_id=args.id, name=args.name, domain=args.domain)


if __name__ == "__main__":
    main()
