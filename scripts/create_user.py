# scripts/create_user.py
"""
Create (or update) a user, optionally linking them to sites and legacy tenants.
Idempotent: safe to run multiple times.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

# Ensure repo root is importable when called via `python -m scripts.create_user ...`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from sqlalchemy.orm import Session

from sitecms.db.session import SessionLocal
from sitecms.models.auth import SiteMember, SiteRole, User
from sitecms.models.site import Site
from sitecms.services.passwords import hash_password


def run(
    email: str,
    password: str,
    full_name: str = "",
    superadmin: bool = False,
    site_ids: Sequence[str] = (),
    role: str = "editor",
    tenant_ids: Sequence[str] = (),
) -> None:
    email = email.strip().lower()
    db: Session = SessionLocal()
    try:
        user = db.scalar(select(User).where(User.email == email))
        if not user:
            user = User(email=email, hashed_password=hash_password(password), is_active=True)
            db.add(user)
            print(f"[OK] User created: {email}")
        else:
            user.hashed_password = hash_password(password)
            print(f"[OK] Password reset: {email}")
        user.full_name = full_name or user.full_name
        user.is_superadmin = superadmin or bool(user.is_superadmin)
        user.tenant_ids = sorted(set(user.tenant_ids or []) | set(tenant_ids))
        db.flush()

        for site_id in site_ids:
            if db.get(Site, site_id) is None:
                raise RuntimeError(f"Site '{site_id}' does not exist. Run scripts/create_site.py first.")
            member = db.scalar(
                select(SiteMember).where(SiteMember.user_id == user.id, SiteMember.site_id == site_id)
            )
            if member is None:
                db.add(SiteMember(user_id=user.id, site_id=site_id, role=SiteRole(role)))
                print(f"[OK] Linked {email} -> site '{site_id}' as {role}")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(
        description="Create or update a CMS user.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--full-name", default="")
    ap.add_argument("--superadmin", action="store_true", help="May manage every site")
    ap.add_argument("--site", action="append", default=[], help="Site id to link (repeatable)")
    ap.add_argument("--role", choices=[r.value for r in SiteRole], default=SiteRole.editor.value)
    ap.add_argument("--tenant", action="append", default=[], help="Legacy tenant id (repeatable)")
    args = ap.parse_args()

    run(
        email=args.email,
        password=args.password,
        full_name=args.full_name,
        superadmin=args.superadmin,
        site_ids=args.site,
        role=args.role,
        tenant_ids=args.tenant,
    )


if __name__ == "__main__":
    main()
