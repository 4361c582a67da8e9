# scripts/create_tenant.py
"""Create (or get) a legacy sections tenant and seed its default section content."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# --- Ensure repo root is on sys.path so "sitecms.*" imports work when run as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.orm import Session

from sitecms.db.session import SessionLocal
from sitecms.models.legacy import Tenant
from sitecms.section_schemas import SECTION_IDS
from sitecms.services import section_service


def run(tenant_id: str, name: str, domain: str, sections: list[str]) -> None:
    db: Session = SessionLocal()
    try:
        tenant = db.get(Tenant, tenant_id)
        if tenant is None:
            tenant = Tenant(id=tenant_id, name=name, domain=domain, sections=sections)
            db.add(tenant)
            db.flush()
            print(f"[OK] Tenant created id={tenant.id}")
        for section_id in tenant.sections:
            if section_service.get_section_content(db, tenant_id=tenant_id, section_id=section_id) is None:
                section_service.save_section_content(
                    db,
                    tenant_id=tenant_id,
                    section_id=section_id,
                    content=section_service.default_section_content(section_id),
                )
                print(f"[OK] Seeded section '{section_id}'")
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(
        description="Create (or get) a tenant with default section content.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--id", required=True, help="Tenant id")
    ap.add_argument("--name", required=True)
    ap.add_argument("--domain", required=True)
    ap.add_argument("--sections", nargs="*", default=list(SECTION_IDS), choices=SECTION_IDS)
    args = ap.parse_args()

    run(tenant_id=args.id, name=args.name, domain=args.domain, sections=args.sections)


if __name__ == "__main__":
    main()
