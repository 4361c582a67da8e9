# sitecms/api/v1/router.py
from fastapi import APIRouter

from .endpoints import health
from sitecms.api.v1 import auth as auth_endpoints
from sitecms.api.v1.endpoints import sites as sites_endpoints
from sitecms.api.v1.endpoints import pages as pages_endpoints
from sitecms.api.v1.endpoints import block_types as block_types_endpoints
from sitecms.api.v1.endpoints import uploads as uploads_endpoints
from sitecms.api.v1.endpoints import legacy as legacy_endpoints

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth_endpoints.router, prefix="/auth")

api_router.include_router(sites_endpoints.router)        # /sites
api_router.include_router(pages_endpoints.router)        # /sites/{site_id}/pages
api_router.include_router(uploads_endpoints.router)      # /sites/{site_id}/... uploads
api_router.include_router(block_types_endpoints.router)  # /block-types
api_router.include_router(legacy_endpoints.router)       # /tenants, /sections
