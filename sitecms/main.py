from __future__ import annotations

from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from sitecms.api.delivery.router import router as delivery_router
from sitecms.api.v1.router import api_router
from sitecms.core.config import create_app
from sitecms.core.logging import configure_logging
from sitecms.core.settings import settings
from sitecms.web.templating import STATIC_DIR

from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware


app = create_app()
configure_logging()

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


def _inject_bearer_security(app):
    """
    Adds bearerAuth globally to the OpenAPI document; /delivery/* is then
    marked public (docs only, the endpoints enforce the real rules).
    """
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=settings.APP_NAME,
            version="1.0.0",
            description="Pages/blocks CMS API",
            routes=app.routes,
        )

        components = openapi_schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes["bearerAuth"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
        openapi_schema["security"] = [{"bearerAuth": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi


def _mark_public_routes(app):
    for route in app.routes:
        if isinstance(route, APIRoute):
            path = route.path or ""
            if path.startswith("/delivery/") or path.endswith("/health/ping"):
                extra = dict(route.openapi_extra or {})
                extra["security"] = []
                route.openapi_extra = extra


_inject_bearer_security(app)

# web sessions (CMS login + flash messages)
app.add_middleware(
    SessionMiddleware,
    secret_key=(settings.JWT_SECRET_KEY or "dev-secret"),
    session_cookie=settings.SESSION_COOKIE_NAME,
    same_site=settings.SESSION_COOKIE_SAMESITE,
    https_only=settings.SESSION_COOKIE_SECURE,
)

# private API (JWT)
app.include_router(api_router, prefix=settings.API_V1_STR)

# public delivery JSON
app.include_router(delivery_router)

# Static (CSS)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Web (login / CMS / public site); late import to avoid cycles
from sitecms.web.auth.router import router as auth_web_router
from sitecms.web.cms.router import router as cms_router
from sitecms.web.site.router import router as site_router
app.include_router(auth_web_router)
app.include_router(cms_router)
# the public site has a catch-all route, so it goes last
app.include_router(site_router)

_mark_public_routes(app)
