# sitecms/core/config.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .settings import settings

# delivery clients revalidate with these, so browsers must be allowed to read them
DELIVERY_EXPOSED_HEADERS = ["ETag", "Last-Modified", "Cache-Control"]


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Sites, pages and blocks: CMS API, public delivery and HTML site",
        debug=settings.DEBUG,
    )

    origins = settings.CORS_ORIGINS
    if not origins:
        return app

    # a wildcard origin cannot be combined with cookies/credentials
    wildcard = "*" in origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "If-None-Match", "If-Modified-Since"],
        expose_headers=DELIVERY_EXPOSED_HEADERS,
    )
    return app
