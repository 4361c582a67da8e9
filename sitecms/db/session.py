# sitecms/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sitecms.core.settings import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # local development; request threads share the file database
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1800,  # keep connections fresh on Heroku
    }


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URL,
    **_engine_kwargs(settings.SQLALCHEMY_DATABASE_URL),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    """One session per request; endpoints decide when to commit."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
