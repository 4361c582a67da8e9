# alembic/env.py
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from sitecms.core.settings import settings
from sitecms.db.base import Base
# every model module registers its tables on Base.metadata
import sitecms.models.site  # noqa: F401
import sitecms.models.legacy  # noqa: F401
import sitecms.models.auth  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

DB_URL = settings.SQLALCHEMY_DATABASE_URL


def _configure_kwargs() -> dict:
    return {
        "target_metadata": target_metadata,
        # JSON <-> JSONB and String length changes show up in autogenerate
        "compare_type": True,
        # SQLite cannot ALTER constraints in place
        "render_as_batch": DB_URL.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a database connection."""
    context.configure(
        url=DB_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        {"sqlalchemy.url": DB_URL},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
