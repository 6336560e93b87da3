"""Alembic environment configuration — async-aware.

Reads the database URL from ``TAXADVISOR_THIRD_PARTY__DATABASE_URI`` (or
falls back to the ``AppConfig`` value) so the same URI is used locally, in
CI and in deployment.
"""

import asyncio
import os

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine

# Import Base.metadata so --autogenerate can detect model changes.
from taxadvisor.infra.db.models import Base

target_metadata = Base.metadata

DATABASE_URI_ENV = "TAXADVISOR_THIRD_PARTY__DATABASE_URI"


def _get_database_url() -> str:
    """Resolve the database URL from env or application config."""
    url = os.environ.get(DATABASE_URI_ENV)
    if url:
        return url
    from taxadvisor.configs.config import get_app_config

    return get_app_config().third_party.database_uri


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (emit SQL without a live DB)."""
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    """Run migrations against a live connection."""
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode with an async engine."""
    engine = create_async_engine(_get_database_url())
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
