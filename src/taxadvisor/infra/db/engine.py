"""Async SQLAlchemy engine lifecycle.

The engine (and its connection pool) is process-wide: ``get_engine``
creates it on first use and hands back the same instance for the rest of
the process, including across app restarts inside one interpreter (dev
reloads, test clients).  ``build_db`` wires it into ``app.state`` for the
lifetime of the FastAPI app and disposes the pool on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from taxadvisor.configs.config import AppConfig
from taxadvisor.configs.system import ThirdPartyConfig
from taxadvisor.infra.singleton import singleton

from .models import Base
from .store import SessionStore

logger = logging.getLogger(__name__)

_SQLITE_SCHEME = "sqlite"


# ---------------------------------------------------------------------------
# Process-wide engine
# ---------------------------------------------------------------------------


@singleton
def get_engine(config: ThirdPartyConfig) -> AsyncEngine:
    """Create the shared ``AsyncEngine`` once; later calls reuse it."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if not config.database_uri.startswith(_SQLITE_SCHEME):
        kwargs["pool_size"] = config.pool_size
        kwargs["max_overflow"] = config.max_overflow
    logger.info("Creating database engine")
    return create_async_engine(config.database_uri, **kwargs)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables directly (tests and local SQLite; prod uses Alembic)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def build_db(app: FastAPI, config: AppConfig) -> AsyncIterator[None]:
    """Attach the engine and ``SessionStore`` to ``app.state``."""
    engine = get_engine(config.third_party)
    app.state.engine = engine
    app.state.session_store = SessionStore(engine)
    try:
        yield
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Per-request dependencies — read from app.state
# ---------------------------------------------------------------------------


def get_session_store(request: Request) -> SessionStore:
    """Return the ``SessionStore`` created in lifespan."""
    return request.app.state.session_store
