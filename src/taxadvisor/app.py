"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from taxadvisor.api.chat import health_router
from taxadvisor.api.chat import router as advisor_router
from taxadvisor.api.exceptions import register_exception_handlers
from taxadvisor.configs.config import get_app_config
from taxadvisor.infra.db import build_db
from taxadvisor.infra.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the session store on startup and release it on shutdown."""
    config = get_app_config()
    logger.info("Starting taxadvisor")
    async with build_db(app, config):
        yield
    logger.info("Shutting down taxadvisor")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(get_app_config().logging)

    app = FastAPI(
        title="Tax Advisor",
        description="Charitable donation tax calculator with a chat assistant",
        version="0.1.0",
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(advisor_router)
    app.include_router(health_router)
    return app


app = get_app()
