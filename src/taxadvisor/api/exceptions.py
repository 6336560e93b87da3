"""Exception handlers translating the error taxonomy into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taxadvisor.core.errors import (
    ConfigurationError,
    InvalidInput,
    RateLimited,
    UpstreamError,
)

logger = logging.getLogger(__name__)

CODE_INVALID_INPUT = "INVALID_INPUT"
CODE_CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
CODE_RATE_LIMITED = "RATE_LIMITED"
CODE_UPSTREAM_ERROR = "UPSTREAM_ERROR"

RETRY_AFTER_SECONDS = "30"


def _error(status_code: int, detail: str, code: str, **kwargs) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code},
        **kwargs,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(InvalidInput)
    async def handle_invalid_input(
        request: Request, exc: InvalidInput
    ) -> JSONResponse:
        return _error(400, str(exc), CODE_INVALID_INPUT)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(400, "Malformed request body", CODE_INVALID_INPUT)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return _error(500, str(exc), CODE_CONFIGURATION_ERROR)

    @app.exception_handler(RateLimited)
    async def handle_rate_limited(request: Request, exc: RateLimited) -> JSONResponse:
        return _error(
            429,
            str(exc),
            CODE_RATE_LIMITED,
            headers={"Retry-After": RETRY_AFTER_SECONDS},
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(
        request: Request, exc: UpstreamError
    ) -> JSONResponse:
        return _error(500, "Internal server error", CODE_UPSTREAM_ERROR)
