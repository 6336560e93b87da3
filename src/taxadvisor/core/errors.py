"""Error taxonomy shared by the tax engine, chat orchestrator and API."""

from __future__ import annotations


class TaxAdvisorError(Exception):
    """Base class for every error the service raises on purpose."""


class InvalidInput(TaxAdvisorError):
    """Raised for malformed or out-of-range user-supplied values."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ConfigurationError(TaxAdvisorError):
    """Raised when the text-generation credentials are missing or rejected."""


class RateLimited(TaxAdvisorError):
    """Raised when the text-generation provider reports quota exhaustion."""


class UpstreamError(TaxAdvisorError):
    """Raised for any other text-generation failure."""


class StoreDegraded(TaxAdvisorError):
    """A persistence failure absorbed by the session store.

    Never raised to callers; carried inside ``StoreResult.failure`` so the
    chat flow can continue without history for the current turn.
    """

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        detail = f"{operation} skipped"
        if cause is not None:
            detail = f"{operation} failed: {cause!r}"
        super().__init__(detail)
        self.operation = operation
        self.cause = cause
