"""HTTP client for the tax advisor API."""

import logging
from typing import Any

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when the API answers with an error or cannot be reached."""

    def __init__(self, message: str, *, code: str = "HTTP_ERROR") -> None:
        super().__init__(message)
        self.code = code


class AdvisorAPIClient:
    """Thin async wrapper around the chat and calculate endpoints."""

    def __init__(self, config: CLIConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def chat(self, message: str, session_id: str | None = None) -> dict:
        """Send one chat message; returns ``{sessionId, message}``."""
        payload: dict[str, Any] = {"message": message}
        if session_id:
            payload["sessionId"] = session_id
        return await self._post(self.config.chat_url, payload)

    async def calculate(self, kind: str, data: dict[str, str]) -> dict:
        """Submit a calculation form; returns the camelCase result."""
        return await self._post(
            self.config.calculate_url, {"type": kind, "data": data}
        )

    async def _post(self, url: str, payload: dict[str, Any]) -> dict:
        logger.debug("POST %s %s", url, payload)
        try:
            response = await self.client.post(url, json=payload)
        except httpx.TimeoutException as exc:
            raise APIError("Request timed out.", code="TIMEOUT") from exc
        except httpx.ConnectError as exc:
            raise APIError(f"Connection error: {exc}", code="CONNECTION_ERROR") from exc

        if response.status_code != 200:
            try:
                body = response.json()
            except ValueError:
                body = {"detail": response.text}
            raise APIError(
                f"HTTP {response.status_code}: {body.get('detail', '')}",
                code=body.get("code", "HTTP_ERROR"),
            )
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
