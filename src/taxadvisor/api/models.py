"""Pydantic models for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatRequest(BaseModel):
    """Request model for the chat endpoint.

    ``message`` is left loosely typed so a missing or non-text value is
    reported as invalid input by the chat flow itself.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: Any = Field(default=None, description="User message text")
    session_id: str | None = Field(
        default=None, description="Session to continue, if any"
    )


class CalculateRequest(BaseModel):
    """Request model for the calculation endpoint."""

    type: str = Field(description="estimate_savings or evaluate_donation")
    data: dict[str, Any] = Field(
        default_factory=dict, description="Form fields, usually as strings"
    )


class HealthResponse(BaseModel):
    status: str = "ok"
    database: bool = Field(description="Whether the session store is reachable")
