"""Chat reply shapes returned to the API layer."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReplyMessage(BaseModel):
    """The assistant turn produced for one chat request."""

    id: str = Field(description="Stored message id, or a timestamp id")
    role: Literal["assistant"] = "assistant"
    content: str = Field(description="Generated text including the disclaimer")
    timestamp: datetime = Field(description="Creation time of the reply")


class ChatReply(BaseModel):
    """Session id plus the assistant reply."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str = Field(description="Persisted session id, or a timestamp id")
    message: ReplyMessage
