"""Conversions between stored chat rows and LangChain messages.

- ``ChatMessage`` row → ``BaseMessage``  (history replay)
- role/content pairs  → ``BaseMessage``  (prompt assembly)
"""

from collections.abc import Iterable

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from .models import ROLE_ASSISTANT, ROLE_USER, ChatMessage


def to_langchain_message(
    role: str, content: str, message_id: str | None = None
) -> BaseMessage:
    """Build the LangChain message for a ``user`` or ``assistant`` turn."""
    if role == ROLE_USER:
        return HumanMessage(content=content, id=message_id)
    if role == ROLE_ASSISTANT:
        return AIMessage(content=content, id=message_id)
    raise ValueError(f"Unsupported message role: {role!r}")


def row_to_message(row: ChatMessage) -> BaseMessage:
    return to_langchain_message(row.role, row.content, row.message_id)


def rows_to_messages(rows: Iterable[ChatMessage]) -> list[BaseMessage]:
    """Convert rows already ordered by ``(timestamp, id)``."""
    return [row_to_message(row) for row in rows]
