"""Async relational persistence for chat sessions (engine, ORM models, store)."""

from .converters import row_to_message, rows_to_messages, to_langchain_message
from .engine import build_db, create_schema, get_engine, get_session_store
from .models import ROLE_ASSISTANT, ROLE_USER, Base, ChatMessage, ChatSession, Role
from .store import SessionStore, StoreResult

__all__ = [
    "build_db",
    "create_schema",
    "get_engine",
    "get_session_store",
    "row_to_message",
    "rows_to_messages",
    "to_langchain_message",
    "Base",
    "ChatMessage",
    "ChatSession",
    "Role",
    "ROLE_ASSISTANT",
    "ROLE_USER",
    "SessionStore",
    "StoreResult",
]
