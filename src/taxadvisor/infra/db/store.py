"""Failure-absorbing access to chat sessions.

``SessionStore`` keeps the chat flow alive when the database is not.
Every operation runs through ``safe_operation``:

1. health check (``SELECT 1``)
2. on failure, dispose the pool and try the health check once more
3. run the operation, or skip it if the database is still unreachable

The outcome is a ``StoreResult``: either a value or a ``StoreDegraded``
failure.  Nothing is raised to the caller and nothing is retried beyond
the single reconnect.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from taxadvisor.core.errors import StoreDegraded
from taxadvisor.infra.id_utils import MESSAGE_PREFIX, SESSION_PREFIX, generate_id

from .models import ROLE_ASSISTANT, ROLE_USER, ChatMessage, ChatSession, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")

SQL_PING = "SELECT 1"

OP_CREATE_SESSION = "create_session"
OP_GET_SESSION = "get_session"
OP_APPEND_MESSAGE = "append_message"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a store operation: a value, or the failure that skipped it."""

    value: T | None = None
    failure: StoreDegraded | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class SessionStore:
    """Chat session persistence that degrades instead of raising."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory: async_sessionmaker[AsyncSession] = (
            async_sessionmaker(engine, expire_on_commit=False)
        )

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def _ping(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(text(SQL_PING))

    async def ensure_healthy(self) -> bool:
        """Check the connection, reconnecting once if the check fails."""
        try:
            await self._ping()
            return True
        except Exception:
            logger.warning("Database health check failed", exc_info=True)

        try:
            await self._engine.dispose()
            await self._ping()
        except Exception:
            logger.error("Database reconnection failed", exc_info=True)
            return False
        logger.info("Database connection re-established")
        return True

    async def safe_operation(
        self,
        name: str,
        op: Callable[[AsyncSession], Awaitable[T]],
    ) -> StoreResult[T]:
        """Run ``op`` in a fresh ``AsyncSession``; absorb every failure."""
        if not await self.ensure_healthy():
            logger.warning("Skipping %s: database unavailable", name)
            return StoreResult(failure=StoreDegraded(name))
        try:
            async with self._session_factory() as session:
                value = await op(session)
        except Exception as exc:
            logger.warning("Database operation %s failed", name, exc_info=True)
            return StoreResult(failure=StoreDegraded(name, exc))
        return StoreResult(value=value)

    # ------------------------------------------------------------------
    # Sessions & messages
    # ------------------------------------------------------------------

    async def create_session(self) -> StoreResult[ChatSession]:
        """Insert an empty session with a fresh ``sess_`` id."""

        async def _create(session: AsyncSession) -> ChatSession:
            chat_session = ChatSession(
                id=generate_id(SESSION_PREFIX),
                created_at=utcnow(),
                messages=[],
            )
            session.add(chat_session)
            await session.commit()
            return chat_session

        return await self.safe_operation(OP_CREATE_SESSION, _create)

    async def get_session(self, session_id: str) -> StoreResult[ChatSession | None]:
        """Load a session with its messages oldest-first; ``None`` on miss."""

        async def _get(session: AsyncSession) -> ChatSession | None:
            result = await session.execute(
                select(ChatSession)
                .where(ChatSession.id == session_id)
                .options(selectinload(ChatSession.messages))
            )
            return result.scalar_one_or_none()

        return await self.safe_operation(OP_GET_SESSION, _get)

    async def append_message(
        self, session_id: str, role: str, content: str
    ) -> StoreResult[ChatMessage]:
        """Persist one message at the end of ``session_id``."""
        if role not in (ROLE_USER, ROLE_ASSISTANT):
            raise ValueError(f"Unsupported message role: {role!r}")

        async def _append(session: AsyncSession) -> ChatMessage:
            message = ChatMessage(
                message_id=generate_id(MESSAGE_PREFIX),
                session_id=session_id,
                role=role,
                content=content,
                timestamp=utcnow(),
            )
            session.add(message)
            await session.commit()
            return message

        return await self.safe_operation(OP_APPEND_MESSAGE, _append)
