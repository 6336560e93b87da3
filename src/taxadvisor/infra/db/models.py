"""SQLAlchemy ORM models for chat persistence.

All tables are managed by Alembic migrations.  The ``Base.metadata``
naming convention keeps constraint names deterministic across
environments, which ``alembic --autogenerate`` relies on.
"""

from datetime import datetime, timezone
from typing import Literal

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base with explicit naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ---------------------------------------------------------------------------
# Role constants & type
# ---------------------------------------------------------------------------

ROLE_USER: Literal["user"] = "user"
ROLE_ASSISTANT: Literal["assistant"] = "assistant"

Role = Literal["user", "assistant"]

# SQLite only autoincrements ``INTEGER PRIMARY KEY`` columns.
_SEQUENCE_TYPE = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class ChatSession(Base):
    """A conversation between one user and the assistant.

    Sessions are only ever appended to (via new ``ChatMessage`` rows);
    deletion is left to an external retention policy.
    """

    __tablename__ = "chat_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    messages: Mapped[list["ChatMessage"]] = relationship(
        back_populates="session",
        cascade="all, delete-orphan",
        order_by=lambda: [ChatMessage.timestamp, ChatMessage.id],
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<ChatSession(id={self.id!r})>"


class ChatMessage(Base):
    """One immutable turn of a conversation.

    ``id`` is an insertion sequence used to break ties between equal
    timestamps; ``message_id`` is the opaque identifier exposed to clients.
    """

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(
        _SEQUENCE_TYPE,
        primary_key=True,
        autoincrement=True,
    )
    message_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
    )
    session_id: Mapped[str] = mapped_column(
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    session: Mapped[ChatSession] = relationship(back_populates="messages")

    __table_args__ = (
        Index(
            "ix_chat_messages_session_id_timestamp",
            "session_id",
            "timestamp",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<ChatMessage(id={self.id}, session_id={self.session_id!r}, "
            f"role={self.role!r})>"
        )
