"""Chat turn orchestration.

One call to ``ChatOrchestrator.reply`` is one conversation turn:

1. load the session named by ``session_id`` (or create a new one)
2. build the prompt: system instruction + stored turns + new message
3. persist the user message
4. call the model
5. make sure the disclaimer is present
6. persist the assistant reply

Persistence is advisory: every store step may fail, in which case the
turn continues without history.  Only the model call can fail the request,
and its failure is classified before it propagates.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from taxadvisor.configs.system import ChatConfig, LLMConfig
from taxadvisor.core.errors import InvalidInput
from taxadvisor.core.llm import build_chat_model, classify_llm_error
from taxadvisor.infra.db import (
    ROLE_ASSISTANT,
    ROLE_USER,
    ChatMessage,
    ChatSession,
    SessionStore,
    rows_to_messages,
)
from taxadvisor.infra.id_utils import timestamp_id

from .models import ChatReply, ReplyMessage
from .prompt import append_disclaimer, build_prompt, content_text

logger = logging.getLogger(__name__)


def validate_message(message: Any, max_length: int | None = None) -> str:
    if not isinstance(message, str) or not message.strip():
        raise InvalidInput("Message is required", field="message")
    if max_length is not None and len(message) > max_length:
        raise InvalidInput(
            f"Message must be at most {max_length} characters", field="message"
        )
    return message


class ChatOrchestrator:
    """Turns a user message (plus optional session) into a persisted reply."""

    def __init__(
        self,
        store: SessionStore | None,
        chat_config: ChatConfig,
        llm_config: LLMConfig,
        llm: BaseChatModel | None = None,
    ) -> None:
        self._store = store
        self._chat = chat_config
        self._llm_config = llm_config
        self._llm = llm

    async def reply(self, message: Any, session_id: str | None = None) -> ChatReply:
        text = validate_message(message, self._chat.max_message_length)

        chat_session = await self._load_or_create(session_id)
        history = rows_to_messages(chat_session.messages) if chat_session else []
        prompt = build_prompt(
            self._chat.system_prompt,
            history,
            text,
            self._chat.max_history_messages,
        )

        if chat_session is not None:
            await self._persist(chat_session.id, ROLE_USER, text)

        generated = await self._generate(prompt)
        content = append_disclaimer(
            generated.strip() or self._chat.fallback_reply, self._chat.disclaimer
        )

        stored: ChatMessage | None = None
        if chat_session is not None:
            stored = await self._persist(chat_session.id, ROLE_ASSISTANT, content)

        now = datetime.now(timezone.utc)
        fallback_id = timestamp_id(now.timestamp())
        return ChatReply(
            session_id=chat_session.id if chat_session else fallback_id,
            message=ReplyMessage(
                id=stored.message_id if stored else fallback_id,
                content=content,
                timestamp=stored.timestamp if stored else now,
            ),
        )

    # ------------------------------------------------------------------
    # Persistence (best-effort)
    # ------------------------------------------------------------------

    async def _load_or_create(self, session_id: str | None) -> ChatSession | None:
        if self._store is None:
            return None
        if session_id:
            loaded = await self._store.get_session(session_id)
            if loaded.ok and loaded.value is not None:
                return loaded.value
            if loaded.ok:
                logger.info("Session %s not found; starting a new one", session_id)
        created = await self._store.create_session()
        if not created.ok:
            logger.warning(
                "Continuing without session persistence: %s", created.failure
            )
        return created.value

    async def _persist(
        self, session_id: str, role: str, content: str
    ) -> ChatMessage | None:
        result = await self._store.append_message(session_id, role, content)
        if not result.ok:
            logger.warning("Could not store %s message: %s", role, result.failure)
        return result.value

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def _generate(self, prompt: list[BaseMessage]) -> str:
        try:
            llm = self._llm or build_chat_model(self._llm_config)
            response = await llm.ainvoke(prompt)
        except Exception as exc:
            error = classify_llm_error(exc)
            logger.error(
                "Chat generation failed (%s)", type(error).__name__, exc_info=True
            )
            if error is exc:
                raise
            raise error from exc
        return content_text(response.content)
