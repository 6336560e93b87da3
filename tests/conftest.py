"""Shared fixtures: SQLite-backed session stores and a scripted chat model."""

from pathlib import Path

import pytest
import pytest_asyncio
from langchain_core.messages import AIMessage, BaseMessage
from sqlalchemy.ext.asyncio import create_async_engine

from taxadvisor.configs.system import ChatConfig, LLMConfig
from taxadvisor.core.chat import ChatOrchestrator
from taxadvisor.infra.db import SessionStore, create_schema

UNREACHABLE_DB_URI = "sqlite+aiosqlite:////nonexistent-taxadvisor-dir/missing/chat.db"


class ScriptedChatModel:
    """Stand-in for a LangChain chat model.

    Replies with the queued responses in order (repeating the last one) and
    records every prompt it receives.  An exception in the queue is raised
    instead of returned.
    """

    def __init__(self, *responses: object) -> None:
        self.responses = list(responses) or ["Here is some general guidance."]
        self.prompts: list[list[BaseMessage]] = []

    async def ainvoke(self, messages: list[BaseMessage]) -> AIMessage:
        self.prompts.append(list(messages))
        index = min(len(self.prompts) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, BaseException):
            raise response
        return AIMessage(content=response)


@pytest_asyncio.fixture
async def engine(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(engine) -> SessionStore:
    return SessionStore(engine)


@pytest_asyncio.fixture
async def unreachable_store():
    engine = create_async_engine(UNREACHABLE_DB_URI)
    yield SessionStore(engine)
    await engine.dispose()


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig()


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(api_key="test-key")


@pytest.fixture
def make_orchestrator(chat_config, llm_config):
    def factory(store, llm) -> ChatOrchestrator:
        return ChatOrchestrator(store, chat_config, llm_config, llm=llm)

    return factory


@pytest.fixture
def scripted_model():
    return ScriptedChatModel
