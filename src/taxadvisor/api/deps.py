"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of writing
``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias maps to one
``get_*`` factory and can be overridden in tests via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from taxadvisor.configs.config import AppConfig, get_app_config, get_tax_config
from taxadvisor.configs.system import TaxConfig
from taxadvisor.core.chat import ChatOrchestrator
from taxadvisor.infra.db import SessionStore, get_session_store

AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
TaxConfigDep = Annotated[TaxConfig, Depends(get_tax_config)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


def get_chat_orchestrator(
    store: SessionStoreDep,
    config: AppConfigDep,
) -> ChatOrchestrator:
    """Per-request orchestrator; the model client is built on first use."""
    return ChatOrchestrator(store, config.chat, config.llm)


ChatOrchestratorDep = Annotated[ChatOrchestrator, Depends(get_chat_orchestrator)]
