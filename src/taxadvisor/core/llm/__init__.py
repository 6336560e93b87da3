"""LLM client construction as a LangChain ``BaseChatModel``."""

from .client import build_chat_model, classify_llm_error  # noqa: F401
