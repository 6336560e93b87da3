"""Chat-model construction and provider failure triage."""

import logging
import os

import openai
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from taxadvisor.configs.system import LLMConfig
from taxadvisor.core.errors import (
    ConfigurationError,
    RateLimited,
    TaxAdvisorError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"

_CREDENTIAL_MARKERS = ("api key", "api_key", "apikey")
_QUOTA_MARKERS = ("quota",)


def resolve_api_key(config: LLMConfig) -> str:
    return config.api_key or os.environ.get(OPENAI_API_KEY_ENV, "")


def build_chat_model(config: LLMConfig) -> BaseChatModel:
    """Create a ``ChatOpenAI`` client; fails fast when no API key is set.

    Provider-side retries are disabled: a failed generation is reported to
    the caller, never repeated.
    """
    api_key = resolve_api_key(config)
    if not api_key:
        logger.error("LLM API key is not configured")
        raise ConfigurationError("LLM API key is not configured")
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=api_key,
        model=config.model_name,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout.total_seconds(),
        max_retries=0,
    )


def classify_llm_error(exc: BaseException) -> TaxAdvisorError:
    """Map a provider failure onto the service error taxonomy."""
    if isinstance(exc, TaxAdvisorError):
        return exc
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ConfigurationError("LLM API key is invalid or missing")
    if isinstance(exc, openai.RateLimitError):
        return RateLimited("LLM API quota exceeded")

    message = str(exc).lower()
    if any(marker in message for marker in _CREDENTIAL_MARKERS):
        return ConfigurationError("LLM API key is invalid or missing")
    if any(marker in message for marker in _QUOTA_MARKERS):
        return RateLimited("LLM API quota exceeded")
    return UpstreamError("LLM request failed")
