"""Conversational assistant: prompt assembly, model call, persistence."""

from .models import ChatReply, ReplyMessage  # noqa: F401
from .orchestrator import ChatOrchestrator, validate_message  # noqa: F401
from .prompt import append_disclaimer, build_prompt  # noqa: F401
