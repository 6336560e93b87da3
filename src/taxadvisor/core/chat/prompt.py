"""Prompt assembly and reply post-processing."""

from collections.abc import Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage


def build_prompt(
    system_prompt: str,
    history: Sequence[BaseMessage],
    message: str,
    max_history: int | None = None,
) -> list[BaseMessage]:
    """System instruction, then prior turns oldest-first, then the new turn.

    ``max_history`` keeps only the most recent stored turns.  The system
    instruction is never part of the stored history.
    """
    turns = list(history)
    if max_history is not None:
        turns = turns[-max_history:] if max_history > 0 else []
    return [SystemMessage(content=system_prompt), *turns, HumanMessage(content=message)]


def append_disclaimer(text: str, disclaimer: str) -> str:
    """Make ``disclaimer`` the closing sentence of ``text``, exactly once.

    A reply that already ends with the disclaimer only loses trailing
    whitespace.
    Copies the model placed elsewhere in the text are removed and the
    disclaimer is appended after the remaining body.
    """
    body = text.rstrip()
    if body.endswith(disclaimer) and body.count(disclaimer) == 1:
        return body
    body = body.replace(disclaimer, "").strip()
    if not body:
        return disclaimer
    return f"{body}\n\n{disclaimer}"


def content_text(content: str | list) -> str:
    """Flatten a LangChain message ``content`` into plain text."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
