"""Prefixed ID generation.

Public-facing IDs use a ``{prefix}_{random}`` format so the origin of any
ID is visible at a glance:

- ``sess_a8Kx3nQ9mP2r``  — chat session
- ``msg_kJ3pW7mD4bNx``   — chat message

IDs synthesized when persistence is unavailable are plain millisecond
timestamps instead (see ``timestamp_id``).
"""

import secrets
import string
import time

_ALPHABET = string.ascii_letters + string.digits  # a-z A-Z 0-9
_DEFAULT_LENGTH = 12  # ~71 bits of entropy

SESSION_PREFIX = "sess"
MESSAGE_PREFIX = "msg"


def generate_id(prefix: str, length: int = _DEFAULT_LENGTH) -> str:
    """Generate a prefixed random ID.

    Args:
        prefix: Short descriptor (``"sess"`` or ``"msg"``).
        length: Number of random alphanumeric characters after the prefix.

    Returns:
        ``"{prefix}_{random}"`` string.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{suffix}"


def timestamp_id(now: float | None = None) -> str:
    """Millisecond epoch timestamp as a string, for unpersisted replies."""
    seconds = time.time() if now is None else now
    return str(int(seconds * 1000))
