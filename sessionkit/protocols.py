"""Store contract shared by every session backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sessionkit.models import Message

# A session keeps at most MESSAGES_PER_WINDOW * memory_window messages (one user/assistant pair per step).
MESSAGES_PER_WINDOW = 2


@runtime_checkable
class SessionStore(Protocol):
    """Append, read, reset and trim per-user message lists."""

    async def add_message(self, user_id: str, message: Message) -> None: ...
    async def get_session(self, user_id: str) -> list[Message]: ...
    async def reset_session(self, user_id: str) -> None: ...
    async def trim_session(self, user_id: str, memory_window: int) -> None: ...
    async def close(self) -> None: ...


def max_messages(memory_window: int) -> int:
    """Retention cap for a given memory window."""
    return memory_window * MESSAGES_PER_WINDOW


def discard_count(length: int, memory_window: int) -> int:
    """How many of the oldest messages a trim drops from a session of this length."""
    return max(length - max_messages(memory_window), 0)
