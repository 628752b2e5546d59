"""
In-process session store: a dict of user id to message list.

Nothing is persisted; sessions live as long as the store object. Methods are
coroutines only so this store is interchangeable with the remote ones.
"""

from __future__ import annotations

import structlog

from sessionkit.models import Message
from sessionkit.protocols import discard_count

log = structlog.get_logger(__name__)


class InMemoryStore:
    """Session store held in process memory. Good for tests, scripts and single-process apps."""

    def __init__(self) -> None:
        self._sessions: dict[str, list[Message]] = {}

    async def add_message(self, user_id: str, message: Message) -> None:
        self._sessions.setdefault(user_id, []).append(message)
        log.debug("session_message_added", backend="memory", user_id=user_id, role=message.role)

    async def get_session(self, user_id: str) -> list[Message]:
        return list(self._sessions.get(user_id, ()))

    async def reset_session(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)
        log.debug("session_reset", backend="memory", user_id=user_id)

    async def trim_session(self, user_id: str, memory_window: int) -> None:
        messages = self._sessions.get(user_id)
        if not messages:
            return
        discard = discard_count(len(messages), memory_window)
        if discard:
            self._sessions[user_id] = messages[discard:]
            log.debug("session_trimmed", backend="memory", user_id=user_id, discarded=discard)

    async def close(self) -> None:
        return None

    async def __aenter__(self) -> "InMemoryStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
