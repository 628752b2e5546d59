"""
Session coordinator: the single entry point for callers.

Owns the memory window and delegates storage to one SessionStore chosen at construction.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from sessionkit.config import DEFAULT_MEMORY_WINDOW, get_settings
from sessionkit.exceptions import InvalidMemoryWindowError
from sessionkit.models import Message, Role
from sessionkit.protocols import SessionStore
from sessionkit.stores import InMemoryStore, create_store

log = structlog.get_logger(__name__)


def _check_window(window: int) -> int:
    if isinstance(window, bool) or not isinstance(window, int) or window < 1:
        raise InvalidMemoryWindowError(
            "Memory window must be a positive integer.",
            internal_message=f"got {window!r}",
        )
    return window


class SessionManager:
    """
    Short-term conversation memory per user.

    Every send appends and then trims the session to 2 x memory_window messages before
    returning. Changing the window takes effect on the next send, not retroactively.
    memory_window must be an int >= 1; 0 or a negative value raises InvalidMemoryWindowError
    (leave it as None for the default of 10).
    """

    def __init__(self, *, memory_window: Optional[int] = None, store: Optional[SessionStore] = None) -> None:
        self._memory_window = _check_window(memory_window if memory_window is not None else DEFAULT_MEMORY_WINDOW)
        self._store: SessionStore = store if store is not None else InMemoryStore()

    @classmethod
    def from_settings(cls, settings: Optional[Any] = None) -> "SessionManager":
        """Build window and store from settings (defaults to get_settings())."""
        settings = settings or get_settings()
        return cls(
            memory_window=getattr(settings, "memory_window", DEFAULT_MEMORY_WINDOW),
            store=create_store(settings),
        )

    @property
    def store(self) -> SessionStore:
        return self._store

    async def send_message(self, user_id: str, message: Message) -> None:
        window = self._memory_window
        await self._store.add_message(user_id, message)
        await self._store.trim_session(user_id, window)
        log.debug("session_message_sent", user_id=user_id, role=message.role, memory_window=window)

    async def get_session(self, user_id: str) -> list[Message]:
        return await self._store.get_session(user_id)

    async def reset_session(self, user_id: str) -> None:
        await self._store.reset_session(user_id)
        log.info("session_cleared", user_id=user_id)

    async def _add(self, user_id: str, role: Role, content: str) -> None:
        await self.send_message(user_id, Message(role=role, content=content))

    async def add_user_message(self, user_id: str, content: str) -> None:
        await self._add(user_id, "user", content)

    async def add_assistant_message(self, user_id: str, content: str) -> None:
        await self._add(user_id, "assistant", content)

    async def add_system_message(self, user_id: str, content: str) -> None:
        await self._add(user_id, "system", content)

    def get_memory_window(self) -> int:
        return self._memory_window

    def set_memory_window(self, window: int) -> None:
        self._memory_window = _check_window(window)
        log.info("memory_window_changed", memory_window=window)

    memory_window = property(get_memory_window, set_memory_window)

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
