"""
sessionkit: short-term conversation memory for chat apps.

Appends role-tagged messages to a per-user session, caps each session at
2 x memory_window messages, and reads or resets history. Storage is pluggable:
in-process, Redis, or Upstash Redis over REST.

Example (in-process, defaults):
    from sessionkit import SessionManager

    sessions = SessionManager()
    await sessions.add_user_message("alice", "Hi!")
    await sessions.add_assistant_message("alice", "Hello, how can I help?")
    history = await sessions.get_session("alice")

Example (Redis, from env):
    from sessionkit import SessionManager, RedisStore, RedisStoreConfig

    async with SessionManager(memory_window=5, store=RedisStore(RedisStoreConfig.from_env())) as sessions:
        await sessions.add_user_message("alice", "Hi!")

Example (backend chosen by STORE_BACKEND):
    sessions = SessionManager.from_settings()
"""

from sessionkit.config import RedisStoreConfig, Settings, UpstashStoreConfig, get_settings
from sessionkit.exceptions import (
    InvalidMemoryWindowError,
    MessageDecodeError,
    SessionKitError,
    StoreConfigurationError,
    UpstashCommandError,
)
from sessionkit.logging import configure_logging
from sessionkit.manager import SessionManager
from sessionkit.models import Message, Role, decode_entry
from sessionkit.protocols import MESSAGES_PER_WINDOW, SessionStore
from sessionkit.stores import InMemoryStore, RedisStore, UpstashStore, create_store

__all__ = [
    "SessionManager",
    "Message",
    "Role",
    "decode_entry",
    "SessionStore",
    "MESSAGES_PER_WINDOW",
    "InMemoryStore",
    "RedisStore",
    "UpstashStore",
    "create_store",
    "Settings",
    "get_settings",
    "RedisStoreConfig",
    "UpstashStoreConfig",
    "configure_logging",
    "SessionKitError",
    "MessageDecodeError",
    "InvalidMemoryWindowError",
    "StoreConfigurationError",
    "UpstashCommandError",
]
