"""
Session store backends: in-process, Redis (raw connection), Upstash (REST).

Usage:
    from sessionkit.stores import create_store

    # Backend picked by STORE_BACKEND (memory | redis | upstash)
    store = create_store()

    # Or explicitly
    store = RedisStore(url="redis://localhost:6379/0", key_prefix="chat:")
    store = UpstashStore(url="https://...upstash.io", token="...")
"""

from __future__ import annotations

from typing import Any, Optional

from sessionkit.config import RedisStoreConfig, UpstashStoreConfig, get_settings
from sessionkit.exceptions import StoreConfigurationError
from sessionkit.protocols import SessionStore
from sessionkit.stores.memory import InMemoryStore
from sessionkit.stores.redis import RedisStore
from sessionkit.stores.upstash import UpstashStore


def create_store(settings: Optional[Any] = None) -> SessionStore:
    """Build the store named by settings.store_backend (defaults to get_settings())."""
    settings = settings or get_settings()
    backend = getattr(settings, "store_backend", "memory")
    if backend == "memory":
        return InMemoryStore()
    if backend == "redis":
        return RedisStore(RedisStoreConfig.from_settings(settings))
    if backend == "upstash":
        return UpstashStore(UpstashStoreConfig.from_settings(settings))
    raise StoreConfigurationError(
        f"Unknown store backend {backend!r}.",
        internal_message="store_backend must be one of memory, redis, upstash",
    )


__all__ = ["InMemoryStore", "RedisStore", "UpstashStore", "create_store"]
