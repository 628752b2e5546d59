"""
Redis session store over a persistent connection (redis.asyncio).

Each user gets one list key, "<key_prefix><user_id>", holding JSON-encoded messages
oldest first. Failures from redis-py are logged and re-raised as-is.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import redis.asyncio as aioredis
import structlog
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from sessionkit.config import RedisStoreConfig
from sessionkit.models import Message, decode_entry
from sessionkit.protocols import discard_count

log = structlog.get_logger(__name__)

# Hosts under this domain only accept TLS connections.
MANAGED_TLS_DOMAIN = "upstash.io"


def requires_tls(host: Optional[str]) -> bool:
    return bool(host) and (host == MANAGED_TLS_DOMAIN or host.endswith("." + MANAGED_TLS_DOMAIN))


def _tls_url(url: str) -> str:
    """Upgrade redis:// to rediss:// for managed hosts; leave every other url alone."""
    parts = urlsplit(url)
    if parts.scheme == "redis" and requires_tls(parts.hostname):
        return urlunsplit(parts._replace(scheme="rediss"))
    return url


class RedisStore:
    """
    Session store backed by Redis lists.

    - url (redis:// or rediss://) takes precedence over host/port/password.
    - Commands retry at most max_retries times on connection errors and timeouts; there is
      no offline queue, so a dead connection fails the call instead of buffering it.
    - Call disconnect() (or use `async with`) to close the connection.
    """

    def __init__(
        self,
        config: Optional[RedisStoreConfig] = None,
        *,
        url: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        password: Optional[str] = None,
        key_prefix: Optional[str] = None,
        client: Optional[aioredis.Redis] = None,
    ) -> None:
        cfg = config or RedisStoreConfig()
        self._config = RedisStoreConfig(
            url=url if url is not None else cfg.url,
            host=host if host is not None else cfg.host,
            port=port if port is not None else cfg.port,
            password=password if password is not None else cfg.password,
            key_prefix=key_prefix if key_prefix is not None else cfg.key_prefix,
            max_retries=cfg.max_retries,
            socket_timeout=cfg.socket_timeout,
        )
        self._redis = client if client is not None else self._build_client(self._config)

    @staticmethod
    def _build_client(cfg: RedisStoreConfig) -> aioredis.Redis:
        retry = Retry(ExponentialBackoff(), cfg.max_retries)
        retry_on_error = [RedisConnectionError, RedisTimeoutError]
        if cfg.url:
            log.info("redis_store_configured", mode="url", url_redacted="redis://***")
            return aioredis.from_url(
                _tls_url(cfg.url),
                decode_responses=True,
                retry=retry,
                retry_on_error=retry_on_error,
                socket_timeout=cfg.socket_timeout,
            )
        log.info("redis_store_configured", mode="host", host=cfg.host, port=cfg.port)
        return aioredis.Redis(
            host=cfg.host,
            port=cfg.port,
            password=cfg.password,
            ssl=requires_tls(cfg.host),
            decode_responses=True,
            retry=retry,
            retry_on_error=retry_on_error,
            socket_timeout=cfg.socket_timeout,
        )

    @property
    def config(self) -> RedisStoreConfig:
        return self._config

    @property
    def key_prefix(self) -> str:
        return self._config.key_prefix

    def _key(self, user_id: str) -> str:
        return f"{self._config.key_prefix}{user_id}"

    async def add_message(self, user_id: str, message: Message) -> None:
        key = self._key(user_id)
        try:
            await self._redis.rpush(key, message.to_json())
        except Exception as e:
            log.exception("redis_store_add_failed", user_id=user_id, key=key, error=str(e), error_type=type(e).__name__)
            raise
        log.debug("session_message_added", backend="redis", user_id=user_id, key=key, role=message.role)

    async def get_session(self, user_id: str) -> list[Message]:
        key = self._key(user_id)
        try:
            entries = await self._redis.lrange(key, 0, -1)
        except Exception as e:
            log.exception("redis_store_get_failed", user_id=user_id, key=key, error=str(e), error_type=type(e).__name__)
            raise
        return [decode_entry(entry) for entry in entries]

    async def reset_session(self, user_id: str) -> None:
        key = self._key(user_id)
        try:
            await self._redis.delete(key)
        except Exception as e:
            log.exception("redis_store_reset_failed", user_id=user_id, key=key, error=str(e), error_type=type(e).__name__)
            raise
        log.debug("session_reset", backend="redis", user_id=user_id, key=key)

    async def trim_session(self, user_id: str, memory_window: int) -> None:
        key = self._key(user_id)
        try:
            length = await self._redis.llen(key)
            discard = discard_count(length, memory_window)
            if not discard:
                return
            await self._redis.ltrim(key, discard, -1)
        except Exception as e:
            log.exception("redis_store_trim_failed", user_id=user_id, key=key, error=str(e), error_type=type(e).__name__)
            raise
        log.debug("session_trimmed", backend="redis", user_id=user_id, key=key, discarded=discard)

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()
        log.info("redis_store_disconnected")

    async def close(self) -> None:
        await self.disconnect()

    async def __aenter__(self) -> "RedisStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
