"""
Configuration for session memory and its storage backends.

Settings come from environment variables (and a local .env), from your app's settings
object, or are passed explicitly so any app can use sessionkit without this module's env.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KEY_PREFIX = "sessionkit:"
DEFAULT_MEMORY_WINDOW = 10

StoreBackend = Literal["memory", "redis", "upstash"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Session policy
    memory_window: int = DEFAULT_MEMORY_WINDOW  # cap is 2 x memory_window messages
    store_backend: StoreBackend = "memory"
    key_prefix: str = DEFAULT_KEY_PREFIX

    # Redis (raw connection)
    redis_url: Optional[str] = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_max_retries: int = 3
    redis_socket_timeout: Optional[float] = None  # seconds; None waits indefinitely

    # Upstash (REST)
    upstash_redis_rest_url: Optional[str] = None
    upstash_redis_rest_token: Optional[str] = None
    upstash_timeout_seconds: float = 10.0

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class RedisStoreConfig:
    """Connection settings for the Redis-backed store. url wins over host/port when set."""

    url: Optional[str] = None
    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    key_prefix: str = DEFAULT_KEY_PREFIX
    max_retries: int = 3
    socket_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "RedisStoreConfig":
        """Build config from environment variables (REDIS_URL, REDIS_HOST, KEY_PREFIX, etc.)."""
        return cls.from_settings(Settings())

    @classmethod
    def from_settings(cls, settings: Any) -> "RedisStoreConfig":
        """Build from any object with redis_* and key_prefix attributes."""
        return cls(
            url=getattr(settings, "redis_url", None),
            host=getattr(settings, "redis_host", "localhost"),
            port=getattr(settings, "redis_port", 6379),
            password=getattr(settings, "redis_password", None),
            key_prefix=getattr(settings, "key_prefix", DEFAULT_KEY_PREFIX),
            max_retries=getattr(settings, "redis_max_retries", 3),
            socket_timeout=getattr(settings, "redis_socket_timeout", None),
        )


@dataclass(frozen=True)
class UpstashStoreConfig:
    """REST endpoint and token for the Upstash-backed store. Both are required."""

    url: str = ""
    token: str = ""
    key_prefix: str = DEFAULT_KEY_PREFIX
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "UpstashStoreConfig":
        """Build config from UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN."""
        return cls.from_settings(Settings())

    @classmethod
    def from_settings(cls, settings: Any) -> "UpstashStoreConfig":
        """Build from any object with upstash_* and key_prefix attributes."""
        return cls(
            url=getattr(settings, "upstash_redis_rest_url", None) or "",
            token=getattr(settings, "upstash_redis_rest_token", None) or "",
            key_prefix=getattr(settings, "key_prefix", DEFAULT_KEY_PREFIX),
            timeout_seconds=getattr(settings, "upstash_timeout_seconds", 10.0),
        )
