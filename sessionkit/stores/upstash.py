"""
Upstash session store over the Upstash Redis REST API (httpx).

Every command is a stateless POST of the Redis command as a JSON array, e.g.
["RPUSH", "sessionkit:alice", "{...}"], authenticated with a bearer token.
The API answers {"result": ...} or {"error": "..."}.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from sessionkit.config import UpstashStoreConfig
from sessionkit.exceptions import StoreConfigurationError, UpstashCommandError
from sessionkit.models import Message, decode_entry
from sessionkit.protocols import discard_count

log = structlog.get_logger(__name__)


def _error_detail(response: httpx.Response) -> Optional[str]:
    """The "error" field of a REST error body, if the body has one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


class UpstashStore:
    """
    Session store backed by Upstash Redis lists, reached over HTTP.

    No connection is kept between calls, so there is nothing to close. Errors from
    httpx (timeouts, refused connections, non-2xx replies) propagate unchanged.
    """

    def __init__(
        self,
        config: Optional[UpstashStoreConfig] = None,
        *,
        url: Optional[str] = None,
        token: Optional[str] = None,
        key_prefix: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        cfg = config or UpstashStoreConfig()
        self._config = UpstashStoreConfig(
            url=url if url is not None else cfg.url,
            token=token if token is not None else cfg.token,
            key_prefix=key_prefix if key_prefix is not None else cfg.key_prefix,
            timeout_seconds=cfg.timeout_seconds,
        )
        if not self._config.url or not self._config.token:
            raise StoreConfigurationError(
                "Upstash store needs both a REST url and a token.",
                internal_message="set UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN",
            )
        self._transport = transport

    @property
    def config(self) -> UpstashStoreConfig:
        return self._config

    @property
    def key_prefix(self) -> str:
        return self._config.key_prefix

    def _key(self, user_id: str) -> str:
        return f"{self._config.key_prefix}{user_id}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.token}",
            "Content-Type": "application/json",
        }

    async def _command(self, *args: Any) -> Any:
        """Run one Redis command and return its "result"."""
        command = str(args[0])
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_seconds, transport=self._transport) as client:
                response = await client.post(self._config.url, json=list(args), headers=self._headers())
            if response.is_error:
                detail = _error_detail(response)
                if detail:
                    raise UpstashCommandError(detail, command=command, internal_message=f"HTTP {response.status_code}")
                response.raise_for_status()
            body = response.json()
            if isinstance(body, dict) and body.get("error"):
                raise UpstashCommandError(str(body["error"]), command=command)
        except Exception as e:
            log.exception("upstash_command_failed", command=command, error=str(e), error_type=type(e).__name__)
            raise
        return body.get("result") if isinstance(body, dict) else None

    async def add_message(self, user_id: str, message: Message) -> None:
        key = self._key(user_id)
        await self._command("RPUSH", key, message.to_json())
        log.debug("session_message_added", backend="upstash", user_id=user_id, key=key, role=message.role)

    async def get_session(self, user_id: str) -> list[Message]:
        entries = await self._command("LRANGE", self._key(user_id), 0, -1)
        if not isinstance(entries, list):
            return []
        return [decode_entry(entry) for entry in entries]

    async def reset_session(self, user_id: str) -> None:
        key = self._key(user_id)
        await self._command("DEL", key)
        log.debug("session_reset", backend="upstash", user_id=user_id, key=key)

    async def trim_session(self, user_id: str, memory_window: int) -> None:
        key = self._key(user_id)
        length = await self._command("LLEN", key)
        discard = discard_count(int(length or 0), memory_window)
        if not discard:
            return
        await self._command("LTRIM", key, discard, -1)
        log.debug("session_trimmed", backend="upstash", user_id=user_id, key=key, discarded=discard)

    async def close(self) -> None:
        return None

    async def __aenter__(self) -> "UpstashStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
