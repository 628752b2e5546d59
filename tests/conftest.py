"""
Shared fixtures: list-store doubles for Redis and the Upstash REST API.

Both keep lists in a plain dict and implement only the commands the stores issue.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
import structlog

from sessionkit.config import Settings, get_settings


def _ltrim(lists: dict[str, list[Any]], key: str, start: int, stop: int) -> None:
    items = lists.get(key, [])
    end = len(items) if stop == -1 else stop + 1
    kept = items[start:end]
    if kept:
        lists[key] = kept
    else:
        lists.pop(key, None)


class FakeRedis:
    """Async stand-in for redis.asyncio.Redis list commands (decode_responses=True)."""

    def __init__(self) -> None:
        self.lists: dict[str, list[str]] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    async def rpush(self, key: str, *values: str) -> int:
        self.calls.append(("rpush", key, *values))
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        self.calls.append(("lrange", key, start, stop))
        items = self.lists.get(key, [])
        end = len(items) if stop == -1 else stop + 1
        return list(items[start:end])

    async def delete(self, *keys: str) -> int:
        self.calls.append(("delete", *keys))
        return sum(1 for key in keys if self.lists.pop(key, None) is not None)

    async def llen(self, key: str) -> int:
        self.calls.append(("llen", key))
        return len(self.lists.get(key, []))

    async def ltrim(self, key: str, start: int, stop: int) -> bool:
        self.calls.append(("ltrim", key, start, stop))
        _ltrim(self.lists, key, start, stop)
        return True

    async def aclose(self) -> None:
        self.closed = True


class BytesFakeRedis(FakeRedis):
    """Like FakeRedis but replies as a client built without decode_responses: list items are bytes."""

    async def lrange(self, key: str, start: int, stop: int) -> list[bytes]:
        return [item.encode("utf-8") for item in await super().lrange(key, start, stop)]


class FakeUpstash:
    """Request handler for httpx.MockTransport that speaks the Upstash REST command format."""

    def __init__(self, token: str = "test-token") -> None:
        self.token = token
        self.lists: dict[str, list[Any]] = {}
        self.commands: list[list[Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"error": "WRONGPASS invalid or missing auth token"})
        command = json.loads(request.content)
        self.commands.append(command)
        name, key, *args = command
        name = name.upper()
        if name == "RPUSH":
            self.lists.setdefault(key, []).extend(args)
            return httpx.Response(200, json={"result": len(self.lists[key])})
        if name == "LRANGE":
            start, stop = int(args[0]), int(args[1])
            items = self.lists.get(key, [])
            end = len(items) if stop == -1 else stop + 1
            return httpx.Response(200, json={"result": items[start:end]})
        if name == "DEL":
            return httpx.Response(200, json={"result": int(self.lists.pop(key, None) is not None)})
        if name == "LLEN":
            return httpx.Response(200, json={"result": len(self.lists.get(key, []))})
        if name == "LTRIM":
            _ltrim(self.lists, key, int(args[0]), int(args[1]))
            return httpx.Response(200, json={"result": "OK"})
        return httpx.Response(400, json={"error": f"ERR unknown command '{name}'"})


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def bytes_redis() -> BytesFakeRedis:
    return BytesFakeRedis()


@pytest.fixture
def fake_upstash() -> FakeUpstash:
    return FakeUpstash()


@pytest.fixture
def upstash_transport(fake_upstash: FakeUpstash) -> httpx.MockTransport:
    return httpx.MockTransport(fake_upstash)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run each test away from any real .env or env vars, with a fresh settings cache."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
