"""
Message type and its wire encoding.

Remote stores keep one JSON object per list element: {"role": ..., "content": ...}.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, get_args

from sessionkit.exceptions import MessageDecodeError

Role = Literal["user", "assistant", "system"]

ROLES: tuple[str, ...] = get_args(Role)


@dataclass(frozen=True)
class Message:
    """One role-tagged chat message. Immutable; sessions only append or discard."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role {self.role!r}; expected one of {', '.join(ROLES)}")

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        try:
            return cls(role=data["role"], content=data["content"])
        except (KeyError, TypeError, ValueError) as e:
            raise MessageDecodeError(
                "Stored message is malformed.",
                internal_message=f"{type(e).__name__}: {e}",
            ) from e

    @classmethod
    def from_json(cls, raw: str) -> "Message":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MessageDecodeError("Stored message is not valid JSON.", internal_message=str(e)) from e
        if not isinstance(data, Mapping):
            raise MessageDecodeError(
                "Stored message is not a JSON object.",
                internal_message=f"got {type(data).__name__}",
            )
        return cls.from_dict(data)


def decode_entry(entry: str | bytes | Mapping[str, Any]) -> Message:
    """
    Decode one list element read back from a remote store.

    Text is the normal case and is parsed as JSON; bytes (a redis client without
    decode_responses) are UTF-8 text. A mapping means the transport already decoded
    the JSON for us, so it is used as-is.
    """
    if isinstance(entry, (bytes, bytearray)):
        try:
            entry = bytes(entry).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MessageDecodeError("Stored message is not UTF-8 text.", internal_message=str(e)) from e
    if isinstance(entry, str):
        return Message.from_json(entry)
    if isinstance(entry, Mapping):
        return Message.from_dict(entry)
    raise MessageDecodeError(
        "Stored message has an unsupported type.",
        internal_message=f"got {type(entry).__name__}",
    )
