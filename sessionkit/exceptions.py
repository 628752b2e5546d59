"""
Exceptions for the sessionkit package.

Transport errors from the backend clients (redis-py, httpx) are never wrapped;
these cover what sessionkit itself detects.
"""

from __future__ import annotations


class SessionKitError(Exception):
    """Base exception for session memory errors."""

    def __init__(self, message: str, *, internal_message: str | None = None, **kwargs: object) -> None:
        super().__init__(message)
        self.message = message
        self.internal_message = internal_message


class MessageDecodeError(SessionKitError, ValueError):
    """A stored entry could not be decoded into a Message."""


class InvalidMemoryWindowError(SessionKitError, ValueError):
    """Memory window must be a positive integer."""


class StoreConfigurationError(SessionKitError):
    """Backend is missing required configuration (url, token, backend name)."""


class UpstashCommandError(SessionKitError):
    """Upstash REST API answered a command with an error body."""

    def __init__(self, message: str, *, command: str = "", **kwargs: object) -> None:
        super().__init__(message, **kwargs)
        self.command = command
