"""Exceptions shared by the sync engine, its adapters and the CLI."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ServerListError",
    "ConfigError",
    "TransientStoreError",
    "RecordNotFound",
    "ConflictError",
    "CodecError",
    "VerificationFailure",
    "RetryExhausted",
]


class ServerListError(Exception):
    """Base class for every error raised by serverlist."""


class ConfigError(ServerListError):
    """Raised when a required setting is missing or malformed. Fatal, checked before any round."""

    def __init__(self, setting: str, message: str | None = None) -> None:
        self.setting = setting
        super().__init__(message or f"missing or invalid setting: {setting}")


class TransientStoreError(ServerListError):
    """Raised when a store read or write fails. The round is retried."""


class RecordNotFound(TransientStoreError):
    """Raised by a store when the record has never been written."""


class ConflictError(TransientStoreError):
    """Raised when the store rejects a write because its revision is stale."""

    def __init__(self, revision: int, *, message: str | None = None) -> None:
        self.revision = revision
        super().__init__(message or f"revision {revision} rejected by the store")


class CodecError(ServerListError):
    """Raised when a stored payload cannot be decoded into a member list."""


class VerificationFailure(ServerListError):
    """Raised when the verifying read does not show our own entry as fresh."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"verification failed: {reason}")


class RetryExhausted(ServerListError):
    """Raised when the retry policy gives up before a round succeeded."""

    def __init__(self, rounds: int, budget: str, *, last_error: Optional[BaseException] = None) -> None:
        self.rounds = rounds
        self.budget = budget
        self.last_error = last_error
        text = f"gave up after {rounds} round(s): {budget} exhausted"
        if last_error is not None:
            text += f" (last error: {last_error})"
        super().__init__(text)
