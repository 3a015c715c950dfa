"""Request, response and config models for the Claude CLI service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

DEFAULT_COMMAND: tuple[str, ...] = ("claude", "--print")


class FailureClass(str, Enum):
    """Normalized failure classes surfaced on failed responses."""

    SPAWN_ERROR = "spawn_error"
    TIMEOUT = "timeout"
    NON_ZERO_EXIT = "non_zero_exit"
    PARSE_ERROR = "parse_error"
    INTERNAL_ERROR = "internal_error"


class ClaudeCliError(RuntimeError):
    """Base error for the Claude CLI service."""


class QueueClearedError(ClaudeCliError):
    """Pending request was discarded by an explicit queue clear."""

    def __init__(self, message: str = "Queue cleared") -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Queue, timeout and retry policy. Frozen once the service is built."""

    max_concurrent: int = 1
    default_timeout_ms: int = 120_000
    retry_on_error: bool = True
    max_retries: int = 2
    retry_delay_ms: int = 1_000
    retry_on_timeout: bool = True
    command: tuple[str, ...] = DEFAULT_COMMAND

    @classmethod
    def merged(cls, overrides: dict[str, Any] | None = None) -> ServiceConfig:
        """Merge caller overrides over the documented defaults."""

        if not overrides:
            return cls()
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown service config keys: {', '.join(unknown)}")
        values = dict(overrides)
        if "command" in values:
            values["command"] = tuple(values["command"])
        return replace(cls(), **values)


@dataclass(slots=True)
class ClaudeCliRequest:
    """One prompt to run through the Claude CLI."""

    prompt: str
    json_schema: str | None = None
    working_directory: str | None = None
    timeout_ms: int | None = None
    priority: int = 0


@dataclass(slots=True)
class ClaudeCliResponse:
    """Terminal outcome delivered to the caller."""

    success: bool
    data: Any = None
    raw_output: str = ""
    error: str | None = None
    duration_ms: int = 0
    failure_class: FailureClass | None = None
    attempts: int = 1

    def to_dict(self) -> dict[str, object]:
        """Serialize for CLI output and IPC bridges."""

        return {
            "success": self.success,
            "data": self.data,
            "raw_output": self.raw_output,
            "error": self.error,
            "duration_ms": self.duration_ms,
            "failure_class": self.failure_class.value if self.failure_class else None,
            "attempts": self.attempts,
        }


@dataclass(slots=True)
class QueueItem:
    """Pending request tracked by the queue until dispatch or clear."""

    sequence: int
    request: ClaudeCliRequest
    enqueued_at: float
    future: asyncio.Future[ClaudeCliResponse] = field(repr=False)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (-self.request.priority, self.sequence)


@dataclass(frozen=True, slots=True)
class QueueStatus:
    """Point-in-time queue snapshot."""

    queue_length: int
    active_requests: int
