"""Runtime configuration for the Claude CLI service."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field

from journey_ai.claude_cli.models import DEFAULT_COMMAND, ServiceConfig


@dataclass(slots=True)
class ClaudeCliSettings:
    """Claude CLI queue, timeout and retry settings."""

    max_concurrent: int = 1
    default_timeout_ms: int = 120_000
    retry_on_error: bool = True
    max_retries: int = 2
    retry_delay_ms: int = 1_000
    retry_on_timeout: bool = True
    command: tuple[str, ...] = DEFAULT_COMMAND


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    claude_cli: ClaudeCliSettings = field(default_factory=ClaudeCliSettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults matching the desktop app."""

        return cls(
            claude_cli=ClaudeCliSettings(
                max_concurrent=int(os.getenv("JOURNEY_AI_CLAUDE_MAX_CONCURRENT", "1")),
                default_timeout_ms=int(
                    os.getenv("JOURNEY_AI_CLAUDE_DEFAULT_TIMEOUT_MS", "120000"),
                ),
                retry_on_error=_env_bool("JOURNEY_AI_CLAUDE_RETRY_ON_ERROR", default=True),
                max_retries=int(os.getenv("JOURNEY_AI_CLAUDE_MAX_RETRIES", "2")),
                retry_delay_ms=int(os.getenv("JOURNEY_AI_CLAUDE_RETRY_DELAY_MS", "1000")),
                retry_on_timeout=_env_bool("JOURNEY_AI_CLAUDE_RETRY_ON_TIMEOUT", default=True),
                command=_env_command("JOURNEY_AI_CLAUDE_COMMAND", default=DEFAULT_COMMAND),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error if Claude CLI settings are out of range."""

        cli = self.claude_cli
        if cli.max_concurrent <= 0:
            raise ValueError("JOURNEY_AI_CLAUDE_MAX_CONCURRENT must be > 0.")
        if cli.default_timeout_ms <= 0:
            raise ValueError("JOURNEY_AI_CLAUDE_DEFAULT_TIMEOUT_MS must be > 0.")
        if cli.max_retries < 0:
            raise ValueError("JOURNEY_AI_CLAUDE_MAX_RETRIES must be >= 0.")
        if cli.retry_delay_ms < 0:
            raise ValueError("JOURNEY_AI_CLAUDE_RETRY_DELAY_MS must be >= 0.")
        if not cli.command:
            raise ValueError("JOURNEY_AI_CLAUDE_COMMAND must not be empty.")

    def to_service_config(self) -> ServiceConfig:
        """Build the immutable service config from validated settings."""

        self.validate()
        cli = self.claude_cli
        return ServiceConfig(
            max_concurrent=cli.max_concurrent,
            default_timeout_ms=cli.default_timeout_ms,
            retry_on_error=cli.retry_on_error,
            max_retries=cli.max_retries,
            retry_delay_ms=cli.retry_delay_ms,
            retry_on_timeout=cli.retry_on_timeout,
            command=cli.command,
        )


def _env_command(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return tuple(shlex.split(value))


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
