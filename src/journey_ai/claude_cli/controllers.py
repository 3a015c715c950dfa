"""Controllers for Claude CLI commands."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from journey_ai.claude_cli.models import ClaudeCliRequest, ClaudeCliResponse
from journey_ai.claude_cli.operations import run_operation
from journey_ai.claude_cli.service import ClaudeCliService, ClaudeCliServiceProvider
from journey_ai.config import Settings


@dataclass(slots=True)
class ClaudeQueryCommand:
    """CLI input for a raw prompt query."""

    prompt: str
    json_schema: str | None = None
    working_directory: str | None = None
    timeout_ms: int | None = None
    priority: int = 0


@dataclass(slots=True)
class ClaudeQueryJsonCommand:
    """CLI input for a structured-output query."""

    prompt: str
    json_schema: str
    working_directory: str | None = None
    timeout_ms: int | None = None
    priority: int = 0


@dataclass(slots=True)
class ClaudeOperationCommand:
    """CLI input for a named journey operation."""

    operation: str
    params: dict[str, str | None] = field(default_factory=dict)
    working_directory: str | None = None
    timeout_ms: int | None = None


@dataclass(slots=True)
class ClaudeCommandResult:
    """Rendered lines plus overall outcome."""

    success: bool
    lines: list[str]


class ClaudeCliController:
    """Runs service calls on a fresh event loop and renders responses as lines."""

    def __init__(self, provider: ClaudeCliServiceProvider | None = None) -> None:
        self.provider = provider or ClaudeCliServiceProvider()

    def query(self, command: ClaudeQueryCommand) -> ClaudeCommandResult:
        request = ClaudeCliRequest(
            prompt=command.prompt,
            json_schema=command.json_schema,
            working_directory=command.working_directory,
            timeout_ms=command.timeout_ms,
            priority=command.priority,
        )
        return self._run(lambda service: service.query(request))

    def query_json(self, command: ClaudeQueryJsonCommand) -> ClaudeCommandResult:
        return self._run(
            lambda service: service.query_json(
                command.prompt,
                command.json_schema,
                working_directory=command.working_directory,
                timeout_ms=command.timeout_ms,
                priority=command.priority,
            ),
        )

    def run_operation(self, command: ClaudeOperationCommand) -> ClaudeCommandResult:
        return self._run(
            lambda service: run_operation(
                service,
                command.operation,
                working_directory=command.working_directory,
                timeout_ms=command.timeout_ms,
                **command.params,
            ),
        )

    def status(self) -> list[str]:
        service = self._service()
        snapshot = service.status()
        config = service.config
        return [
            f"Queue: pending={snapshot.queue_length} active={snapshot.active_requests}",
            (
                f"Config: command={' '.join(config.command)} "
                f"max_concurrent={config.max_concurrent} "
                f"default_timeout_ms={config.default_timeout_ms} "
                f"retry_on_error={config.retry_on_error} "
                f"max_retries={config.max_retries} "
                f"retry_delay_ms={config.retry_delay_ms} "
                f"retry_on_timeout={config.retry_on_timeout}"
            ),
        ]

    def _service(self) -> ClaudeCliService:
        return self.provider.get(Settings.from_env().to_service_config())

    def _run(
        self,
        call: Callable[[ClaudeCliService], Awaitable[ClaudeCliResponse]],
    ) -> ClaudeCommandResult:
        service = self._service()

        async def _invoke() -> ClaudeCliResponse:
            try:
                return await call(service)
            finally:
                await service.aclose()

        response = asyncio.run(_invoke())
        return ClaudeCommandResult(success=response.success, lines=render_response(response))


def render_response(response: ClaudeCliResponse) -> list[str]:
    """Format a response for terminal output."""

    lines: list[str] = []
    if response.data is not None:
        if isinstance(response.data, str):
            lines.append(response.data)
        else:
            lines.append(json.dumps(response.data, ensure_ascii=False, indent=2))
    if not response.success:
        failure = response.failure_class.value if response.failure_class else "unknown"
        lines.append(f"Error ({failure}): {response.error or '-'}")
    lines.append(
        f"Duration: {response.duration_ms}ms attempts={response.attempts} "
        f"success={response.success}",
    )
    return lines
