"""Test doubles shared across the Claude CLI suites."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

from journey_ai.claude_cli.models import (
    ClaudeCliRequest,
    ClaudeCliResponse,
    FailureClass,
    ServiceConfig,
)

ECHO_AGENT_COMMAND: tuple[str, ...] = (
    sys.executable,
    "-m",
    "journey_ai.claude_cli.backend.echo_agent",
    "--print",
)


def echo_agent_config(*extra_args: str, **overrides: object) -> ServiceConfig:
    """Service config that runs the local echo agent instead of ``claude``."""

    return ServiceConfig.merged({"command": (*ECHO_AGENT_COMMAND, *extra_args), **overrides})


@dataclass
class ScriptedExecutor:
    """In-memory executor: records calls and answers from a script.

    ``gates`` maps a prompt to an ``asyncio.Event``; that attempt blocks until the
    test sets the event.
    """

    responder: Callable[[ClaudeCliRequest, int], ClaudeCliResponse] | None = None
    calls: list[ClaudeCliRequest] = field(default_factory=list)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)

    async def run(self, request: ClaudeCliRequest) -> ClaudeCliResponse:
        self.calls.append(request)
        call_number = len(self.calls)
        gate = self.gates.get(request.prompt)
        if gate is not None:
            await gate.wait()
        if self.responder is not None:
            return self.responder(request, call_number)
        return ClaudeCliResponse(success=True, data=request.prompt, raw_output=request.prompt)

    @property
    def prompts(self) -> list[str]:
        return [call.prompt for call in self.calls]


def failing_response(request: ClaudeCliRequest, call_number: int) -> ClaudeCliResponse:
    return ClaudeCliResponse(
        success=False,
        error=f"boom {call_number}",
        failure_class=FailureClass.NON_ZERO_EXIT,
    )


def timeout_response(request: ClaudeCliRequest, call_number: int) -> ClaudeCliResponse:
    return ClaudeCliResponse(
        success=False,
        error="Request timed out after 10ms",
        failure_class=FailureClass.TIMEOUT,
    )


async def settle_loop(rounds: int = 5) -> None:
    """Let scheduled dispatch tasks run up to their first suspension point."""

    for _ in range(rounds):
        await asyncio.sleep(0)
