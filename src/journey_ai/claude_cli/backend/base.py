"""Executor interface for single Claude CLI attempts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from journey_ai.claude_cli.models import ClaudeCliRequest, ClaudeCliResponse


@dataclass(slots=True)
class ProcessCapture:
    """Raw process outcome before classification."""

    exit_code: int | None
    timed_out: bool
    stdout: str
    stderr: str


class AttemptExecutor(Protocol):
    """Protocol implemented by attempt runners."""

    async def run(self, request: ClaudeCliRequest) -> ClaudeCliResponse:
        """Run one attempt and return its classified response."""
