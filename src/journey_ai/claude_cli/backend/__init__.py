"""Claude CLI attempt executors."""

from journey_ai.claude_cli.backend.base import AttemptExecutor, ProcessCapture
from journey_ai.claude_cli.backend.cli_backend import CliProcessExecutor

__all__ = [
    "AttemptExecutor",
    "CliProcessExecutor",
    "ProcessCapture",
]
