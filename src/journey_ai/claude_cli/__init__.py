"""Claude CLI wrapper: a local request/response API over ``claude --print``.

Why not call an HTTP SDK?
~~~~~~~~~~~~~~~~~~~~~~~~~
The desktop shell runs on the developer's own Claude subscription, which is
only reachable through the interactive CLI. This package makes that CLI behave
like an internal API:

- a priority queue with a concurrency gate (``queue``), so at most
  ``max_concurrent`` processes run at once;
- one isolated process per attempt with forced termination on timeout
  (``backend.cli_backend``);
- bounded retries with exponential backoff (``retry``);
- best-effort JSON extraction from free-text output (``parser``).

Callers only see ``ClaudeCliRequest`` in and ``ClaudeCliResponse`` out; every
failure is reported as a response, never raised.
"""

from journey_ai.claude_cli.models import (
    ClaudeCliError,
    ClaudeCliRequest,
    ClaudeCliResponse,
    FailureClass,
    QueueClearedError,
    QueueStatus,
    ServiceConfig,
)
from journey_ai.claude_cli.parser import ParseResult, parse_claude_response, validate_shape
from journey_ai.claude_cli.service import ClaudeCliService, ClaudeCliServiceProvider

__all__ = [
    "ClaudeCliError",
    "ClaudeCliRequest",
    "ClaudeCliResponse",
    "ClaudeCliService",
    "ClaudeCliServiceProvider",
    "FailureClass",
    "ParseResult",
    "QueueClearedError",
    "QueueStatus",
    "ServiceConfig",
    "parse_claude_response",
    "validate_shape",
]
