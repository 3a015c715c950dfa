"""Public Claude CLI service surface."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from journey_ai.claude_cli.backend import AttemptExecutor, CliProcessExecutor
from journey_ai.claude_cli.models import (
    ClaudeCliRequest,
    ClaudeCliResponse,
    QueueStatus,
    ServiceConfig,
)
from journey_ai.claude_cli.queue import RequestQueue
from journey_ai.claude_cli.retry import RetryController, SleepFn

logger = logging.getLogger(__name__)

JSON_ONLY_PREAMBLE = (
    "You are an API that returns only valid JSON. No markdown code fences, "
    "no explanation, no extra text - just the raw JSON object."
)


def build_json_prompt(prompt: str, json_schema: str) -> str:
    """Wrap ``prompt`` with the JSON-only instruction and the shape hint."""

    return (
        f"{JSON_ONLY_PREAMBLE}\n"
        f"\n"
        f"{prompt}\n"
        f"\n"
        f"Return a JSON object matching this TypeScript interface:\n"
        f"{json_schema}"
    )


class ClaudeCliService:
    """Turns the Claude CLI into a queued, retrying request/response API."""

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        executor: AttemptExecutor | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config or ServiceConfig()
        self.executor = executor or CliProcessExecutor(self.config)
        self.retry = RetryController(executor=self.executor, config=self.config, sleep=sleep)
        self.queue = RequestQueue(retry=self.retry, max_concurrent=self.config.max_concurrent)

    def query(self, request: ClaudeCliRequest) -> asyncio.Future[ClaudeCliResponse]:
        """Queue a request; await the returned future for its response."""

        return self.queue.enqueue(request)

    def query_json(
        self,
        prompt: str,
        json_schema: str,
        *,
        working_directory: str | None = None,
        timeout_ms: int | None = None,
        priority: int = 0,
    ) -> asyncio.Future[ClaudeCliResponse]:
        """Queue a prompt that must be answered with a single JSON object."""

        return self.query(
            ClaudeCliRequest(
                prompt=build_json_prompt(prompt, json_schema),
                json_schema=json_schema,
                working_directory=working_directory,
                timeout_ms=timeout_ms,
                priority=priority,
            ),
        )

    def status(self) -> QueueStatus:
        return self.queue.status()

    def clear_queue(self) -> int:
        """Drop pending requests. Requests already running are not cancelled."""

        return self.queue.clear()

    def reset(self) -> None:
        self.queue.clear()

    async def aclose(self) -> None:
        """Clear pending requests and wait for running ones to finish."""

        self.queue.clear()
        await self.queue.drain()


class ClaudeCliServiceProvider:
    """Owns the one service instance an application shares.

    The first ``get`` builds the service from the supplied overrides; config passed
    to later calls is ignored until ``reset``.
    """

    def __init__(self, *, executor: AttemptExecutor | None = None) -> None:
        self._executor = executor
        self._service: ClaudeCliService | None = None

    def get(
        self,
        config: ServiceConfig | dict[str, Any] | None = None,
    ) -> ClaudeCliService:
        if self._service is None:
            resolved = config if isinstance(config, ServiceConfig) else ServiceConfig.merged(config)
            logger.debug("Building Claude CLI service: %s", resolved)
            self._service = ClaudeCliService(resolved, executor=self._executor)
        elif config is not None:
            logger.debug("Ignoring Claude CLI config passed after the service was built")
        return self._service

    def reset(self) -> None:
        if self._service is None:
            return
        self._service.reset()
        self._service = None
