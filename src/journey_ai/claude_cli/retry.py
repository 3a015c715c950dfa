"""Bounded retry with exponential backoff around single CLI attempts."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from journey_ai.claude_cli.backend.base import AttemptExecutor
from journey_ai.claude_cli.models import (
    ClaudeCliRequest,
    ClaudeCliResponse,
    FailureClass,
    ServiceConfig,
)

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class RetryController:
    """Runs up to ``max_retries + 1`` attempts, stopping at the first success."""

    def __init__(
        self,
        *,
        executor: AttemptExecutor,
        config: ServiceConfig,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.executor = executor
        self.config = config
        self._sleep = sleep

    async def execute(self, request: ClaudeCliRequest) -> ClaudeCliResponse:
        attempt = 0
        while True:
            response = await self.executor.run(request)
            response.attempts = attempt + 1
            if response.success:
                if attempt:
                    logger.info("Claude CLI request succeeded after %d attempts", attempt + 1)
                return response
            if not self._should_retry(response=response, attempt=attempt):
                return response

            delay_seconds = self.compute_retry_delay(attempt=attempt)
            logger.warning(
                "Claude CLI attempt %d/%d failed (%s): %s; retrying in %.2fs",
                attempt + 1,
                self.config.max_retries + 1,
                response.failure_class.value if response.failure_class else "unknown",
                response.error,
                delay_seconds,
            )
            await self._sleep(delay_seconds)
            attempt += 1

    def compute_retry_delay(self, *, attempt: int) -> float:
        """Return the backoff before the attempt that follows ``attempt``, in seconds."""

        return self.config.retry_delay_ms * (2**attempt) / 1000

    def _should_retry(self, *, response: ClaudeCliResponse, attempt: int) -> bool:
        if not self.config.retry_on_error:
            return False
        if attempt >= self.config.max_retries:
            return False
        if response.failure_class == FailureClass.TIMEOUT and not self.config.retry_on_timeout:
            return False
        return True
