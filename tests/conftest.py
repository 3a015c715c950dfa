"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import pytest
from helpers import ScriptedExecutor

from journey_ai.main import CLAUDE_CONTROLLER


@pytest.fixture()
def scripted_executor() -> ScriptedExecutor:
    return ScriptedExecutor()


@pytest.fixture()
def recorded_sleeps() -> tuple[list[float], Callable[[float], Awaitable[None]]]:
    """Backoff sleep that records delays instead of waiting."""

    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    return delays, _sleep


@pytest.fixture()
def fresh_cli_service():
    """Drop the CLI's shared service so each test picks up its own env."""

    CLAUDE_CONTROLLER.provider.reset()
    yield CLAUDE_CONTROLLER
    CLAUDE_CONTROLLER.provider.reset()
