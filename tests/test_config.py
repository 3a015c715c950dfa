from __future__ import annotations

import allure
import pytest

from journey_ai.claude_cli.models import ServiceConfig
from journey_ai.config import ClaudeCliSettings, Settings

pytestmark = [
    allure.epic("Claude CLI"),
    allure.feature("Configuration"),
]

_ENV_NAMES = (
    "JOURNEY_AI_CLAUDE_MAX_CONCURRENT",
    "JOURNEY_AI_CLAUDE_DEFAULT_TIMEOUT_MS",
    "JOURNEY_AI_CLAUDE_RETRY_ON_ERROR",
    "JOURNEY_AI_CLAUDE_MAX_RETRIES",
    "JOURNEY_AI_CLAUDE_RETRY_DELAY_MS",
    "JOURNEY_AI_CLAUDE_RETRY_ON_TIMEOUT",
    "JOURNEY_AI_CLAUDE_COMMAND",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_defaults_match_service_defaults(clean_env) -> None:
    settings = Settings.from_env()

    assert settings.to_service_config() == ServiceConfig()


def test_from_env_reads_overrides(clean_env) -> None:
    clean_env.setenv("JOURNEY_AI_CLAUDE_MAX_CONCURRENT", "3")
    clean_env.setenv("JOURNEY_AI_CLAUDE_DEFAULT_TIMEOUT_MS", "5000")
    clean_env.setenv("JOURNEY_AI_CLAUDE_RETRY_ON_ERROR", "no")
    clean_env.setenv("JOURNEY_AI_CLAUDE_MAX_RETRIES", "0")
    clean_env.setenv("JOURNEY_AI_CLAUDE_RETRY_DELAY_MS", "50")
    clean_env.setenv("JOURNEY_AI_CLAUDE_RETRY_ON_TIMEOUT", "off")
    clean_env.setenv("JOURNEY_AI_CLAUDE_COMMAND", "claude --print --model 'opus max'")

    config = Settings.from_env().to_service_config()

    assert config.max_concurrent == 3
    assert config.default_timeout_ms == 5000
    assert config.retry_on_error is False
    assert config.max_retries == 0
    assert config.retry_delay_ms == 50
    assert config.retry_on_timeout is False
    assert config.command == ("claude", "--print", "--model", "opus max")


def test_invalid_boolean_is_rejected(clean_env) -> None:
    clean_env.setenv("JOURNEY_AI_CLAUDE_RETRY_ON_ERROR", "maybe")

    with pytest.raises(ValueError, match="Invalid boolean value for JOURNEY_AI_CLAUDE_RETRY"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("settings", "match"),
    [
        (ClaudeCliSettings(max_concurrent=0), "MAX_CONCURRENT"),
        (ClaudeCliSettings(default_timeout_ms=0), "DEFAULT_TIMEOUT_MS"),
        (ClaudeCliSettings(max_retries=-1), "MAX_RETRIES"),
        (ClaudeCliSettings(retry_delay_ms=-5), "RETRY_DELAY_MS"),
        (ClaudeCliSettings(command=()), "COMMAND"),
    ],
)
def test_validate_rejects_out_of_range_values(settings: ClaudeCliSettings, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        Settings(claude_cli=settings).to_service_config()
