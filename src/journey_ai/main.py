"""CLI entrypoint for journey-ai."""

import logging
from pathlib import Path

import rich_click as click

from journey_ai import __version__
from journey_ai.claude_cli.controllers import (
    ClaudeCliController,
    ClaudeCommandResult,
    ClaudeOperationCommand,
    ClaudeQueryCommand,
    ClaudeQueryJsonCommand,
)

click.rich_click.USE_MARKDOWN = True
CLAUDE_CONTROLLER = ClaudeCliController()

_cwd_option = click.option(
    "--cwd",
    "working_directory",
    type=click.Path(path_type=Path, exists=True, file_okay=False),
    default=None,
    help="Working directory for the Claude process.",
)
_timeout_option = click.option(
    "--timeout-ms",
    type=click.IntRange(min=1),
    default=None,
    help="Per-attempt timeout. Defaults to JOURNEY_AI_CLAUDE_DEFAULT_TIMEOUT_MS.",
)


@click.group()
@click.version_option(version=__version__, prog_name="journey-ai")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def journey_ai(log_level: str) -> None:
    """Journey AI CLI."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@journey_ai.group()
def claude() -> None:
    """Claude CLI queue commands."""


@claude.command("query")
@click.argument("prompt")
@click.option("--json-schema", default=None, help="Shape hint; enables JSON extraction.")
@_cwd_option
@_timeout_option
@click.option(
    "--priority",
    type=int,
    default=0,
    show_default=True,
    help="Higher number means dispatched sooner.",
)
def claude_query(
    prompt: str,
    json_schema: str | None,
    working_directory: Path | None,
    timeout_ms: int | None,
    priority: int,
) -> None:
    """Send a raw prompt to Claude and print the response."""

    _emit_result(
        CLAUDE_CONTROLLER.query(
            ClaudeQueryCommand(
                prompt=prompt,
                json_schema=json_schema,
                working_directory=_path_or_none(working_directory),
                timeout_ms=timeout_ms,
                priority=priority,
            ),
        ),
    )


@claude.command("query-json")
@click.argument("prompt")
@click.option("--schema", "json_schema", required=True, help="Expected JSON shape.")
@_cwd_option
@_timeout_option
@click.option("--priority", type=int, default=0, show_default=True)
def claude_query_json(
    prompt: str,
    json_schema: str,
    working_directory: Path | None,
    timeout_ms: int | None,
    priority: int,
) -> None:
    """Ask Claude for a single JSON object matching `--schema`."""

    _emit_result(
        CLAUDE_CONTROLLER.query_json(
            ClaudeQueryJsonCommand(
                prompt=prompt,
                json_schema=json_schema,
                working_directory=_path_or_none(working_directory),
                timeout_ms=timeout_ms,
                priority=priority,
            ),
        ),
    )


@claude.command("analyze-journey")
@click.argument("description")
@click.option("--project-context", default=None, help="Optional project description.")
@_cwd_option
@_timeout_option
def claude_analyze_journey(
    description: str,
    project_context: str | None,
    working_directory: Path | None,
    timeout_ms: int | None,
) -> None:
    """Break a journey idea into tasks, risks and a branch name."""

    _emit_result(
        CLAUDE_CONTROLLER.run_operation(
            ClaudeOperationCommand(
                operation="analyze-journey",
                params={
                    "journey_description": description,
                    "project_context": project_context,
                },
                working_directory=_path_or_none(working_directory),
                timeout_ms=timeout_ms,
            ),
        ),
    )


@claude.command("create-plan")
@click.argument("feature")
@click.option("--tech-stack", required=True, help="Technologies used by the project.")
@click.option("--existing-structure", default=None, help="Optional project tree summary.")
@_cwd_option
@_timeout_option
def claude_create_plan(
    feature: str,
    tech_stack: str,
    existing_structure: str | None,
    working_directory: Path | None,
    timeout_ms: int | None,
) -> None:
    """Create a step-by-step implementation plan for a feature."""

    _emit_result(
        CLAUDE_CONTROLLER.run_operation(
            ClaudeOperationCommand(
                operation="create-plan",
                params={
                    "feature_description": feature,
                    "tech_stack": tech_stack,
                    "existing_structure": existing_structure,
                },
                working_directory=_path_or_none(working_directory),
                timeout_ms=timeout_ms,
            ),
        ),
    )


@claude.command("summarize-journey")
@click.argument("name")
@click.option("--git-diff", required=True, help="Git diff summary.")
@click.option("--commit-history", required=True, help="Recent commit log.")
@click.option("--original-plan", default=None, help="Optional plan to compare against.")
@_cwd_option
@_timeout_option
def claude_summarize_journey(  # noqa: PLR0913
    name: str,
    git_diff: str,
    commit_history: str,
    original_plan: str | None,
    working_directory: Path | None,
    timeout_ms: int | None,
) -> None:
    """Summarize journey progress from git history."""

    _emit_result(
        CLAUDE_CONTROLLER.run_operation(
            ClaudeOperationCommand(
                operation="summarize-journey",
                params={
                    "journey_name": name,
                    "git_diff": git_diff,
                    "commit_history": commit_history,
                    "original_plan": original_plan,
                },
                working_directory=_path_or_none(working_directory),
                timeout_ms=timeout_ms,
            ),
        ),
    )


@claude.command("status")
def claude_status() -> None:
    """Show queue status and effective configuration."""

    _emit_lines(CLAUDE_CONTROLLER.status())


def _path_or_none(value: Path | None) -> str | None:
    return str(value) if value is not None else None


def _emit_result(result: ClaudeCommandResult) -> None:
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Claude request failed.")


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    journey_ai()
