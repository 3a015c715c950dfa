"""Named journey operations dispatched onto the Claude CLI service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from journey_ai.claude_cli import prompts
from journey_ai.claude_cli.models import ClaudeCliRequest, ClaudeCliResponse, FailureClass
from journey_ai.claude_cli.parser import validate_shape
from journey_ai.claude_cli.service import ClaudeCliService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JourneyOperation:
    """Prompt template, shape hint and required payload keys for one operation."""

    name: str
    build_prompt: Callable[..., str]
    json_schema: str | None = None
    required_keys: tuple[str, ...] = ()


OPERATIONS: dict[str, JourneyOperation] = {
    operation.name: operation
    for operation in (
        JourneyOperation(
            name="analyze-journey",
            build_prompt=prompts.build_journey_analysis_prompt,
            json_schema=prompts.JOURNEY_ANALYSIS_SCHEMA,
            required_keys=("title", "complexity", "keyTasks", "suggestedBranchName"),
        ),
        JourneyOperation(
            name="create-plan",
            build_prompt=prompts.build_implementation_plan_prompt,
            json_schema=prompts.IMPLEMENTATION_PLAN_SCHEMA,
            required_keys=("featureName", "steps"),
        ),
        JourneyOperation(
            name="summarize-journey",
            build_prompt=prompts.build_journey_summary_prompt,
            json_schema=prompts.JOURNEY_SUMMARY_SCHEMA,
            required_keys=("summary", "status", "nextSteps"),
        ),
        JourneyOperation(
            name="refine-intake",
            build_prompt=prompts.build_intake_refinement_prompt,
            json_schema=prompts.REFINED_INTAKE_SCHEMA,
            required_keys=("title", "problem", "proposedSolution"),
        ),
        JourneyOperation(
            name="generate-spec",
            build_prompt=prompts.build_spec_generation_prompt,
            json_schema=prompts.SPEC_SCHEMA,
            required_keys=("overview", "goals", "technicalApproach"),
        ),
        JourneyOperation(
            name="generate-plan",
            build_prompt=prompts.build_plan_generation_prompt,
            json_schema=prompts.PLAN_SCHEMA,
            required_keys=("summary", "phases"),
        ),
        JourneyOperation(
            name="refine-project-intake",
            build_prompt=prompts.build_project_intake_refinement_prompt,
        ),
        JourneyOperation(
            name="update-project-intake",
            build_prompt=prompts.build_project_intake_update_prompt,
            json_schema=prompts.PROJECT_INTAKE_UPDATE_SCHEMA,
            required_keys=("changes_summary", "suggested_updates", "updated_document"),
        ),
        JourneyOperation(
            name="code-review",
            build_prompt=prompts.build_code_review_prompt,
        ),
    )
}


def get_operation(name: str) -> JourneyOperation:
    try:
        return OPERATIONS[name]
    except KeyError as error:
        supported = ", ".join(sorted(OPERATIONS))
        raise ValueError(f"Unknown journey operation: {name!r}. Supported: {supported}") from error


async def run_operation(  # noqa: PLR0913
    service: ClaudeCliService,
    name: str,
    *,
    working_directory: str | None = None,
    timeout_ms: int | None = None,
    priority: int = 0,
    **params: str | None,
) -> ClaudeCliResponse:
    """Build the operation prompt from ``params`` and await its response."""

    operation = get_operation(name)
    prompt = operation.build_prompt(**params)

    if operation.json_schema is None:
        return await service.query(
            ClaudeCliRequest(
                prompt=prompt,
                working_directory=working_directory,
                timeout_ms=timeout_ms,
                priority=priority,
            ),
        )

    response = await service.query_json(
        prompt,
        operation.json_schema,
        working_directory=working_directory,
        timeout_ms=timeout_ms,
        priority=priority,
    )
    return _check_required_keys(response, operation)


def _check_required_keys(
    response: ClaudeCliResponse,
    operation: JourneyOperation,
) -> ClaudeCliResponse:
    if not response.success or validate_shape(response.data, operation.required_keys):
        return response

    missing = [
        key
        for key in operation.required_keys
        if not isinstance(response.data, dict) or key not in response.data
    ]
    logger.warning("Operation %s response is missing keys: %s", operation.name, missing)
    return replace(
        response,
        success=False,
        error=f"Response is missing required keys: {', '.join(missing)}",
        failure_class=FailureClass.PARSE_ERROR,
    )
