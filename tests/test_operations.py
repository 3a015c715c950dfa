from __future__ import annotations

import allure
import pytest
from helpers import ScriptedExecutor

from journey_ai.claude_cli import prompts
from journey_ai.claude_cli.models import ClaudeCliRequest, ClaudeCliResponse, FailureClass
from journey_ai.claude_cli.operations import OPERATIONS, get_operation, run_operation
from journey_ai.claude_cli.service import JSON_ONLY_PREAMBLE, ClaudeCliService

pytestmark = [
    allure.epic("Claude CLI"),
    allure.feature("Journey Operations"),
]


def _service_answering(data: object) -> tuple[ClaudeCliService, ScriptedExecutor]:
    def _responder(request: ClaudeCliRequest, _: int) -> ClaudeCliResponse:
        return ClaudeCliResponse(success=True, data=data, raw_output=str(data))

    executor = ScriptedExecutor(responder=_responder)
    return ClaudeCliService(executor=executor), executor


@pytest.mark.asyncio
async def test_analyze_journey_sends_schema_and_accepts_complete_payload() -> None:
    payload = {
        "title": "Dark mode",
        "complexity": 2,
        "keyTasks": ["toggle"],
        "suggestedBranchName": "feature/dark-mode",
    }
    service, executor = _service_answering(payload)

    response = await run_operation(
        service,
        "analyze-journey",
        journey_description="Add a dark mode toggle",
        project_context="React + Electron",
        working_directory="/repo/worktree",
    )

    request = executor.calls[0]
    assert response.success is True
    assert response.data == payload
    assert request.json_schema == prompts.JOURNEY_ANALYSIS_SCHEMA
    assert request.working_directory == "/repo/worktree"
    assert request.prompt.startswith(JSON_ONLY_PREAMBLE)
    assert "Add a dark mode toggle" in request.prompt
    assert "React + Electron" in request.prompt


@pytest.mark.asyncio
async def test_missing_required_keys_downgrade_to_parse_error() -> None:
    service, _ = _service_answering({"summary": "half done"})

    response = await run_operation(
        service,
        "summarize-journey",
        journey_name="Dark mode",
        git_diff="+ toggle",
        commit_history="abc123 add toggle",
    )

    assert response.success is False
    assert response.failure_class == FailureClass.PARSE_ERROR
    assert response.error == "Response is missing required keys: status, nextSteps"
    assert response.data == {"summary": "half done"}


@pytest.mark.asyncio
async def test_plain_text_operation_skips_json_extraction() -> None:
    service, executor = _service_answering("Looks good.")

    response = await run_operation(service, "code-review", diff="- a\n+ b", context="refactor")

    request = executor.calls[0]
    assert response.success is True
    assert response.data == "Looks good."
    assert request.json_schema is None
    assert "```\n- a\n+ b\n```" in request.prompt


def test_unknown_operation_lists_supported_names() -> None:
    with pytest.raises(ValueError, match="Unknown journey operation: 'deploy'"):
        get_operation("deploy")


def test_every_json_operation_declares_required_keys() -> None:
    for operation in OPERATIONS.values():
        if operation.json_schema is not None:
            assert operation.required_keys, operation.name
            for key in operation.required_keys:
                assert key in operation.json_schema, (operation.name, key)


def test_intake_refinement_prompt_uses_journey_type_guidance() -> None:
    prompt = prompts.build_intake_refinement_prompt("Users want exports", "bug", "CLI tool")

    assert "This is a bug fix journey." in prompt
    assert "Users want exports" in prompt
    assert "Project Context:\nCLI tool" in prompt
    assert prompt.endswith("note it in openQuestions.")


def test_intake_refinement_prompt_rejects_unknown_type() -> None:
    with pytest.raises(ValueError, match="Unsupported journey type"):
        prompts.build_intake_refinement_prompt("x", "epic")  # type: ignore[arg-type]


def test_optional_sections_are_omitted_when_empty() -> None:
    prompt = prompts.build_journey_summary_prompt("J", "diff", "log")

    assert "Original Plan" not in prompt
    assert prompt.index("Recent Commits:\nlog") < prompt.index("git diff summary):\ndiff")


def test_spec_and_plan_generation_prompts_include_inputs() -> None:
    spec_prompt = prompts.build_spec_generation_prompt("refined", tech_stack="Python")
    plan_prompt = prompts.build_plan_generation_prompt("the spec", project_context="ctx")

    assert "Refined Intake:\nrefined" in spec_prompt
    assert "Tech Stack: Python" in spec_prompt
    assert "Project Context" not in spec_prompt
    assert "Specification:\nthe spec" in plan_prompt
    assert "Project Context:\nctx" in plan_prompt


def test_project_intake_prompts_embed_all_versions() -> None:
    refine = prompts.build_project_intake_refinement_prompt("raw notes", "Atlas")
    update = prompts.build_project_intake_update_prompt("old", "new", "doc", "Atlas")

    assert 'called "Atlas"' in refine
    assert "Raw Intake:\nraw notes" in refine
    assert "Previous Raw Intake:\nold" in update
    assert "New Raw Intake:\nnew" in update
    assert "Current AI-Refined Document:\ndoc" in update
    assert '"updated_document": "string with full markdown document"' in update
