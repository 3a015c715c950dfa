"""Prompt builders and shape hints for journey operations."""

from __future__ import annotations

from typing import Literal

JourneyType = Literal["feature_planning", "feature", "bug", "investigation"]

REFINED_INTAKE_SCHEMA = """\
{
  title: string;
  problem: string;
  proposedSolution: string;
  userStories: string[];
  acceptanceCriteria: string[];
  outOfScope: string[];
  openQuestions: string[];
}"""

SPEC_SCHEMA = """\
{
  overview: string;
  goals: string[];
  nonGoals: string[];
  technicalApproach: {
    summary: string;
    components: { name: string; purpose: string; changes: string }[];
  };
  dataModel: {
    newEntities: { name: string; fields: string[] }[];
    modifiedEntities: { name: string; changes: string }[];
  };
  apiChanges: {
    newEndpoints: { method: string; path: string; purpose: string }[];
    modifiedEndpoints: { method: string; path: string; changes: string }[];
  };
  uiChanges: {
    newScreens: { name: string; purpose: string }[];
    modifiedScreens: { name: string; changes: string }[];
  };
  testing: {
    unitTests: string[];
    integrationTests: string[];
    e2eTests: string[];
  };
  rollout: {
    featureFlags: string[];
    migrationSteps: string[];
    rollbackPlan: string;
  };
  openQuestions: string[];
}"""

PLAN_SCHEMA = """\
{
  summary: string;
  estimatedEffort: "small" | "medium" | "large" | "x-large";
  phases: {
    name: string;
    description: string;
    tasks: {
      title: string;
      description: string;
      estimatedHours: number;
      dependencies: string[];
      deliverables: string[];
    }[];
  }[];
  risks: { risk: string; mitigation: string; severity: "low" | "medium" | "high" }[];
  milestones: { name: string; criteria: string }[];
}"""

JOURNEY_ANALYSIS_SCHEMA = """\
{
  title: string;
  complexity: 1 | 2 | 3 | 4 | 5;
  estimatedTasks: number;
  keyTasks: string[];
  suggestedBranchName: string;
  risks: string[];
  dependencies: string[];
}"""

IMPLEMENTATION_PLAN_SCHEMA = """\
{
  featureName: string;
  estimatedComplexity: 'low' | 'medium' | 'high';
  steps: {
    order: number;
    title: string;
    description: string;
    filesToCreate: string[];
    filesToModify: string[];
  }[];
  risks: string[];
  dependencies: string[];
}"""

JOURNEY_SUMMARY_SCHEMA = """\
{
  summary: string;
  status: 'on_track' | 'at_risk' | 'blocked';
  completedItems: string[];
  remainingItems: string[];
  blockers: string[];
  nextSteps: string[];
}"""

PROJECT_INTAKE_SCHEMA = """\
{
  document: string;
}"""

PROJECT_INTAKE_UPDATE_SCHEMA = """\
{
  changes_summary: string;
  suggested_updates: string;
  updated_document: string;
}"""

_JOURNEY_TYPE_GUIDANCE: dict[str, str] = {
    "feature_planning": (
        "This is a feature planning journey. Focus on:\n"
        "- Clarifying the problem being solved\n"
        "- Breaking down into user stories\n"
        "- Defining clear acceptance criteria\n"
        "- Identifying what's explicitly out of scope"
    ),
    "feature": (
        "This is a feature implementation journey. Focus on:\n"
        "- Technical requirements\n"
        "- Implementation constraints\n"
        "- Integration points\n"
        "- Testing requirements"
    ),
    "bug": (
        "This is a bug fix journey. Focus on:\n"
        "- Reproducing the issue\n"
        "- Impact and severity\n"
        "- Expected vs actual behavior\n"
        "- Steps to reproduce"
    ),
    "investigation": (
        "This is an investigation journey. Focus on:\n"
        "- What needs to be learned/discovered\n"
        "- Success criteria for the investigation\n"
        "- Deliverables (documentation, POC, recommendation)\n"
        "- Time constraints"
    ),
}


def build_intake_refinement_prompt(
    raw_intake: str,
    journey_type: JourneyType,
    project_context: str | None = None,
) -> str:
    """Refine a raw intake into a structured document for the given journey type."""

    try:
        guidance = _JOURNEY_TYPE_GUIDANCE[journey_type]
    except KeyError as error:
        raise ValueError(f"Unsupported journey type: {journey_type!r}") from error

    prompt = (
        "Refine this raw feature intake into a well-structured format.\n"
        "\n"
        f"Raw Intake:\n{raw_intake}\n"
        "\n"
        f"{guidance}"
    )
    if project_context:
        prompt += f"\n\nProject Context:\n{project_context}"
    prompt += (
        "\n\nTransform this into a clear, actionable intake document. Preserve the original "
        "intent but add structure, clarity, and completeness. If information is missing, "
        "note it in openQuestions."
    )
    return prompt


def build_spec_generation_prompt(
    refined_intake: str,
    project_context: str | None = None,
    tech_stack: str | None = None,
) -> str:
    prompt = (
        "Create a detailed technical specification from this refined intake.\n"
        "\n"
        f"Refined Intake:\n{refined_intake}"
    )
    if tech_stack:
        prompt += f"\n\nTech Stack: {tech_stack}"
    if project_context:
        prompt += f"\n\nProject Context:\n{project_context}"
    prompt += (
        "\n\nGenerate a comprehensive spec that covers:\n"
        "1. Technical approach and architecture\n"
        "2. Data model changes\n"
        "3. API changes\n"
        "4. UI/UX changes\n"
        "5. Testing strategy\n"
        "6. Rollout and migration plan\n"
        "\n"
        "Be specific about what needs to be built, modified, or removed."
    )
    return prompt


def build_plan_generation_prompt(spec: str, project_context: str | None = None) -> str:
    prompt = (
        "Create a detailed implementation plan from this technical specification.\n"
        "\n"
        f"Specification:\n{spec}"
    )
    if project_context:
        prompt += f"\n\nProject Context:\n{project_context}"
    prompt += (
        "\n\nGenerate an actionable implementation plan that:\n"
        "1. Breaks work into logical phases\n"
        "2. Identifies task dependencies\n"
        "3. Estimates effort for each task\n"
        "4. Highlights risks and mitigations\n"
        "5. Defines clear milestones\n"
        "\n"
        "Each task should be independently completable and testable."
    )
    return prompt


def build_journey_analysis_prompt(
    journey_description: str,
    project_context: str | None = None,
) -> str:
    prompt = (
        "Analyze this software development journey/feature request and provide "
        "a structured breakdown:\n\n"
        f"Journey Description:\n{journey_description}\n\n"
    )
    if project_context:
        prompt += f"Project Context:\n{project_context}\n\n"
    prompt += (
        "Consider:\n"
        "- Break down into concrete, actionable tasks\n"
        "- Identify potential risks and blockers\n"
        "- Suggest a git branch name following conventional patterns "
        "(feature/, fix/, refactor/)\n"
        "- Rate complexity from 1 (trivial) to 5 (very complex)\n"
        "- List any external dependencies or prerequisites"
    )
    return prompt


def build_implementation_plan_prompt(
    feature_description: str,
    tech_stack: str,
    existing_structure: str | None = None,
) -> str:
    prompt = (
        "Create a detailed implementation plan for this feature:\n\n"
        f"Feature: {feature_description}\n\n"
        f"Tech Stack: {tech_stack}\n\n"
    )
    if existing_structure:
        prompt += f"Existing Project Structure:\n{existing_structure}\n\n"
    prompt += (
        "Provide:\n"
        "- Step-by-step implementation order\n"
        "- Files to create and modify for each step\n"
        "- Identify risks and how to mitigate them\n"
        "- List any dependencies that need to be installed"
    )
    return prompt


def build_journey_summary_prompt(
    journey_name: str,
    git_diff: str,
    commit_history: str,
    original_plan: str | None = None,
) -> str:
    prompt = f"Analyze the progress of this development journey:\n\nJourney: {journey_name}\n\n"
    if original_plan:
        prompt += f"Original Plan:\n{original_plan}\n\n"
    prompt += f"Recent Commits:\n{commit_history}\n\n"
    prompt += f"Current Changes (git diff summary):\n{git_diff}\n\n"
    prompt += (
        "Provide:\n"
        "- A brief summary of what's been accomplished\n"
        "- Assessment of status (on_track, at_risk, or blocked)\n"
        "- List completed items vs remaining items\n"
        "- Any blockers identified\n"
        "- Recommended next steps"
    )
    return prompt


def build_code_review_prompt(diff: str, context: str | None = None) -> str:
    prompt = "Review this code diff and provide constructive feedback:\n\n"
    if context:
        prompt += f"Context: {context}\n\n"
    prompt += f"Diff:\n```\n{diff}\n```\n\n"
    prompt += (
        "Focus on:\n"
        "- Potential bugs or edge cases\n"
        "- Code style and readability\n"
        "- Performance considerations\n"
        "- Security concerns\n"
        "- Suggestions for improvement"
    )
    return prompt


def build_project_intake_refinement_prompt(raw_intake: str, project_name: str) -> str:
    """Structure a raw project intake, keeping only sections the intake supports."""

    return f"""\
You are parsing a raw project intake document for a software project called "{project_name}".

Your task is to transform the raw intake into a well-structured document.

IMPORTANT RULES:
1. ONLY include sections where information is explicitly provided in the raw intake
2. Do NOT fabricate, assume, or fill in missing information
3. If a section has no relevant content in the raw intake, DO NOT include that section at all
4. Preserve the original meaning and intent - clarify, don't invent

Available sections (include only if content exists):
- Overview/Summary
- Goals & Objectives
- Key Features
- Constraints/Limitations
- Technical Requirements (include last, only if explicitly mentioned)
- Architecture Notes (include last, only if explicitly mentioned)

Raw Intake:
{raw_intake}

Format your response as a clean markdown document with appropriate headers (##) for each \
section you include. Return ONLY the document content, no preamble or explanation."""


def build_project_intake_update_prompt(
    previous_raw: str,
    new_raw: str,
    existing_ai_doc: str,
    project_name: str,
) -> str:
    """Diff two raw intake versions and ask for an updated refined document."""

    return f"""\
You are analyzing changes to a project intake document for "{project_name}".

Compare the previous and new versions of the raw intake, identify meaningful changes, \
and suggest how to update the AI-refined document.

Previous Raw Intake:
{previous_raw}

New Raw Intake:
{new_raw}

Current AI-Refined Document:
{existing_ai_doc}

Provide:
1. changes_summary: A concise bullet-point summary of what changed between the raw versions \
(what was added, removed, or modified)
2. suggested_updates: Explanation of how these changes should affect the AI-refined document
3. updated_document: The full updated AI-refined document incorporating the changes

IMPORTANT RULES:
- Only include sections where information is explicitly provided
- Do NOT fabricate or assume missing information
- Preserve existing content that wasn't changed
- Add new content where explicitly added in the new raw intake
- Remove content that was explicitly removed from the raw intake

Return your response as valid JSON matching this schema:
{{
  "changes_summary": "string with bullet points",
  "suggested_updates": "string explaining updates",
  "updated_document": "string with full markdown document"
}}"""
