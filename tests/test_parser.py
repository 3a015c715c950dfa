from __future__ import annotations

import allure
import pytest

from journey_ai.claude_cli.parser import (
    PARSE_FAILURE_MESSAGE,
    extract_json_by_brackets,
    extract_json_from_markdown,
    parse_claude_response,
    validate_shape,
)

pytestmark = [
    allure.epic("Claude CLI"),
    allure.feature("Response Parsing"),
]


@pytest.mark.parametrize(
    "raw",
    ["  plain answer \n", '{"a": 1}', "```json\n{}\n```", ""],
)
def test_plain_text_mode_returns_trimmed_input(raw: str) -> None:
    parsed = parse_claude_response(raw, expect_json=False)

    assert parsed.success is True
    assert parsed.data == raw.strip()
    assert parsed.error is None


def test_direct_json_object() -> None:
    parsed = parse_claude_response('{"a":1}', expect_json=True)

    assert parsed.success is True
    assert parsed.data == {"a": 1}


def test_direct_json_array_with_whitespace() -> None:
    parsed = parse_claude_response('\n  [1, 2, {"b": null}]  \n', expect_json=True)

    assert parsed.data == [1, 2, {"b": None}]


def test_labeled_json_fence() -> None:
    parsed = parse_claude_response('```json\n{"a":1}\n```', expect_json=True)

    assert parsed.success is True
    assert parsed.data == {"a": 1}


def test_unlabeled_fence_with_json_content_surrounded_by_prose() -> None:
    raw = 'Here you go:\n```\n{"items": ["x", "y"]}\n```\nAnything else?'

    parsed = parse_claude_response(raw, expect_json=True)

    assert parsed.data == {"items": ["x", "y"]}


def test_skips_non_json_fence_and_uses_later_json_fence() -> None:
    text = "```\nnpm install\n```\nthen\n```\n[1, 2]\n```"

    assert extract_json_from_markdown(text) == "[1, 2]"


def test_labeled_fence_wins_over_generic_fence() -> None:
    text = '```\n{"generic": true}\n```\n```json\n{"labeled": true}\n```'

    assert extract_json_from_markdown(text) == '{"labeled": true}'


def test_markdown_without_fences_returns_none() -> None:
    assert extract_json_from_markdown("no fences { here }") is None


def test_bracket_scan_ignores_closing_brace_inside_string() -> None:
    parsed = parse_claude_response('Result: {"a": "x}y"} done', expect_json=True)

    assert parsed.success is True
    assert parsed.data == {"a": "x}y"}


def test_bracket_scan_honors_escaped_quotes() -> None:
    text = 'prefix {"q": "say \\"}\\" now", "n": {"deep": [1]}} suffix }'

    assert extract_json_by_brackets(text) == '{"q": "say \\"}\\" now", "n": {"deep": [1]}}'


def test_bracket_scan_picks_whichever_bracket_comes_first() -> None:
    assert extract_json_by_brackets('list: [1, {"a": 2}] and {"b": 3}') == '[1, {"a": 2}]'
    assert extract_json_by_brackets('obj: {"a": [1]} and [2]') == '{"a": [1]}'


def test_bracket_scan_returns_none_when_unbalanced_or_absent() -> None:
    assert extract_json_by_brackets('{"a": {"b": 1}') is None
    assert extract_json_by_brackets("nothing to see") is None


def test_no_json_returns_trimmed_text_and_error() -> None:
    parsed = parse_claude_response("  no json here \n", expect_json=True)

    assert parsed.success is False
    assert parsed.data == "no json here"
    assert parsed.error == PARSE_FAILURE_MESSAGE


def test_invalid_json_inside_brackets_fails() -> None:
    parsed = parse_claude_response("Result: {not: valid} end", expect_json=True)

    assert parsed.success is False
    assert parsed.data == "Result: {not: valid} end"


def test_validate_shape_checks_required_keys_only() -> None:
    assert validate_shape({"a": 1, "b": None}, ["a", "b"]) is True
    assert validate_shape({"a": 1}, ["a", "b"]) is False
    assert validate_shape({"a": {"wrong": "type"}}, ["a"]) is True
    assert validate_shape({}, []) is True


@pytest.mark.parametrize("value", [None, "text", 3, ["a"]])
def test_validate_shape_rejects_non_objects(value: object) -> None:
    assert validate_shape(value, ["a"]) is False
