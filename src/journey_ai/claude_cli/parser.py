"""Best-effort JSON extraction from Claude CLI stdout."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

PARSE_FAILURE_MESSAGE = "Failed to parse response as JSON"

_JSON_FENCE = re.compile(r"```json\b\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_ANY_FENCE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)
_BRACKET_PAIRS = {"{": "}", "[": "]"}
_MISSING = object()


@dataclass(slots=True)
class ParseResult:
    """Outcome of one parse call."""

    success: bool
    data: Any = None
    error: str | None = None


class ScanState(str, Enum):
    """Bracket scanner states."""

    DEFAULT = "default"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


def parse_claude_response(raw: str, expect_json: bool) -> ParseResult:
    """Convert raw CLI output into structured data.

    Plain-text requests get the trimmed output back unchanged. JSON requests try,
    in order: the whole text, a fenced code block, then the first balanced
    ``{...}`` or ``[...]`` span. When nothing decodes, ``data`` still carries the
    trimmed text so callers can inspect it.
    """

    trimmed = raw.strip()
    if not expect_json:
        return ParseResult(success=True, data=trimmed)

    for candidate in (
        trimmed,
        extract_json_from_markdown(trimmed),
        extract_json_by_brackets(trimmed),
    ):
        if candidate is None:
            continue
        parsed = _try_load(candidate)
        if parsed is not _MISSING:
            return ParseResult(success=True, data=parsed)

    return ParseResult(success=False, data=trimmed, error=PARSE_FAILURE_MESSAGE)


def extract_json_from_markdown(text: str) -> str | None:
    """Return the body of a ```json fence, else of the first JSON-looking fence."""

    labeled = _JSON_FENCE.search(text)
    if labeled is not None:
        return labeled.group(1).strip()

    for match in _ANY_FENCE.finditer(text):
        content = match.group(1).strip()
        if content.startswith(("{", "[")):
            return content
    return None


def extract_json_by_brackets(text: str) -> str | None:
    """Return the first balanced object or array span, ignoring brackets in strings."""

    starts = [index for index in (text.find("{"), text.find("[")) if index != -1]
    if not starts:
        return None
    start = min(starts)
    open_bracket = text[start]
    close_bracket = _BRACKET_PAIRS[open_bracket]

    state = ScanState.DEFAULT
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if state is ScanState.ESCAPED:
            state = ScanState.IN_STRING
            continue
        if state is ScanState.IN_STRING:
            if char == "\\":
                state = ScanState.ESCAPED
            elif char == '"':
                state = ScanState.DEFAULT
            continue

        if char == '"':
            state = ScanState.IN_STRING
        elif char == open_bracket:
            depth += 1
        elif char == close_bracket:
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def validate_shape(data: object, required_keys: Iterable[str]) -> bool:
    """Shallow check that ``data`` is a mapping holding every required key."""

    if not isinstance(data, dict):
        return False
    return all(key in data for key in required_keys)


def _try_load(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return _MISSING
