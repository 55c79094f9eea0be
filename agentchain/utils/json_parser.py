"""
Tolerant JSON extraction for LLM responses.

Local models rarely return a bare JSON object. This module handles:
- Markdown code fences (```json ... ```)
- Conversational wrapping ("Sure! Here is the plan: {...} Let me know")
- Trailing commas and JavaScript-style comments
- Several objects in one reply (the first balanced one wins)
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the text unchanged."""
    match = _FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def extract_first_json_object(text: str) -> str | None:
    """
    Find the first balanced ``{...}`` block in text.

    Braces inside JSON strings are ignored, so reasoning text such as
    ``"thought": "use {x}"`` does not break the scan.

    Args:
        text: Raw model output

    Returns:
        The object substring, or None if no balanced block exists
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False

        for index in range(start, len(text)):
            char = text[index]

            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]

        # Unbalanced from this opening brace; try the next one
        start = text.find("{", start + 1)

    return None


def clean_json_string(text: str) -> str:
    """
    Remove common LLM JSON defects.

    Handles:
    - // line comments and /* block */ comments
    - Trailing commas before } or ]
    """
    text = re.sub(r"(?m)^\s*//[^\n]*$", "", text)
    text = re.sub(r"/\*[\s\S]*?\*/", "", text)
    text = re.sub(r",\s*([\}\]])", r"\1", text)
    return text.strip()


def parse_json_object(text: str) -> dict[str, Any] | None:
    """
    Parse the first JSON object found in text.

    Tries in order:
    1. Direct parse of the whole text
    2. Code-fence body
    3. First balanced object
    4. Same, after cleaning comments/trailing commas

    Returns:
        Parsed dict, or None if nothing parseable was found
    """
    if not text or not text.strip():
        return None

    candidates: list[str] = [text.strip()]

    fenced = strip_code_fences(text)
    if fenced not in candidates:
        candidates.append(fenced)

    balanced = extract_first_json_object(fenced) or extract_first_json_object(text)
    if balanced and balanced not in candidates:
        candidates.append(balanced)

    for candidate in list(candidates):
        cleaned = clean_json_string(candidate)
        if cleaned not in candidates:
            candidates.append(cleaned)

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict):
            return result
        logger.debug(f"JSON parsed but not an object: {type(result).__name__}")

    logger.warning(f"Failed to parse JSON object from response: {text[:100]}...")
    return None


__all__ = [
    "strip_code_fences",
    "extract_first_json_object",
    "clean_json_string",
    "parse_json_object",
]
