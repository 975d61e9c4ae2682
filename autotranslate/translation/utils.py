"""
JSON extraction helpers for chat-model responses.

Models sometimes wrap the requested JSON in markdown fences or prose, so
responses are parsed with several fallback strategies.
"""

import json
from typing import Any, List, Optional


def match_json_array(text: str) -> Optional[str]:
    """
    Extract the first JSON array from mixed text using bracket matching.

    Brackets inside JSON strings are ignored.

    Example:
        >>> match_json_array('Sure! ["a]", "b"] Hope this helps.')
        '["a]", "b"]'
    """
    if not text:
        return None

    depth = 0
    start = -1
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue

        if in_string:
            if char == '\\':
                escape_next = True
            elif char == '"':
                in_string = False
            continue

        if char == '"' and depth:
            in_string = True
        elif char == '[':
            if not depth:
                start = i
            depth += 1
        elif char == ']' and depth:
            depth -= 1
            if not depth:
                return text[start:i + 1]

    return None


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block."""
    text = text.strip()
    if not text.startswith('```'):
        return text

    lines = text.split('\n')[1:]
    if lines and lines[-1].strip() == '```':
        lines = lines[:-1]
    return '\n'.join(lines).strip()


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def safe_parse_json_array(text: str) -> Optional[List[Any]]:
    """
    Safely parse a JSON array from potentially malformed text.

    Tries multiple strategies:
    1. Direct parse
    2. Remove markdown code blocks and parse
    3. Extract with bracket matching and parse

    Returns:
        Parsed list or None on failure
    """
    if not text:
        return None

    candidates = [text.strip(), strip_code_fence(text), match_json_array(text)]
    for candidate in candidates:
        if not candidate:
            continue
        result = _loads(candidate)
        if isinstance(result, list):
            return result

    return None


def parse_translations_response(text: str) -> Optional[List[str]]:
    """
    Parse a translation response.

    Handles a bare array and an object with a "translations" key holding
    either strings or {"text": ...} entries.

    Returns:
        List of translated strings or None on failure
    """
    if not text:
        return None

    result = safe_parse_json_array(text)
    if result is None:
        obj = _loads(strip_code_fence(text))
        if isinstance(obj, dict) and isinstance(obj.get('translations'), list):
            result = obj['translations']

    if result is None:
        return None

    return [entry.get('text', '') if isinstance(entry, dict) else str(entry) for entry in result]
