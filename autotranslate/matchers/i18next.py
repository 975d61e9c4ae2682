"""
i18next interpolation matcher.

Recognizes {{value}} interpolations (including {{- unescaped}} and
{{value, format}}) and $t(key, {...}) nesting, whose options object may
itself contain interpolations, quoted strings and nested brackets.
"""

from typing import List, Optional

from autotranslate.matchers.base import Span

_CLOSING = {'(': ')', '{': '}'}


def _balanced_end(text: str, start: int) -> Optional[int]:
    """
    Find the end of the bracket group opened at text[start].

    Quotes are only honoured inside the options object of a $t(...) call,
    where they delimit JSON strings; elsewhere an apostrophe is plain text.

    Returns:
        Index just past the matching closing bracket, or None if unbalanced
    """
    stack: List[str] = []
    quote = None
    pos = start

    while pos < len(text):
        char = text[pos]
        if quote:
            if char == '\\':
                pos += 2
                continue
            if char == quote:
                quote = None
        elif char in ('"', "'") and len(stack) > 1 and stack[0] == ')':
            quote = char
        elif char in _CLOSING:
            stack.append(_CLOSING[char])
        elif char in (')', '}'):
            if not stack or char != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return pos + 1
        pos += 1

    return None


def match_i18next(text: str) -> List[Span]:
    """
    Return the spans of i18next interpolations and nestings, left to right.

    Example:
        >>> match_i18next("Hi {{name}}, see $t(help, {'count': {{n}} })")
        [(3, 11), (17, 44)]
    """
    spans: List[Span] = []
    pos = 0

    while pos < len(text):
        end = None
        if text.startswith('$t(', pos):
            end = _balanced_end(text, pos + 2)
        elif text.startswith('{{', pos):
            end = _balanced_end(text, pos)
            if end is not None and not text.startswith('}}', end - 2):
                end = None

        if end is None:
            pos += 1
            continue

        spans.append((pos, end))
        pos = end

    return spans
