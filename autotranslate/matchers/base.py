"""
Interpolation replacement core.

A matcher is a function that receives a string and returns the (start, end)
spans of the interpolations it recognizes, left to right. This module turns
those spans into markers that translation services leave alone, and puts
the original interpolations back into the translated text.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple

from autotranslate.logger import get_logger

logger = get_logger(__name__)

Span = Tuple[int, int]
Matcher = Callable[[str], List[Span]]

# Google Translate and Azure skip elements marked translate="no" in html mode,
# DeepL skips them through ignore_tags.
MARKER_TEMPLATE = '<span translate="no">{index}</span>'


@dataclass(frozen=True)
class Replacement:
    """One interpolation found in a source string and the marker standing in for it."""
    original: str
    marker: str


def make_marker(index: int) -> str:
    """
    Build the marker for a replacement index.

    Example:
        >>> make_marker(3)
        '<span translate="no">3</span>'
    """
    return MARKER_TEMPLATE.format(index=index)


def _free_markers(text: str) -> Iterator[str]:
    """Yield markers in index order, skipping any that already occur in the text."""
    index = 0
    while True:
        marker = make_marker(index)
        if marker not in text:
            yield marker
        index += 1


def _normalize_spans(text: str, spans: List[Span]) -> List[Span]:
    """
    Drop empty spans and check the rest are ordered, in range and non-overlapping.

    Returns an empty list when the spans are unusable, so the text is
    translated unprotected instead of being corrupted.
    """
    cleaned = sorted((start, end) for start, end in spans if end > start)
    cursor = 0
    for start, end in cleaned:
        if start < cursor or end > len(text):
            logger.warning(f"Ignoring overlapping interpolation matches in: {text[:50]}")
            return []
        cursor = end
    return cleaned


def replace_interpolations(text: str, matcher: Matcher) -> Tuple[str, List[Replacement]]:
    """
    Replace interpolations in text with markers.

    Args:
        text: The source string
        matcher: Function returning the spans of interpolations in the text

    Returns:
        Tuple of (clean_text, replacements), replacements in left-to-right order

    Example:
        >>> from autotranslate.matchers.icu import match_icu
        >>> replace_interpolations("Hello {name}!", match_icu)
        ('Hello <span translate="no">0</span>!', [Replacement(original='{name}', marker='<span translate="no">0</span>')])
    """
    spans = _normalize_spans(text, matcher(text))
    if not spans:
        return text, []

    markers = _free_markers(text)
    replacements: List[Replacement] = []
    parts: List[str] = []
    cursor = 0

    for start, end in spans:
        marker = next(markers)
        parts.append(text[cursor:start])
        parts.append(marker)
        replacements.append(Replacement(original=text[start:end], marker=marker))
        cursor = end

    parts.append(text[cursor:])
    clean_text = ''.join(parts)

    logger.debug(f"Replaced {len(replacements)} interpolations: {text[:50]} -> {clean_text[:50]}")
    return clean_text, replacements


def reinsert_interpolations(text: str, replacements: List[Replacement]) -> str:
    """
    Restore original interpolations from markers.

    Args:
        text: Translated text containing markers
        replacements: Replacements recorded by replace_interpolations

    Returns:
        Text with every marker replaced by its original interpolation
    """
    if not replacements:
        return text

    restored_text = text
    for replacement in replacements:
        if replacement.marker not in restored_text:
            logger.warning(f"Marker for '{replacement.original}' is missing from translation: {text[:80]}")
            continue
        restored_text = restored_text.replace(replacement.marker, replacement.original)

    return restored_text
