"""
sprintf interpolation matcher.

Covers printf-style conversion specifiers as used by gettext, PHP, Python
and Objective-C catalogs: %s, %d, %1$s, %(name)s, %-5.2f, %lld, %@ and %%.
A space is not accepted as a flag so that "50% off" stays plain text.
"""

import re
from typing import List

from autotranslate.matchers.base import Span

SPRINTF_PATTERN = re.compile(
    r"%"
    r"(?:\d+\$)?"                   # positional argument
    r"(?:\([A-Za-z_][\w.]*\))?"     # named argument
    r"[-+0#']*"                     # flags
    r"(?:\d+|\*)?"                  # width
    r"(?:\.(?:\d+|\*))?"            # precision
    r"(?:hh|h|ll|l|L|q|j|z|t)?"     # length modifier
    r"[bcdeEfFgGiosuxX@%]"          # conversion
)


def match_sprintf(text: str) -> List[Span]:
    """
    Return the spans of sprintf conversion specifiers, left to right.

    Example:
        >>> match_sprintf("%s has %d new messages")
        [(0, 2), (7, 9)]
    """
    return [match.span() for match in SPRINTF_PATTERN.finditer(text)]
