"""
Matchers module - Interpolation protection

This module provides:
- base: Replacement records, marker creation, replace/reinsert of interpolations
- icu, i18next, sprintf: Grammar-specific matchers
- registry: The closed Grammar enumeration and extract/restore entry points
"""

from autotranslate.matchers.base import (
    MARKER_TEMPLATE,
    Matcher,
    Replacement,
    make_marker,
    reinsert_interpolations,
    replace_interpolations,
)

from autotranslate.matchers.registry import (
    MATCHERS,
    Grammar,
    available_matchers,
    extract,
    get_grammar,
    get_matcher,
    restore,
)
