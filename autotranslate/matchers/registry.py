"""
Matcher registry.

The set of interpolation grammars is closed: each Grammar member maps to
exactly one matcher in MATCHERS, which is the only place a grammar is
registered.
"""

from enum import Enum
from typing import Dict, List, Tuple, Union

from autotranslate.exceptions import InitError
from autotranslate.matchers.base import Matcher, Replacement, Span, reinsert_interpolations, replace_interpolations
from autotranslate.matchers.i18next import match_i18next
from autotranslate.matchers.icu import match_icu
from autotranslate.matchers.sprintf import match_sprintf


class Grammar(str, Enum):
    NONE = 'none'
    ICU = 'icu'
    I18NEXT = 'i18next'
    SPRINTF = 'sprintf'


def match_nothing(text: str) -> List[Span]:
    """Matcher for catalogs without interpolations."""
    return []


MATCHERS: Dict[Grammar, Matcher] = {
    Grammar.NONE: match_nothing,
    Grammar.ICU: match_icu,
    Grammar.I18NEXT: match_i18next,
    Grammar.SPRINTF: match_sprintf,
}


def available_matchers() -> List[str]:
    return [grammar.value for grammar in MATCHERS]


def get_grammar(name: Union[str, Grammar]) -> Grammar:
    """
    Resolve a grammar name.

    Raises:
        InitError: If the grammar does not exist
    """
    try:
        return Grammar(name)
    except ValueError:
        raise InitError(
            f"The matcher {name} doesn't exist. Available matchers: {', '.join(available_matchers())}",
            details={"matcher": str(name)},
        )


def get_matcher(name: Union[str, Grammar]) -> Matcher:
    return MATCHERS[get_grammar(name)]


def extract(text: str, grammar: Union[str, Grammar]) -> Tuple[str, List[Replacement]]:
    """Replace the interpolations of a grammar in text with markers."""
    return replace_interpolations(text, get_matcher(grammar))


def restore(text: str, replacements: List[Replacement]) -> str:
    """Put the interpolations recorded by extract() back into text."""
    return reinsert_interpolations(text, replacements)
