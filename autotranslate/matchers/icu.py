"""
ICU MessageFormat interpolation matcher.

The message is parsed into literal text and structural nodes (arguments,
formatted arguments, plural/selectordinal/select blocks and '#'). A regular
expression is then derived from that tree: literal text is matched verbatim
and every structural piece becomes a (.*) gap. Matched against the original
string, each gap captures exactly the syntax around the translatable text,
so plural cases keep their bodies translatable while keys and braces are
protected.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from autotranslate.logger import get_logger
from autotranslate.matchers.base import Span

logger = get_logger(__name__)

SELECT_TYPES = ('plural', 'selectordinal', 'select')

_IDENTIFIER = re.compile(r"[^\s{},]+")
_NUMBER = re.compile(r"-?\d+")
_GAP = '(.*)'
_GAP_RUN = re.compile(r'(?:\(\.\*\)){2,}')


class ICUParseError(ValueError):
    """The message is not valid ICU MessageFormat."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at position {position}")
        self.position = position


@dataclass
class Argument:
    """Simple argument, e.g. {name}"""
    name: str


@dataclass
class Function:
    """Formatted argument, e.g. {price, number, ::currency/EUR}"""
    name: str
    function: str
    param: Optional[str] = None


@dataclass
class Case:
    key: str
    tokens: List['Token'] = field(default_factory=list)


@dataclass
class Select:
    """plural, selectordinal or select block with its cases."""
    name: str
    type: str
    cases: List[Case]
    offset: int = 0


@dataclass
class Octothorpe:
    """The '#' placeholder inside a plural case."""


Token = Union[str, Argument, Function, Select, Octothorpe]


class _Parser:
    """Recursive descent parser. Literal text is kept exactly as written, quotes included."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def parse(self) -> List[Token]:
        tokens = self.parse_message(in_plural=False)
        if self.pos < len(self.text):
            raise ICUParseError("Unexpected '}'", self.pos)
        return tokens

    def parse_message(self, in_plural: bool) -> List[Token]:
        tokens: List[Token] = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == '{':
                tokens.append(self.parse_argument(in_plural))
            elif char == '}':
                # Closes the enclosing case, handled by the caller
                break
            elif char == '#' and in_plural:
                tokens.append(Octothorpe())
                self.pos += 1
            else:
                tokens.append(self.parse_text(in_plural))
        return tokens

    def parse_text(self, in_plural: bool) -> str:
        start = self.pos
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "'":
                following = self.text[self.pos + 1:self.pos + 2]
                if following == "'":
                    self.pos += 2
                elif following in ('{', '}') or (in_plural and following == '#'):
                    self.skip_quoted()
                else:
                    self.pos += 1
                continue
            if char in '{}' or (in_plural and char == '#'):
                break
            self.pos += 1
        return self.text[start:self.pos]

    def skip_quoted(self):
        """Skip a quoted literal starting at the opening apostrophe."""
        self.pos += 1
        while self.pos < len(self.text):
            if self.text[self.pos] == "'":
                if self.text[self.pos + 1:self.pos + 2] == "'":
                    self.pos += 2
                    continue
                self.pos += 1
                return
            self.pos += 1

    def parse_argument(self, in_plural: bool) -> Token:
        self.expect('{')
        self.skip_whitespace()
        name = self.read_identifier("argument name")
        self.skip_whitespace()

        if self.peek() == '}':
            self.pos += 1
            return Argument(name)

        self.expect(',')
        self.skip_whitespace()
        kind = self.read_identifier("argument type")
        self.skip_whitespace()

        if kind in SELECT_TYPES:
            return self.parse_select(name, kind, in_plural)

        param = None
        if self.peek() == ',':
            self.pos += 1
            param = self.read_param()
        self.expect('}')
        return Function(name, kind, param)

    def parse_select(self, name: str, kind: str, in_plural: bool) -> Select:
        self.expect(',')
        self.skip_whitespace()

        offset = 0
        if kind != 'select' and self.text.startswith('offset:', self.pos):
            self.pos += len('offset:')
            self.skip_whitespace()
            match = _NUMBER.match(self.text, self.pos)
            if not match:
                raise ICUParseError("Expected plural offset", self.pos)
            offset = int(match.group())
            self.pos = match.end()
            self.skip_whitespace()

        # '#' keeps its meaning inside a select nested in a plural case
        case_in_plural = in_plural or kind != 'select'
        cases: List[Case] = []
        while self.peek() not in ('}', None):
            key = self.read_identifier("case key")
            self.skip_whitespace()
            self.expect('{')
            tokens = self.parse_message(case_in_plural)
            self.expect('}')
            cases.append(Case(key, tokens))
            self.skip_whitespace()

        if not cases:
            raise ICUParseError(f"No cases in {kind} argument '{name}'", self.pos)
        self.expect('}')
        return Select(name, kind, cases, offset)

    def read_param(self) -> str:
        """Read a function parameter up to the closing brace, allowing nested braces."""
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "'":
                self.skip_quoted()
                continue
            if char == '{':
                depth += 1
            elif char == '}':
                if depth == 0:
                    break
                depth -= 1
            self.pos += 1
        return self.text[start:self.pos].strip()

    def read_identifier(self, what: str) -> str:
        match = _IDENTIFIER.match(self.text, self.pos)
        if not match:
            raise ICUParseError(f"Expected {what}", self.pos)
        self.pos = match.end()
        return match.group()

    def skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> Optional[str]:
        return self.text[self.pos] if self.pos < len(self.text) else None

    def expect(self, char: str):
        if self.peek() != char:
            raise ICUParseError(f"Expected '{char}'", self.pos)
        self.pos += 1


def parse(text: str) -> List[Token]:
    """
    Parse an ICU message into tokens.

    Raises:
        ICUParseError: If the message is malformed
    """
    return _Parser(text).parse()


def build_pattern(tokens: List[Token]) -> str:
    """
    Derive the matching regular expression for a parsed message.

    Consecutive gaps are collapsed into one to keep backtracking linear in
    the number of literal anchors; as a consequence two placeholders with
    no literal text between them are captured as a single replacement.

    Example:
        >>> build_pattern(parse('{count} {count, plural, =1 {one} other {many}}'))
        '(.*)\\\\ (.*)one(.*)many(.*)'
    """
    parts = []
    for token in tokens:
        if isinstance(token, str):
            parts.append(re.escape(token))
        elif isinstance(token, Select):
            for case in token.cases:
                if case.tokens:
                    parts.append(_GAP + build_pattern(case.tokens) + _GAP)
        else:
            parts.append(_GAP)

    return _GAP_RUN.sub(lambda m: _GAP, ''.join(parts))


def match_icu(text: str) -> List[Span]:
    """Return the spans of ICU syntax in text, or no spans if it cannot be matched."""
    try:
        tokens = parse(text)
    except ICUParseError as e:
        logger.debug(f"Not matching malformed ICU message ({e}): {text[:50]}")
        return []

    try:
        match = re.search(build_pattern(tokens), text, re.DOTALL)
    except re.error as e:
        logger.debug(f"Could not build ICU pattern ({e}): {text[:50]}")
        return []

    if not match:
        logger.debug(f"ICU pattern did not match: {text[:50]}")
        return []

    return [match.span(group) for group in range(1, match.re.groups + 1) if match.start(group) != -1]
