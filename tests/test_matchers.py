"""Tests for interpolation matchers."""
import pytest

from autotranslate.exceptions import InitError
from autotranslate.matchers import (
    Grammar,
    Replacement,
    available_matchers,
    extract,
    make_marker,
    restore,
)
from autotranslate.matchers.i18next import match_i18next
from autotranslate.matchers.icu import ICUParseError, match_icu, parse
from autotranslate.matchers.sprintf import match_sprintf


def m(index):
    return make_marker(index)


# === ICU ===

class TestICU:
    def test_plural_example(self):
        text = '{count} {count, plural, =1 {one person} =2 {two people} other {many people}}'
        clean, replacements = extract(text, Grammar.ICU)
        assert [r.original for r in replacements] == [
            '{count} {count, plural, =1', '{', '} =2 {', '} other {', '}}'
        ]
        assert clean == f'{m(0)} {m(1)}one person{m(2)}two people{m(3)}many people{m(4)}'
        assert restore(clean, replacements) == text

    def test_simple_argument(self):
        clean, replacements = extract('Hello {name}!', 'icu')
        assert clean == f'Hello {m(0)}!'
        assert replacements == [Replacement(original='{name}', marker=m(0))]

    def test_octothorpe_in_plural(self):
        text = 'You have {n, plural, one {# message} other {# messages}}'
        clean, replacements = extract(text, 'icu')
        assert [r.original for r in replacements] == ['{n, plural, one {#', '} other {#', '}}']
        assert clean == f'You have {m(0)} message{m(1)} messages{m(2)}'
        assert restore(clean, replacements) == text

    def test_select_round_trip(self):
        text = '{gender, select, male {He} female {She} other {They}} liked it'
        clean, replacements = extract(text, 'icu')
        assert 'He' in clean and 'She' in clean and 'liked it' in clean
        assert restore(clean, replacements) == text

    def test_formatted_argument(self):
        text = 'Total: {price, number, ::currency/EUR}'
        clean, replacements = extract(text, 'icu')
        assert clean == f'Total: {m(0)}'
        assert replacements[0].original == '{price, number, ::currency/EUR}'

    def test_adjacent_placeholders_collapse(self):
        clean, replacements = extract('{a}{b}', 'icu')
        assert clean == m(0)
        assert [r.original for r in replacements] == ['{a}{b}']

    def test_quoted_braces_are_text(self):
        assert match_icu("Use '{braces}' here") == []

    def test_malformed_is_unprotected(self):
        assert match_icu('Hello {name') == []
        assert extract('Hello {name', 'icu') == ('Hello {name', [])

    def test_parse_error(self):
        with pytest.raises(ICUParseError):
            parse('{count, plural, }')


# === i18next ===

class TestI18next:
    def test_interpolation_example(self):
        text = "this is a {{test}} sentence with {{multiple}} placeholders"
        clean, replacements = extract(text, Grammar.I18NEXT)
        assert replacements == [Replacement('{{test}}', m(0)), Replacement('{{multiple}}', m(1))]
        assert clean == f'this is a {m(0)} sentence with {m(1)} placeholders'
        assert restore(clean, replacements) == text

    def test_nesting_example(self):
        text = "this is a $t({{test}}) sentence with $t(advanced, {'count': {{advanced}} }) placeholders"
        clean, replacements = extract(text, Grammar.I18NEXT)
        assert [r.original for r in replacements] == ['$t({{test}})', "$t(advanced, {'count': {{advanced}} })"]
        assert clean == f'this is a {m(0)} sentence with {m(1)} placeholders'
        assert restore(clean, replacements) == text

    def test_interpolation_variants(self):
        text = 'Hi {{- name}}, you have {{count, number}} items'
        assert [text[s:e] for s, e in match_i18next(text)] == ['{{- name}}', '{{count, number}}']

    def test_single_braces_ignored(self):
        assert match_i18next('Hello {name}') == []

    def test_unbalanced_nesting_ignored(self):
        assert match_i18next('broken $t(key, {') == []


# === sprintf ===

class TestSprintf:
    def test_example(self):
        clean, replacements = extract('this is a %s sentence with %s placeholders', 'sprintf')
        assert clean == f'this is a {m(0)} sentence with {m(1)} placeholders'
        assert [r.original for r in replacements] == ['%s', '%s']

    def test_specifier_forms(self):
        text = '%1$s %(name)s %-5.2f %lld %@ %%'
        assert [text[s:e] for s, e in match_sprintf(text)] == ['%1$s', '%(name)s', '%-5.2f', '%lld', '%@', '%%']

    def test_percent_before_space_is_text(self):
        assert match_sprintf('50% off') == []


# === Engine ===

class TestEngine:
    @pytest.mark.parametrize('grammar,text', [
        ('icu', 'Welcome back, {user}! You have {n, plural, one {# task} other {# tasks}}.'),
        ('i18next', 'Welcome back, {{user}}! $t(tasks, {"count": {{n}} })'),
        ('sprintf', 'Welcome back, %s! You have %d tasks.'),
    ])
    def test_round_trip(self, grammar, text):
        clean, replacements = extract(text, grammar)
        assert replacements
        assert restore(clean, replacements) == text

    @pytest.mark.parametrize('grammar', ['none', 'icu', 'i18next', 'sprintf'])
    def test_no_placeholders(self, grammar):
        assert extract('Just plain text.', grammar) == ('Just plain text.', [])

    def test_none_grammar_ignores_braces(self):
        assert extract('Hello {name}', 'none') == ('Hello {name}', [])

    def test_marker_already_in_text_is_skipped(self):
        text = f'{m(0)} {{name}}'
        clean, replacements = extract(text, 'icu')
        assert clean == f'{m(0)} {m(1)}'
        assert restore(clean, replacements) == text

    def test_restore_repeated_marker(self):
        replacements = [Replacement(original='{name}', marker=m(0))]
        assert restore(f'{m(0)} and {m(0)}', replacements) == '{name} and {name}'

    def test_restore_missing_marker(self):
        replacements = [Replacement(original='{name}', marker=m(0))]
        assert restore('Hallo', replacements) == 'Hallo'

    def test_unknown_grammar(self):
        with pytest.raises(InitError):
            extract('Hello', 'mustache')

    def test_available_matchers(self):
        assert available_matchers() == ['none', 'icu', 'i18next', 'sprintf']
