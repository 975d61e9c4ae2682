"""
Translation service interface.

Every provider receives batches of (key, value) units, protects the
interpolations of each value with markers, translates the clean texts and
restores the interpolations in the results. Providers only implement the
text round trip in _translate_texts().
"""

import html
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from autotranslate.exceptions import ProviderError
from autotranslate.logger import get_logger
from autotranslate.matchers import Grammar, Replacement, extract, restore

logger = get_logger(__name__)


@dataclass
class TranslationUnit:
    """A string waiting to be translated."""
    key: str
    value: str


@dataclass
class TranslationResult:
    key: str
    value: str          # Source text
    translated: str


@dataclass
class ServiceOptions:
    """What a service needs to initialize, passed explicitly from the run configuration."""
    config: Optional[str] = None                # Opaque service config: API key, "key,region"...
    matcher: Grammar = Grammar.ICU
    decode_escapes: bool = False
    context_file: Optional[Path] = None
    extra: Dict[str, str] = field(default_factory=dict)


class TranslationService(ABC):
    """Base class of translation providers."""

    name = ''

    def __init__(self):
        self.options = ServiceOptions()

    @abstractmethod
    def initialize(self, options: ServiceOptions):
        """
        Prepare the service for a run.

        Raises:
            InitError: If the service cannot be used (missing credentials, unreachable API)
        """

    def supports_language(self, language: str) -> bool:
        return True

    def finish(self):
        """Called once after every language of a run has finished."""

    def translate_strings(
        self,
        units: List[TranslationUnit],
        source_language: str,
        target_language: str,
    ) -> List[TranslationResult]:
        """
        Translate a batch of units.

        Returns:
            One result per unit, in the same order

        Raises:
            ProviderError: If the provider call fails or returns the wrong number of texts
        """
        if not units:
            return []

        protected = [self._protect(unit.value) for unit in units]
        texts = [clean for clean, _ in protected]

        translated = self._translate_texts(texts, source_language, target_language, [unit.key for unit in units])

        if len(translated) != len(units):
            raise ProviderError(
                f"{self.name} returned {len(translated)} translations for {len(units)} strings"
            )
        if not all(isinstance(text, str) for text in translated):
            raise ProviderError(f"{self.name} returned a translation that is not a string")

        return [
            self._finish(unit, text, replacements)
            for unit, text, (_, replacements) in zip(units, translated, protected)
        ]

    @abstractmethod
    def _translate_texts(
        self,
        texts: List[str],
        source_language: str,
        target_language: str,
        keys: List[str],
    ) -> List[str]:
        """Translate marker-protected texts, keeping their order."""

    def _protect(self, text: str) -> Tuple[str, List[Replacement]]:
        return extract(text, self.options.matcher)

    def _finish(self, unit: TranslationUnit, translated: str, replacements: List[Replacement]) -> TranslationResult:
        if self.options.decode_escapes:
            translated = html.unescape(translated)
        return TranslationResult(key=unit.key, value=unit.value, translated=restore(translated, replacements))
