"""
Manual service: asks for every translation on the terminal.

Interpolations are shown as markers and must be kept in the answer.
An empty answer keeps the source text.
"""

from typing import Callable, List, Optional

from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions, TranslationService

logger = get_logger(__name__)


class ManualService(TranslationService):
    name = 'manual'

    def __init__(self, prompt: Optional[Callable[[str], str]] = None):
        super().__init__()
        self.prompt = prompt or input

    def initialize(self, options: ServiceOptions):
        self.options = options

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        translations = []
        for key, text in zip(keys, texts):
            answer = self.prompt(f"[{source_language} -> {target_language}] {key}\n  {text}\n> ").strip()
            translations.append(answer or text)
        return translations
