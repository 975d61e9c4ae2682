"""Dry-run service: logs what would be translated and echoes it back. Nothing is written."""

from typing import List

from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions, TranslationService

logger = get_logger(__name__)


class DryRunService(TranslationService):
    name = 'dry-run'

    def initialize(self, options: ServiceOptions):
        self.options = options

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        for key, text in zip(keys, texts):
            logger.info(f"  [{source_language} -> {target_language}] {key}: {text}")
        return list(texts)
