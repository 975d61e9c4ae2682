"""
Translation module - Core translation functionality

This module provides:
- TranslationManager: Main translation workflow coordinator
- Progress and result dataclasses
- Processing utilities for batch-based translation
"""

from autotranslate.translation.progress import (
    FileResult,
    LanguageResult,
    PipelineState,
    RunSummary,
    TranslationProgress,
)
from autotranslate.translation.manager import TranslationManager
from autotranslate.translation.processor import (
    chunk_units,
    get_retry_delay,
    translate_batch,
    translate_in_batches,
)
