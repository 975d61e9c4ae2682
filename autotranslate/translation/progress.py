"""
Translation Progress Data Classes

Contains the progress record sent to callbacks during a run and the
per-file, per-language and per-run results returned by the manager.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from autotranslate.exceptions import LoadError, TranslationError


class PipelineState(str, Enum):
    """Stages of one target language; FAILED is terminal like DONE."""
    COMPUTE_WORK_SET = 'compute_work_set'
    TRANSLATE = 'translate'
    MERGE = 'merge'
    PERSIST = 'persist'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class TranslationProgress:
    """Progress information for ongoing translation."""
    current_language: str
    phase: str = "translating"       # "checking", "translating", "retrying", "saving", "completed"
    current_file: str = ""
    # Batch progress fields
    current_batch: int = 0           # Current batch number (1-indexed)
    total_batches: int = 0           # Total batches for current file
    batch_keys_count: int = 0        # Number of keys in current batch
    retry_attempt: int = 0           # Retry number of a rate-limited batch


@dataclass
class FileResult:
    """What happened to one catalog of a target language."""
    name: str
    added: int = 0          # Translated keys that were missing from the target
    updated: int = 0        # Translated keys whose source changed
    copied: int = 0         # Untranslatable values copied verbatim
    removed: int = 0        # Unused keys pruned
    written: bool = False


@dataclass
class LanguageResult:
    language: str
    state: PipelineState = PipelineState.COMPUTE_WORK_SET
    files: List[FileResult] = field(default_factory=list)
    deleted_files: List[str] = field(default_factory=list)
    error: Optional[TranslationError] = None
    failed_at: Optional[PipelineState] = None

    @property
    def added(self) -> int:
        return sum(f.added + f.updated + f.copied for f in self.files)

    @property
    def removed(self) -> int:
        return sum(f.removed for f in self.files)

    def fail(self, error: TranslationError):
        self.failed_at = self.state
        self.state = PipelineState.FAILED
        self.error = error


@dataclass
class RunSummary:
    source_language: str
    dry_run: bool = False
    languages: List[LanguageResult] = field(default_factory=list)
    skipped_languages: List[str] = field(default_factory=list)
    load_errors: List[LoadError] = field(default_factory=list)
    elapsed_time: float = 0.0

    @property
    def failed_languages(self) -> List[LanguageResult]:
        return [result for result in self.languages if result.state == PipelineState.FAILED]

    @property
    def total_added(self) -> int:
        return sum(result.added for result in self.languages)

    @property
    def total_removed(self) -> int:
        return sum(result.removed for result in self.languages)

    @property
    def success(self) -> bool:
        return not self.failed_languages and not self.load_errors
