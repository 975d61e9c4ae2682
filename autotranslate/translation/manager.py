"""
Translation Manager Module

Main TranslationManager class that coordinates the translation workflow:
- Load and check the source catalogs
- For every target language, find missing and changed keys
- Translate them in batches (with rate-limit retries)
- Merge, prune and write the target catalogs and the cache snapshot
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

import autotranslate.language_codes as lc
from autotranslate.config import TranslateConfig
from autotranslate.core import (
    Catalog,
    DirectoryStructure,
    FileType,
    available_languages,
    build_catalog,
    cache_file_path,
    catalog_path,
    changed_keys,
    check_key_based,
    delete_catalog_file,
    find_inconsistent_keys,
    fix_inconsistencies,
    language_path,
    load_language,
    load_snapshot,
    unflatten_content,
    unused_keys,
    write_catalog_file,
)
from autotranslate.exceptions import InitError, InvalidKeysError, TranslationError, UnsupportedLanguageError
from autotranslate.logger import get_logger
from autotranslate.matchers import get_grammar
from autotranslate.services.base import ServiceOptions, TranslationService, TranslationUnit
from autotranslate.translation.processor import translate_in_batches
from autotranslate.translation.progress import (
    FileResult,
    LanguageResult,
    PipelineState,
    RunSummary,
    TranslationProgress,
)

logger = get_logger(__name__)


@dataclass
class FilePlan:
    """Work to do for one source catalog in one target language."""
    source: Catalog
    target_path: Path
    cache_path: Path
    existing: Dict[str, Any]
    work_keys: List[str]
    units: List[TranslationUnit]
    translations: Dict[str, str] = field(default_factory=dict)
    merged: Dict[str, Any] = field(default_factory=dict)
    result: Optional[FileResult] = None


class TranslationManager:
    """
    Manages one translation run over an input directory.

    Features:
    - Translates missing keys and keys whose source changed since the last run
    - Retries rate-limited batches with exponential backoff
    - Languages fail independently; a failed language writes nothing
    - Optional parallelism across languages
    """

    def __init__(
        self,
        config: TranslateConfig,
        service: TranslationService,
        sleep: Callable[[float], None] = time.sleep,
        progress_callback: Optional[Callable[[TranslationProgress], None]] = None,
    ):
        """
        Initialize translation manager.

        Args:
            config: Run configuration
            service: Translation service, initialized by run()
            sleep: Function used to wait between retries
            progress_callback: Optional callback for progress updates
        """
        self.config = config
        self.service = service
        self.sleep = sleep
        self.progress_callback = progress_callback
        self.structure = DirectoryStructure(config.directory_structure)
        self.file_type = FileType(config.file_type)
        self.start_time: Optional[float] = None
        # Source files that failed to load; their targets are never deleted as unused
        self._failed_sources: Set[str] = set()

    def _report(self, language: str, phase: str, file_name: str = ""):
        if self.progress_callback:
            self.progress_callback(TranslationProgress(current_language=language, phase=phase, current_file=file_name))

    def _check_input(self):
        """
        Raises:
            InitError: If the input directory, source language or cache directory is unusable
        """
        config = self.config
        if not config.input_dir.is_dir():
            raise InitError(f"The input directory {config.input_dir} doesn't exist")

        source_path = language_path(config.input_dir, config.source_language, self.structure)
        if not source_path.exists():
            raise InitError(
                f"The source language {config.source_language} doesn't exist in {config.input_dir} "
                f"(expected {source_path})"
            )

        try:
            config.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InitError(f"Could not create the cache directory {config.cache_dir}: {e}")

    def _load_sources(self, summary: RunSummary) -> List[Catalog]:
        """Load the source catalogs, dropping files that fail to load or have invalid keys."""
        config = self.config
        catalogs = load_language(
            config.input_dir, config.source_language, self.structure,
            self.file_type, config.with_arrays, config.exclude, config.recursive,
            errors=summary.load_errors,
        )

        sources = []
        for catalog in catalogs:
            try:
                check_key_based(catalog)
            except InvalidKeysError as e:
                logger.error(f"{e}. Use --type natural for natural-language files")
                summary.load_errors.append(e)
                continue

            inconsistent = find_inconsistent_keys(catalog)
            if inconsistent and config.fix_inconsistencies:
                catalog = fix_inconsistencies(catalog)
                if not config.dry_run:
                    write_catalog_file(
                        catalog_path(config.input_dir, config.source_language, self.structure, catalog.name),
                        catalog.original,
                    )
                logger.info(f"Fixed {len(inconsistent)} inconsistent keys in {catalog.name}")
            elif inconsistent:
                logger.warning(
                    f"{catalog.name} has {len(inconsistent)} keys whose value differs from the key "
                    f"(e.g. '{inconsistent[0]}'). Run with --fix-inconsistencies to fix them"
                )

            sources.append(catalog)

        logger.info(f"Found {len(sources)} source file(s) in {config.source_language}")
        return sources

    def _source_name(self, path: Path) -> str:
        """Catalog name of a source file path, as used to match target files."""
        source_dir = language_path(self.config.input_dir, self.config.source_language, self.structure)
        try:
            return path.relative_to(source_dir).as_posix()
        except ValueError:
            return path.as_posix()

    def _service_options(self) -> ServiceOptions:
        config = self.config
        return ServiceOptions(
            config=config.service_config,
            matcher=get_grammar(config.matcher),
            decode_escapes=config.decode_escapes,
            context_file=config.context_file,
            extra=dict(config.service_options),
        )

    def _target_languages(self) -> List[str]:
        config = self.config
        return [
            language
            for language in available_languages(config.input_dir, self.structure, ignore=[config.cache_dir])
            if not lc.languages_match(language, config.source_language)
        ]

    def run(self) -> RunSummary:
        """
        Run the translation for every target language.

        Returns:
            Summary of the run

        Raises:
            InitError: If the run cannot start
            UnsupportedLanguageError: If the service does not support the source language
        """
        config = self.config
        self.start_time = time.time()
        summary = RunSummary(source_language=config.source_language, dry_run=config.dry_run)

        options = self._service_options()
        self._check_input()

        sources = self._load_sources(summary)
        if not sources:
            if not summary.load_errors:
                raise InitError(f"No translation files found for the source language {config.source_language}")
            logger.error("No usable source files, nothing to translate")
            return self._build_result(summary)

        self._failed_sources = {self._source_name(error.path) for error in summary.load_errors}

        logger.info(f"Initializing {self.service.name}...")
        self.service.initialize(options)

        if not self.service.supports_language(config.source_language):
            raise UnsupportedLanguageError(self.service.name, config.source_language)

        languages = []
        for language in self._target_languages():
            if self.service.supports_language(language):
                languages.append(language)
            else:
                logger.warning(f"{self.service.name} doesn't support {language}, skipping")
                summary.skipped_languages.append(language)

        if config.concurrency > 1 and len(languages) > 1:
            with ThreadPoolExecutor(max_workers=config.concurrency) as executor:
                summary.languages = list(executor.map(
                    lambda language: self.translate_language(language, sources), languages
                ))
        else:
            summary.languages = [self.translate_language(language, sources) for language in languages]

        self.service.finish()
        return self._build_result(summary)

    def _plan_file(self, language: str, source: Catalog, existing: Optional[Catalog]) -> FilePlan:
        """Compute the work set of one catalog: missing keys and keys changed since the snapshot."""
        config = self.config

        if existing is not None and existing.kind != source.kind:
            existing = build_catalog(existing.name, existing.original, source.kind, config.with_arrays)
        existing_content = existing.content if existing is not None else {}

        cache_path = cache_file_path(config.cache_dir, language, self.structure, source.name)
        changed = changed_keys(source.content, load_snapshot(cache_path, source.kind, config.with_arrays))

        work_keys = [key for key in source.content if key not in existing_content or key in changed]
        units = [TranslationUnit(key, source.source_text(key)) for key in work_keys if source.is_translatable(key)]

        return FilePlan(
            source=source,
            target_path=catalog_path(config.input_dir, language, self.structure, source.name),
            cache_path=cache_path,
            existing=existing_content,
            work_keys=work_keys,
            units=units,
        )

    def _merge(self, plan: FilePlan):
        """Existing target content, minus unused keys when pruning, plus the work set in source order."""
        source = plan.source
        merged = dict(plan.existing)
        removed = unused_keys(source.content, merged) if self.config.delete_unused_strings else []
        for key in removed:
            del merged[key]

        result = FileResult(name=source.name, removed=len(removed))
        for key in plan.work_keys:
            if key in plan.translations:
                if key in plan.existing:
                    result.updated += 1
                else:
                    result.added += 1
                merged[key] = plan.translations[key]
            else:
                result.copied += 1
                merged[key] = source.content[key]

        plan.merged = merged
        plan.result = result

    def _persist(self, language: str, plans: List[FilePlan], targets: List[Catalog], result: LanguageResult):
        """Write every catalog of the language, then its cache snapshots."""
        config = self.config

        for plan in plans:
            if plan.work_keys or plan.result.removed or not plan.target_path.exists():
                data = plan.merged
                if plan.source.kind == FileType.KEY_BASED:
                    data = unflatten_content(plan.merged, config.with_arrays)
                write_catalog_file(plan.target_path, data)
                plan.result.written = True
                logger.debug(f"Wrote {plan.target_path}")

        if config.delete_unused_strings and self.structure == DirectoryStructure.DEFAULT:
            planned = {plan.source.name for plan in plans}
            for target in targets:
                if target.name in planned or target.name in self._failed_sources:
                    continue
                delete_catalog_file(catalog_path(config.input_dir, language, self.structure, target.name))
                delete_catalog_file(cache_file_path(config.cache_dir, language, self.structure, target.name))
                result.deleted_files.append(target.name)

        for plan in plans:
            write_catalog_file(plan.cache_path, plan.source.original)

    def translate_language(self, language: str, sources: List[Catalog]) -> LanguageResult:
        """
        Run the pipeline of one target language.

        Errors are recorded on the returned result instead of raised, so
        one failing language never affects the others.
        """
        config = self.config
        result = LanguageResult(language=language)
        language_name = lc.get_language_name(language) or language

        try:
            result.state = PipelineState.COMPUTE_WORK_SET
            self._report(language, "checking")
            targets = load_language(
                config.input_dir, language, self.structure,
                self.file_type, config.with_arrays, config.exclude, config.recursive,
            )
            targets_by_name = {target.name: target for target in targets}
            if self.structure == DirectoryStructure.NGX_TRANSLATE and targets:
                # One file per language: the names differ but the catalogs correspond
                targets_by_name = {sources[0].name: targets[0]}

            plans = [self._plan_file(language, source, targets_by_name.get(source.name)) for source in sources]
            total_units = sum(len(plan.units) for plan in plans)
            logger.info(f"{language_name} ({language}): {total_units} string(s) to translate")

            result.state = PipelineState.TRANSLATE
            for plan in plans:
                if not plan.units:
                    continue
                self._report(language, "translating", plan.source.name)
                translated = translate_in_batches(
                    self.service, plan.units, config.source_language, language,
                    batch_size=config.batch_size,
                    max_retries=config.max_retries,
                    retry_delay=config.retry_delay,
                    sleep=self.sleep,
                    progress_callback=self.progress_callback,
                    file_name=plan.source.name,
                )
                plan.translations = {entry.key: entry.translated for entry in translated}

            result.state = PipelineState.MERGE
            for plan in plans:
                self._merge(plan)
            result.files = [plan.result for plan in plans]

            result.state = PipelineState.PERSIST
            if config.dry_run:
                logger.info(f"{language_name} ({language}): dry run, nothing written")
            else:
                self._report(language, "saving")
                self._persist(language, plans, targets, result)

            result.state = PipelineState.DONE
            self._report(language, "completed")
            logger.info(f"{language_name} ({language}): {result.added} added, {result.removed} removed")

        except TranslationError as e:
            result.fail(e)
            logger.error(f"{language_name} ({language}) failed during {result.failed_at.value}: {e}")

        return result

    def _build_result(self, summary: RunSummary) -> RunSummary:
        """Finish the summary and log it."""
        summary.elapsed_time = time.time() - self.start_time if self.start_time else 0

        logger.info(
            "Translation %s in %.1f seconds (languages=%d, failed=%d, skipped=%d, added=%d, removed=%d)",
            "completed" if summary.success else "finished with errors",
            summary.elapsed_time,
            len(summary.languages),
            len(summary.failed_languages),
            len(summary.skipped_languages),
            summary.total_added,
            summary.total_removed,
        )

        return summary
