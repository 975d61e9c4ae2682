"""
Translation Processing Module

Contains functions for processing translation batches:
- Splitting units into fixed-size batches
- Sequential batch translation with rate-limit retries
"""

import time
from typing import Callable, List, Optional

from autotranslate.config import DEFAULT_BATCH_SIZE, DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY, MAX_RETRY_DELAY
from autotranslate.exceptions import ProviderError
from autotranslate.logger import get_logger
from autotranslate.services.base import TranslationResult, TranslationService, TranslationUnit
from autotranslate.translation.progress import TranslationProgress

logger = get_logger(__name__)


def chunk_units(units: List[TranslationUnit], batch_size: int = DEFAULT_BATCH_SIZE) -> List[List[TranslationUnit]]:
    """
    Split units into batches of at most batch_size, keeping their order.

    Example:
        >>> [len(batch) for batch in chunk_units([TranslationUnit(str(i), 'x') for i in range(5)], 2)]
        [2, 2, 1]
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    return [units[i:i + batch_size] for i in range(0, len(units), batch_size)]


def get_retry_delay(error: ProviderError, attempt: int, retry_delay: float = DEFAULT_RETRY_DELAY) -> float:
    """
    Seconds to wait before retrying a rate-limited batch.

    The provider's Retry-After wins; otherwise the delay doubles on every
    attempt, up to MAX_RETRY_DELAY.
    """
    if error.retry_after is not None:
        return error.retry_after
    return min(retry_delay * (2 ** attempt), MAX_RETRY_DELAY)


def _check_results(batch: List[TranslationUnit], results: List[TranslationResult], service_name: str):
    """
    Raises:
        ProviderError: If results do not match the batch key for key
    """
    if len(results) != len(batch):
        raise ProviderError(f"{service_name} returned {len(results)} results for a batch of {len(batch)}")

    for unit, result in zip(batch, results):
        if unit.key != result.key:
            raise ProviderError(f"{service_name} returned a result for '{result.key}' where '{unit.key}' was expected")


def translate_batch(
    service: TranslationService,
    batch: List[TranslationUnit],
    source_language: str,
    target_language: str,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int], None]] = None,
) -> List[TranslationResult]:
    """
    Translate one batch, retrying it while the provider rate-limits.

    Raises:
        ProviderError: On any other provider error, once retries are
            exhausted, or when the results do not match the batch
    """
    attempt = 0
    while True:
        try:
            results = service.translate_strings(batch, source_language, target_language)
        except ProviderError as e:
            if not e.is_rate_limited or attempt >= max_retries:
                raise

            wait_time = get_retry_delay(e, attempt, retry_delay)
            attempt += 1
            logger.warning(f"  Rate limited by {service.name}. Waiting {wait_time:.1f}s before retry {attempt}/{max_retries}...")
            if on_retry:
                on_retry(attempt)
            sleep(wait_time)
            continue

        _check_results(batch, results, service.name)
        return results


def translate_in_batches(
    service: TranslationService,
    units: List[TranslationUnit],
    source_language: str,
    target_language: str,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    progress_callback: Optional[Callable[[TranslationProgress], None]] = None,
    file_name: str = "",
) -> List[TranslationResult]:
    """
    Translate units batch by batch, strictly in order.

    The first batch that fails stops the whole call; nothing is returned
    for the units translated so far.

    Args:
        service: Initialized translation service
        units: Units to translate
        source_language: Source language code
        target_language: Target language code
        batch_size: Maximum units per service call
        max_retries: Retries of a rate-limited batch
        retry_delay: Base delay of the exponential backoff, in seconds
        sleep: Function used to wait between retries
        progress_callback: Optional callback for progress updates
        file_name: Catalog name reported in progress updates

    Returns:
        One result per unit, in unit order

    Raises:
        ProviderError: If a batch fails
    """
    batches = chunk_units(units, batch_size)
    results: List[TranslationResult] = []

    def report(phase: str, batch_idx: int, batch: List[TranslationUnit], attempt: int = 0):
        if progress_callback:
            progress_callback(TranslationProgress(
                current_language=target_language,
                phase=phase,
                current_file=file_name,
                current_batch=batch_idx + 1,
                total_batches=len(batches),
                batch_keys_count=len(batch),
                retry_attempt=attempt,
            ))

    for batch_idx, batch in enumerate(batches):
        logger.debug(f"Batch {batch_idx + 1}/{len(batches)}: Starting translation of {len(batch)} strings")
        report("translating", batch_idx, batch)

        results.extend(translate_batch(
            service, batch, source_language, target_language,
            max_retries=max_retries,
            retry_delay=retry_delay,
            sleep=sleep,
            on_retry=lambda attempt: report("retrying", batch_idx, batch, attempt),
        ))
        logger.debug(f"Batch {batch_idx + 1}/{len(batches)}: Translation completed")

    return results
