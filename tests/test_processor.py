"""Tests for batch translation and rate-limit retries."""
import pytest

from autotranslate.config import MAX_RETRY_DELAY
from autotranslate.exceptions import ProviderError
from autotranslate.services.base import TranslationResult, TranslationUnit
from autotranslate.translation import chunk_units, get_retry_delay, translate_in_batches
from tests.conftest import FakeService


def units(count):
    return [TranslationUnit(f"key{i}", f"Text {i}") for i in range(count)]


def rate_limited(retry_after=None):
    return ProviderError("slow down", status=429, body="Too Many Requests", retry_after=retry_after)


class TestChunking:
    def test_batch_sizes(self):
        assert [len(batch) for batch in chunk_units(units(5), 2)] == [2, 2, 1]

    def test_empty(self):
        assert chunk_units([], 50) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunk_units(units(1), 0)


class TestBatches:
    def test_batches_in_order(self):
        service = FakeService()
        results = translate_in_batches(service, units(5), 'en', 'de', batch_size=2)
        assert [len(texts) for _, texts in service.calls] == [2, 2, 1]
        assert [r.key for r in results] == [f"key{i}" for i in range(5)]
        assert results[4].translated == "[de] Text 4"

    def test_rate_limit_retried_with_backoff(self):
        service = FakeService(failures=[rate_limited(), rate_limited()])
        sleeps = []
        results = translate_in_batches(service, units(1), 'en', 'de', retry_delay=1.0, sleep=sleeps.append)
        assert sleeps == [1.0, 2.0]
        assert results[0].translated == "[de] Text 0"
        assert len(service.calls) == 3

    def test_retry_after_honoured(self):
        service = FakeService(failures=[rate_limited(retry_after=7)])
        sleeps = []
        translate_in_batches(service, units(1), 'en', 'de', sleep=sleeps.append)
        assert sleeps == [7]

    def test_retries_exhausted(self):
        service = FakeService(failures=[rate_limited() for _ in range(3)])
        sleeps = []
        with pytest.raises(ProviderError) as exc_info:
            translate_in_batches(service, units(1), 'en', 'de', max_retries=2, sleep=sleeps.append)
        assert exc_info.value.is_rate_limited
        assert len(sleeps) == 2

    def test_other_errors_not_retried(self):
        service = FakeService(failures=[ProviderError("server error", status=500)])
        sleeps = []
        with pytest.raises(ProviderError):
            translate_in_batches(service, units(3), 'en', 'de', sleep=sleeps.append)
        assert sleeps == []
        assert len(service.calls) == 1

    def test_failed_batch_stops_remaining(self):
        service = FakeService(fail_languages={'de': ProviderError("bad request", status=400)})
        with pytest.raises(ProviderError):
            translate_in_batches(service, units(4), 'en', 'de', batch_size=2)
        assert len(service.calls) == 1

    def test_mismatched_results(self):
        class ShuffledService(FakeService):
            def translate_strings(self, batch, source_language, target_language):
                return [TranslationResult(u.key, u.value, u.value) for u in reversed(batch)]

        with pytest.raises(ProviderError):
            translate_in_batches(ShuffledService(), units(2), 'en', 'de')

    def test_wrong_count_from_provider(self):
        class ShortService(FakeService):
            def _translate_texts(self, texts, source_language, target_language, keys):
                return texts[:-1]

        with pytest.raises(ProviderError):
            translate_in_batches(ShortService(), units(2), 'en', 'de')

    def test_progress_phases(self):
        service = FakeService(failures=[rate_limited()])
        progress = []
        translate_in_batches(service, units(3), 'en', 'de', batch_size=2, sleep=lambda s: None,
                             progress_callback=progress.append, file_name='common.json')
        assert [(p.phase, p.current_batch, p.total_batches) for p in progress] == [
            ('translating', 1, 2), ('retrying', 1, 2), ('translating', 2, 2)
        ]
        assert progress[1].retry_attempt == 1
        assert progress[0].current_file == 'common.json'


class TestRetryDelay:
    def test_exponential(self):
        error = rate_limited()
        assert [get_retry_delay(error, attempt, 1.0) for attempt in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped(self):
        assert get_retry_delay(rate_limited(), 10, 1.0) == MAX_RETRY_DELAY
