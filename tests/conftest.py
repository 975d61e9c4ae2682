"""Shared fixtures for autotranslate tests."""
import json
from pathlib import Path

import pytest

from autotranslate.config import TranslateConfig
from autotranslate.logger import set_log_mode
from autotranslate.services.base import TranslationService


class FakeService(TranslationService):
    """Prefixes every text with the target language; records each call."""

    name = 'fake'

    def __init__(self, unsupported=(), failures=None, fail_languages=None):
        super().__init__()
        self.unsupported = set(unsupported)
        self.failures = list(failures or [])          # Raised one per call before succeeding
        self.fail_languages = dict(fail_languages or {})
        self.calls = []
        self.initialized = False
        self.finished = False

    def initialize(self, options):
        self.options = options
        self.initialized = True

    def supports_language(self, language):
        return language not in self.unsupported

    def finish(self):
        self.finished = True

    def _translate_texts(self, texts, source_language, target_language, keys):
        self.calls.append((target_language, list(texts)))
        if target_language in self.fail_languages:
            raise self.fail_languages[target_language]
        if self.failures:
            raise self.failures.pop(0)
        return [f"[{target_language}] {text}" for text in texts]


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')
    return path


def read_json(path: Path):
    return json.loads(path.read_text(encoding='utf-8'))


@pytest.fixture(autouse=True)
def reset_log_mode():
    yield
    set_log_mode('info')


@pytest.fixture
def locales(tmp_path):
    """Default structure: en source, an empty de and a partially translated fr."""
    root = tmp_path / 'locales'
    write_json(root / 'en' / 'common.json', {
        "greeting": "Hello {name}",
        "nested": {"title": "Title"},
        "count": 3,
    })
    (root / 'de').mkdir()
    write_json(root / 'fr' / 'common.json', {
        "greeting": "Bonjour {name}",
        "old": "x",
    })
    return root


@pytest.fixture
def make_config(tmp_path):
    def factory(input_dir, **kwargs):
        kwargs.setdefault('cache_dir', tmp_path / 'cache')
        kwargs.setdefault('service', 'fake')
        return TranslateConfig(input_dir=input_dir, **kwargs)
    return factory
