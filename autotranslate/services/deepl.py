"""
DeepL API (Pro and Free plans).

Markers are protected with tag_handling=xml and ignore_tags=span.
The service config is "api_key" or "api_key,formality"; formality and
glossary_id can also be given as service options.
"""

from typing import List, Optional, Set

import httpx

from autotranslate.exceptions import InitError, ProviderError
from autotranslate.language_codes import extract_base_language
from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions
from autotranslate.services.http import HTTPTranslationService, get_api_key

logger = get_logger(__name__)

API_URL = "https://api.deepl.com/v2"
FREE_API_URL = "https://api-free.deepl.com/v2"

FORMALITY_LEVELS = ('default', 'more', 'less', 'prefer_more', 'prefer_less')


def to_deepl_code(language: str) -> str:
    """
    Examples:
        >>> to_deepl_code('pt-br')
        'PT-BR'
    """
    return language.replace('_', '-').upper()


class DeepLService(HTTPTranslationService):
    name = 'deepl'
    api_url = API_URL

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)
        self.api_key = ''
        self.formality: Optional[str] = None
        self.glossary_id: Optional[str] = None
        self.source_languages: Set[str] = set()
        self.target_languages: Set[str] = set()

    @property
    def headers(self):
        return {'Authorization': f"DeepL-Auth-Key {self.api_key}"}

    def initialize(self, options: ServiceOptions):
        self.options = options

        api_key, _, formality = (options.config or '').partition(',')
        self.api_key = get_api_key(api_key, 'DEEPL_API_KEY', 'DeepL')
        self.formality = formality.strip() or options.extra.get('formality') or None
        self.glossary_id = options.extra.get('glossary_id') or None

        if self.formality and self.formality not in FORMALITY_LEVELS:
            logger.warning(f"Unknown DeepL formality '{self.formality}', sending it anyway")

        self.source_languages = self._fetch_languages('source')
        self.target_languages = self._fetch_languages('target')

    def _fetch_languages(self, kind: str) -> Set[str]:
        result = self._init_request('GET', f"{self.api_url}/languages", params={'type': kind}, headers=self.headers)
        try:
            return {entry['language'].upper() for entry in result}
        except (AttributeError, KeyError, TypeError):
            raise InitError(f"Unexpected DeepL languages response: {str(result)[:200]}")

    def supports_language(self, language: str) -> bool:
        code = to_deepl_code(language)
        supported = self.source_languages | self.target_languages
        return code in supported or extract_base_language(code).upper() in supported

    def _target_code(self, language: str) -> str:
        code = to_deepl_code(language)
        if code in self.target_languages:
            return code
        return extract_base_language(code).upper()

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        data = {
            'text': texts,
            'source_lang': extract_base_language(source_language).upper(),
            'target_lang': self._target_code(target_language),
            'tag_handling': 'xml',
            'ignore_tags': 'span',
        }
        if self.formality:
            data['formality'] = self.formality
        if self.glossary_id:
            data['glossary_id'] = self.glossary_id

        result = self._request('POST', f"{self.api_url}/translate", data=data, headers=self.headers)

        try:
            return [entry['text'] for entry in result['translations']]
        except (KeyError, TypeError):
            raise ProviderError(f"Unexpected DeepL response format: {str(result)[:200]}")


class DeepLFreeService(DeepLService):
    name = 'deepl-free'
    api_url = FREE_API_URL
