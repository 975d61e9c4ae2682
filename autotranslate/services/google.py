"""
Google Cloud Translation (v2 REST API).

Texts are sent in html mode so that markers carrying translate="no" are
left untranslated.
"""

import re
from typing import List, Optional, Set

import httpx

from autotranslate.exceptions import InitError, ProviderError
from autotranslate.language_codes import extract_base_language, normalize_code
from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions
from autotranslate.services.http import HTTPTranslationService, get_api_key

logger = get_logger(__name__)

API_URL = "https://translation.googleapis.com/language/translate/v2"

# Google only distinguishes regional variants for Chinese
CODE_MAP = {
    'zh-tw': 'zh-TW',
    'zh-cn': 'zh-CN',
}

# Google sometimes pads the content of returned tags with whitespace
RESPONSE_TAG_PATTERN = re.compile(r'<(.+?)\s*>\s*(.+?)\s*</\s*(.+?)>')


def to_google_code(language: str) -> str:
    """
    Examples:
        >>> to_google_code('zh_TW')
        'zh-TW'
        >>> to_google_code('de-AT')
        'de'
    """
    normalized = normalize_code(language)
    return CODE_MAP.get(normalized, extract_base_language(normalized))


def clean_response(text: str) -> str:
    """
    Example:
        >>> clean_response('Hallo <span translate="no"> 0 </span>!')
        'Hallo <span translate="no">0</span>!'
    """
    return RESPONSE_TAG_PATTERN.sub(r'<\1>\2</\3>', text)


class GoogleTranslateService(HTTPTranslationService):
    name = 'google-translate'

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)
        self.api_key = ''
        self.languages: Set[str] = set()

    def initialize(self, options: ServiceOptions):
        self.options = options
        self.api_key = get_api_key(options.config, 'GOOGLE_TRANSLATE_API_KEY', 'Google Translate')

        result = self._init_request('GET', f"{API_URL}/languages", params={'key': self.api_key})
        try:
            self.languages = {entry['language'].lower() for entry in result['data']['languages']}
        except (AttributeError, KeyError, TypeError):
            raise InitError(f"Unexpected Google Translate languages response: {str(result)[:200]}")
        logger.debug(f"Google Translate supports {len(self.languages)} languages")

    def supports_language(self, language: str) -> bool:
        return to_google_code(language).lower() in self.languages

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        body = {
            'q': texts,
            'source': to_google_code(source_language),
            'target': to_google_code(target_language),
            'format': 'html',
        }
        result = self._request('POST', API_URL, params={'key': self.api_key}, json=body)

        try:
            return [clean_response(entry['translatedText']) for entry in result['data']['translations']]
        except (AttributeError, KeyError, TypeError):
            raise ProviderError(f"Unexpected Google Translate response format: {str(result)[:200]}")
