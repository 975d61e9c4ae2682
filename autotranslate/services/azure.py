"""
Azure AI Translator (v3 REST API).

The service config is "api_key" or "api_key,region".
"""

import os
from typing import List, Optional, Set

import httpx

from autotranslate.exceptions import InitError, ProviderError
from autotranslate.language_codes import extract_base_language, normalize_code
from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions
from autotranslate.services.http import HTTPTranslationService, get_api_key

logger = get_logger(__name__)

API_URL = "https://api.cognitive.microsofttranslator.com"
API_VERSION = "3.0"


class AzureTranslatorService(HTTPTranslationService):
    name = 'azure'

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)
        self.api_key = ''
        self.region: Optional[str] = None
        self.languages: Set[str] = set()

    def initialize(self, options: ServiceOptions):
        self.options = options

        api_key, _, region = (options.config or '').partition(',')
        self.api_key = get_api_key(api_key, 'AZURE_TRANSLATOR_KEY', 'Azure')
        self.region = region.strip() or os.environ.get('AZURE_TRANSLATOR_REGION') or None

        result = self._init_request(
            'GET', f"{API_URL}/languages", params={'api-version': API_VERSION, 'scope': 'translation'}
        )
        try:
            self.languages = {code.lower() for code in result['translation']}
        except (AttributeError, KeyError, TypeError):
            raise InitError(f"Unexpected Azure languages response: {str(result)[:200]}")

    def _code(self, language: str) -> Optional[str]:
        """Azure code for a language: the full code when Azure knows it, else the base language."""
        normalized = normalize_code(language)
        if normalized in self.languages:
            return normalized
        base = extract_base_language(normalized)
        return base if base in self.languages else None

    def supports_language(self, language: str) -> bool:
        return self._code(language) is not None

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        headers = {'Ocp-Apim-Subscription-Key': self.api_key}
        if self.region:
            headers['Ocp-Apim-Subscription-Region'] = self.region

        params = {
            'api-version': API_VERSION,
            'from': self._code(source_language) or source_language,
            'to': self._code(target_language) or target_language,
            'textType': 'html',
        }
        result = self._request(
            'POST', f"{API_URL}/translate", params=params, headers=headers, json=[{'Text': text} for text in texts]
        )

        try:
            return [entry['translations'][0]['text'] for entry in result]
        except (KeyError, IndexError, TypeError):
            raise ProviderError(f"Unexpected Azure response format: {str(result)[:200]}")
