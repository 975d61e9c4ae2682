"""
OpenAI chat completions as a translation service.

Each batch is sent as a JSON array with the array translation prompt; the
model must answer with an array of the same length. An optional context
file (a JSON object of key -> description) adds per-key hints to the prompt.
"""

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from autotranslate import language_codes as lc
from autotranslate.config import DEFAULT_SYSTEM_MESSAGE, get_prompt
from autotranslate.exceptions import InitError, ProviderError
from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions
from autotranslate.services.http import HTTPTranslationService, get_api_key
from autotranslate.translation.utils import parse_translations_response

logger = get_logger(__name__)

API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"


def load_context_file(path: Path) -> Dict[str, str]:
    """
    Raises:
        InitError: If the file is missing or not a JSON object
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            context = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InitError(f"Could not read context file {path}: {e}")

    if not isinstance(context, dict):
        raise InitError(f"Context file {path} must contain a JSON object")

    return {str(key): str(value) for key, value in context.items()}


class OpenAIService(HTTPTranslationService):
    name = 'openai'

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)
        self.api_key = ''
        self.model = DEFAULT_MODEL
        self.api_url = API_URL
        self.context: Dict[str, str] = {}
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0
        self._usage_lock = threading.Lock()

    def initialize(self, options: ServiceOptions):
        self.options = options
        self.api_key = get_api_key(options.config, 'OPENAI_API_KEY', 'OpenAI')
        self.model = options.extra.get('model', DEFAULT_MODEL)
        self.api_url = options.extra.get('api_url', API_URL)

        if options.context_file is not None:
            self.context = load_context_file(options.context_file)
            logger.debug(f"Loaded context for {len(self.context)} keys")

    def accumulate_tokens(self, usage: Dict[str, int]):
        # Languages may share the service across threads
        with self._usage_lock:
            self.total_prompt_tokens += usage.get('prompt_tokens') or 0
            self.total_completion_tokens += usage.get('completion_tokens') or 0

    def get_total_token_usage(self) -> Dict[str, int]:
        with self._usage_lock:
            return {
                'prompt_tokens': self.total_prompt_tokens,
                'completion_tokens': self.total_completion_tokens,
            }

    def finish(self):
        usage = self.get_total_token_usage()
        logger.info(
            f"OpenAI token usage: {usage['prompt_tokens']} prompt, {usage['completion_tokens']} completion"
        )

    def _build_array_prompt(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> str:
        """Build the array translation prompt for one batch."""
        hints = [f"- {key}: {self.context[key]}" for key in keys if key in self.context]
        context_section = ("\nContext for some of the strings (key: description):\n" + "\n".join(hints)) if hints else ""

        return get_prompt('array_translation_prompt')['prompt'].format(
            source_language_name=lc.get_language_name(source_language) or source_language,
            source_language_code=source_language,
            target_language_name=lc.get_language_name(target_language) or target_language,
            target_language_code=target_language,
            context_section=context_section,
            text_count=len(texts),
            texts_json=json.dumps(texts, ensure_ascii=False),
        )

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        prompt = self._build_array_prompt(texts, source_language, target_language, keys)
        logger.debug(f"  Input to AI (prompt):\n{prompt}")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.options.extra.get('system_message', DEFAULT_SYSTEM_MESSAGE)},
                {"role": "user", "content": prompt},
            ],
        }

        logger.debug(f"  Calling OpenAI API (model: {self.model})...")
        result = self._request('POST', self.api_url, headers=headers, json=body)

        try:
            usage = result.get('usage') or {}
            content = result['choices'][0]['message'].get('content') or ''
        except (AttributeError, KeyError, IndexError, TypeError):
            raise ProviderError(f"Unexpected OpenAI response format: {str(result)[:200]}")

        self.accumulate_tokens(usage if isinstance(usage, dict) else {})
        logger.debug(f"  Output from AI (response):\n{content}")

        if not isinstance(content, str) or not content.strip():
            raise ProviderError("No content in OpenAI response", body=str(content)[:500])

        translations = parse_translations_response(content)
        if translations is None:
            raise ProviderError("Could not parse translations from OpenAI response", body=content[:500])

        return translations
