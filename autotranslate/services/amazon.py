"""
Amazon Translate through boto3.

The service config is an optional path to a JSON file with the client
configuration. Both boto3 keyword names ("region_name",
"aws_access_key_id", ...) and the AWS SDK layout ("region",
"credentials": {"accessKeyId", "secretAccessKey", "sessionToken"},
"endpoint") are accepted. Without a file, boto3 resolves credentials and
region from the environment as usual.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from autotranslate.exceptions import InitError, ProviderError
from autotranslate.language_codes import normalize_code
from autotranslate.logger import get_logger
from autotranslate.services.base import ServiceOptions, TranslationService

logger = get_logger(__name__)

# Lowercase code -> code expected by Amazon Translate
SUPPORTED_LANGUAGES = {
    'af': 'af', 'sq': 'sq', 'am': 'am', 'ar': 'ar', 'hy': 'hy', 'az': 'az',
    'bn': 'bn', 'bs': 'bs', 'bg': 'bg', 'ca': 'ca', 'zh': 'zh', 'zh-tw': 'zh-TW',
    'hr': 'hr', 'cs': 'cs', 'da': 'da', 'fa-af': 'fa-AF', 'nl': 'nl', 'en': 'en',
    'et': 'et', 'fa': 'fa', 'tl': 'tl', 'fi': 'fi', 'fr': 'fr', 'fr-ca': 'fr-CA',
    'ka': 'ka', 'de': 'de', 'el': 'el', 'gu': 'gu', 'ht': 'ht', 'ha': 'ha',
    'he': 'he', 'hi': 'hi', 'hu': 'hu', 'is': 'is', 'id': 'id', 'ga': 'ga',
    'it': 'it', 'ja': 'ja', 'kn': 'kn', 'kk': 'kk', 'ko': 'ko', 'lv': 'lv',
    'lt': 'lt', 'mk': 'mk', 'ms': 'ms', 'ml': 'ml', 'mt': 'mt', 'mr': 'mr',
    'mn': 'mn', 'no': 'no', 'ps': 'ps', 'pl': 'pl', 'pt': 'pt', 'pt-pt': 'pt-PT',
    'pa': 'pa', 'ro': 'ro', 'ru': 'ru', 'sr': 'sr', 'si': 'si', 'sk': 'sk',
    'sl': 'sl', 'so': 'so', 'es': 'es', 'es-mx': 'es-MX', 'sw': 'sw', 'sv': 'sv',
    'ta': 'ta', 'te': 'te', 'th': 'th', 'tr': 'tr', 'uk': 'uk', 'ur': 'ur',
    'uz': 'uz', 'vi': 'vi', 'cy': 'cy',
}

CLIENT_ARGUMENTS = (
    'region_name', 'endpoint_url', 'aws_access_key_id', 'aws_secret_access_key', 'aws_session_token',
    'use_ssl', 'verify', 'api_version',
)

# AWS SDK names -> boto3 keyword names
SDK_NAMES = {
    'region': 'region_name',
    'endpoint': 'endpoint_url',
    'accessKeyId': 'aws_access_key_id',
    'secretAccessKey': 'aws_secret_access_key',
    'sessionToken': 'aws_session_token',
}

THROTTLING_CODES = ('ThrottlingException', 'TooManyRequestsException', 'LimitExceededException')


def load_client_config(path: Path) -> Dict[str, Any]:
    """
    Read a client configuration file into boto3.client keyword arguments.

    Raises:
        InitError: If the file is missing or not a JSON object
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InitError(f"Could not read Amazon Translate config {path}: {e}")

    if not isinstance(config, dict):
        raise InitError(f"Amazon Translate config {path} must contain a JSON object")

    credentials = config.pop('credentials', None) or {}
    if not isinstance(credentials, dict):
        raise InitError(f"'credentials' in {path} must be a JSON object")
    config.update(credentials)

    kwargs = {}
    for key, value in config.items():
        name = SDK_NAMES.get(key, key)
        if name in CLIENT_ARGUMENTS:
            kwargs[name] = value
        else:
            logger.warning(f"Ignoring unknown Amazon Translate option '{key}'")
    return kwargs


def handle_client_error(e: ClientError) -> ProviderError:
    """Convert a botocore ClientError; throttling becomes a rate-limit error (429)."""
    error = e.response.get('Error', {})
    code = error.get('Code', '')
    message = error.get('Message') or code
    status = e.response.get('ResponseMetadata', {}).get('HTTPStatusCode')

    if code in THROTTLING_CODES:
        logger.warning(f"Amazon Translate rate limit exceeded: {message}")
        status = 429
    else:
        logger.error(f"Amazon Translate API error: {code} {message}")

    return ProviderError(f"Amazon Translate API error ({code})", status=status, body=message)


class AmazonTranslateService(TranslationService):
    name = 'amazon-translate'

    def __init__(self, client=None):
        super().__init__()
        self.client = client

    def initialize(self, options: ServiceOptions):
        self.options = options
        if self.client is not None:
            return

        kwargs = load_client_config(Path(options.config)) if options.config else {}
        try:
            self.client = boto3.client('translate', **kwargs)
        except BotoCoreError as e:
            raise InitError(f"Could not initialize Amazon Translate: {e}", details={"service": self.name})

    def supports_language(self, language: str) -> bool:
        return normalize_code(language) in SUPPORTED_LANGUAGES

    def _code(self, language: str) -> str:
        return SUPPORTED_LANGUAGES.get(normalize_code(language), language)

    def _translate_one(self, text: str, source_code: str, target_code: str) -> str:
        try:
            response = self.client.translate_text(
                Text=text,
                SourceLanguageCode=source_code,
                TargetLanguageCode=target_code,
            )
        except ClientError as e:
            raise handle_client_error(e)
        except BotoCoreError as e:
            raise ProviderError(f"Amazon Translate API call failed: {e}")

        return response['TranslatedText']

    def _translate_texts(self, texts: List[str], source_language: str, target_language: str, keys: List[str]) -> List[str]:
        # translate_text takes one text per call
        source_code = self._code(source_language)
        target_code = self._code(target_language)
        return [self._translate_one(text, source_code, target_code) for text in texts]
