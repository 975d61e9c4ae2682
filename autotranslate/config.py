import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from autotranslate.exceptions import InitError
from autotranslate.logger import get_logger

logger = get_logger(__name__)

# Translation configuration constants
DEFAULT_BATCH_SIZE = 50  # Maximum strings per service call
DEFAULT_MAX_RETRIES = 5  # Retries of a rate-limited batch
DEFAULT_RETRY_DELAY = 1.0  # Seconds, doubled on every retry
MAX_RETRY_DELAY = 60.0
DEFAULT_SYSTEM_MESSAGE = "You are a professional translator. Return only valid JSON."

DEFAULT_CACHE_DIR = ".autotranslate-cache"
DEFAULT_SOURCE_LANGUAGE = "en"
DEFAULT_SERVICE = "google-translate"
DEFAULT_MATCHER = "icu"

FILE_TYPES = ["key-based", "natural", "auto"]
DIRECTORY_STRUCTURES = ["default", "ngx-translate"]

# Default prompts
DEFAULT_PROMPTS = {
    "array_translation_prompt": {
        "version": "1.0",
        "description": "Array translation prompt for the OpenAI service",
        "prompt": """You are a professional translator specializing in i18n locale content translation.

Translate each string from {source_language_name} ({source_language_code}) to {target_language_name} ({target_language_code}). Return ONLY a JSON array with the translated strings in the same order.
{context_section}

CRITICAL REQUIREMENTS:
- Preserve ALL placeholders EXACTLY as they appear, including:
  * Markers such as <span translate="no">0</span> (DO NOT translate or modify these, but move them where the grammar requires)
  * Original variable patterns: {{name}}, %s, %d, etc. (if any remain, keep them unchanged)
- Maintain the original tone and style
- Return exactly {text_count} translated strings

Array to translate:
{texts_json}

Return format: ["translated1", "translated2", ...]
Do not include explanations, markdown code blocks, or any text outside the JSON array. Return ONLY the JSON array."""
    }
}

# Defaults for the optional JSON configuration file. Keys mirror TranslateConfig.
DEFAULT_CONFIG = {
    "input_dir": ".",
    "cache_dir": DEFAULT_CACHE_DIR,
    "source_language": DEFAULT_SOURCE_LANGUAGE,
    "file_type": "auto",
    "directory_structure": "default",
    "with_arrays": False,
    "delete_unused_strings": False,
    "fix_inconsistencies": False,
    "service": DEFAULT_SERVICE,
    "matcher": DEFAULT_MATCHER,
    "decode_escapes": False,
    "batch_size": DEFAULT_BATCH_SIZE,
    "max_retries": DEFAULT_MAX_RETRIES,
    "concurrency": 1,
    "log_mode": "info",
}


@dataclass
class TranslateConfig:
    """Everything one translation run needs; passed explicitly to the manager and services."""
    input_dir: Path = Path(".")
    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    file_type: str = "auto"                       # key-based|natural|auto
    directory_structure: str = "default"          # default|ngx-translate
    with_arrays: bool = False
    delete_unused_strings: bool = False
    fix_inconsistencies: bool = False
    service: str = DEFAULT_SERVICE
    matcher: str = DEFAULT_MATCHER
    decode_escapes: bool = False
    service_config: Optional[str] = None          # Opaque string handed to the service (API key, key file...)
    service_options: Dict[str, str] = field(default_factory=dict)
    context_file: Optional[Path] = None
    exclude: Optional[str] = None                 # Glob of files to skip, relative to a language directory
    recursive: bool = False
    batch_size: int = DEFAULT_BATCH_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    concurrency: int = 1
    dry_run: bool = False

    def __post_init__(self):
        self.input_dir = Path(self.input_dir)
        self.cache_dir = Path(self.cache_dir)
        if self.context_file is not None:
            self.context_file = Path(self.context_file)

        if self.file_type not in FILE_TYPES:
            raise InitError(f"Unknown file type '{self.file_type}', expected one of: {', '.join(FILE_TYPES)}")
        if self.directory_structure not in DIRECTORY_STRUCTURES:
            raise InitError(
                f"Unknown directory structure '{self.directory_structure}', "
                f"expected one of: {', '.join(DIRECTORY_STRUCTURES)}"
            )
        if self.batch_size < 1:
            raise InitError("Batch size must be at least 1")
        if self.max_retries < 0:
            raise InitError("Max retries cannot be negative")
        if self.concurrency < 1:
            raise InitError("Concurrency must be at least 1")

        # The dry-run service never writes anything
        if self.service == "dry-run":
            self.dry_run = True

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> "TranslateConfig":
        """Build a config from a mapping, ignoring keys that are not config fields."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known - {"log_mode", "log_file"})
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known})


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration values, merging an optional JSON file over DEFAULT_CONFIG.

    Args:
        config_file: Path to a JSON object with configuration keys

    Returns:
        Merged configuration dict

    Raises:
        InitError: If the file is missing or not a valid JSON object
    """
    config = DEFAULT_CONFIG.copy()
    if config_file is None:
        return config

    config_file = Path(config_file)
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            file_config = json.load(f)
    except FileNotFoundError:
        raise InitError(f"Config file not found: {config_file}")
    except json.JSONDecodeError as e:
        raise InitError(f"Failed to parse config file {config_file}: {e}")

    if not isinstance(file_config, dict):
        raise InitError(f"Config file {config_file} must contain a JSON object")

    config.update(file_config)
    logger.debug(f"Configuration loaded from {config_file}")
    return config


def get_prompt(prompt_name: str = "array_translation_prompt") -> Dict[str, Any]:
    """Get a specific prompt by name."""
    return DEFAULT_PROMPTS.get(prompt_name, DEFAULT_PROMPTS["array_translation_prompt"])
