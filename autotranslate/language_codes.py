"""
Language code helpers.

Standards:
- ISO 639-1: 2-letter language codes (en, zh, es)
- BCP 47: Language + Region codes (en-US, zh-CN, pt-BR)

Language directories and ngx-translate files are named after the code as it
appears on disk ('de', 'zh-CN', 'pt_BR'); services compare codes
case-insensitively.
"""

from typing import Optional

# Names used in prompts and log output
LANGUAGE_NAMES = {
    'ar': 'Arabic',
    'bg': 'Bulgarian',
    'bn': 'Bengali',
    'ca': 'Catalan',
    'cs': 'Czech',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'et': 'Estonian',
    'fa': 'Persian',
    'fi': 'Finnish',
    'fr': 'French',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'id': 'Indonesian',
    'it': 'Italian',
    'ja': 'Japanese',
    'ko': 'Korean',
    'lt': 'Lithuanian',
    'lv': 'Latvian',
    'ms': 'Malay',
    'nb': 'Norwegian Bokmål',
    'nl': 'Dutch',
    'no': 'Norwegian',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'ro': 'Romanian',
    'ru': 'Russian',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'sr': 'Serbian',
    'sv': 'Swedish',
    'th': 'Thai',
    'tr': 'Turkish',
    'uk': 'Ukrainian',
    'vi': 'Vietnamese',
    'zh': 'Chinese',
    'zh-cn': 'Chinese (Simplified)',
    'zh-tw': 'Chinese (Traditional)',
    'pt-br': 'Portuguese (Brazil)',
    'pt-pt': 'Portuguese (Portugal)',
    'en-us': 'English (United States)',
    'en-gb': 'English (United Kingdom)',
}


def normalize_code(code: str) -> str:
    """
    Normalize a language code for comparisons.

    Examples:
        >>> normalize_code('pt_BR')
        'pt-br'
        >>> normalize_code(' DE ')
        'de'
    """
    return code.strip().replace('_', '-').lower()


def extract_base_language(code: str) -> str:
    """
    Extract base language from code (remove region).

    Examples:
        >>> extract_base_language('zh-CN')
        'zh'
        >>> extract_base_language('pt_BR')
        'pt'
    """
    return normalize_code(code).split('-')[0]


def get_language_name(code: str) -> Optional[str]:
    """
    Get the full language name from code, falling back to the base language.

    Examples:
        >>> get_language_name('zh-TW')
        'Chinese (Traditional)'
        >>> get_language_name('de-AT')
        'German'
    """
    normalized = normalize_code(code)
    return LANGUAGE_NAMES.get(normalized) or LANGUAGE_NAMES.get(extract_base_language(normalized))


def languages_match(code1: str, code2: str, strict: bool = True) -> bool:
    """
    Check if two language codes match.

    Args:
        code1: First language code
        code2: Second language code
        strict: If True, the full codes must match. If False, base language match is ok.

    Examples:
        >>> languages_match('en', 'EN')
        True
        >>> languages_match('en', 'en-US')
        False
        >>> languages_match('en', 'en-US', strict=False)
        True
    """
    if strict:
        return normalize_code(code1) == normalize_code(code2)

    return extract_base_language(code1) == extract_base_language(code2)


def get_language_file_name(language_code: str) -> str:
    """
    Get the ngx-translate filename for a language.

    Examples:
        >>> get_language_file_name('zh-CN')
        'zh-CN.json'
    """
    return f"{language_code}.json"
