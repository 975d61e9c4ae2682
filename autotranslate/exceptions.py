"""
Autotranslate Exceptions

Every error raised by the translation pipeline derives from TranslationError,
which carries an optional machine-readable code and details dict.
Kept in a separate module to avoid circular imports between the loader,
the services and the translation manager.
"""

from pathlib import Path
from typing import List, Optional, Union


class TranslationError(Exception):
    """Translation error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class LoadError(TranslationError):
    """A catalog file could not be read or is not a JSON object."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Could not load {Path(path).name}: {reason}", code="load_error",
                         details={"path": str(path)})
        self.path = Path(path)
        self.reason = reason


class InvalidKeysError(LoadError):
    """A key-based catalog contains keys that look like natural-language strings."""

    def __init__(self, path: Union[str, Path], keys: List[str]):
        super().__init__(path, f"{len(keys)} invalid key(s) for a key-based file: {', '.join(keys[:5])}")
        self.code = "invalid_keys"
        self.keys = keys


class InitError(TranslationError):
    """The run cannot start: bad configuration or a service that failed to initialize."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="init_error", details=details)


class UnsupportedLanguageError(TranslationError):
    """The translation service does not support a language."""

    def __init__(self, service_name: str, language: str):
        super().__init__(f"{service_name} doesn't support the language {language}",
                         code="unsupported_language",
                         details={"service": service_name, "language": language})
        self.language = language


class ProviderError(TranslationError):
    """A translation service call failed; status and body come from the HTTP response when there is one."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, code="provider_error", details={"status": status, "body": body})
        self.status = status
        self.body = body
        self.retry_after = retry_after

    @property
    def is_rate_limited(self) -> bool:
        return self.status == 429

    def __str__(self):
        message = super().__str__()
        if self.status is None:
            return message
        return f"{message} [{self.status}]: {self.body or 'Empty body'}"


class PersistError(TranslationError):
    """A translated catalog or cache snapshot could not be written."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Could not write {path}: {reason}", code="persist_error",
                         details={"path": str(path)})
        self.path = Path(path)
