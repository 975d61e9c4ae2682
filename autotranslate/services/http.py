"""
Shared HTTP plumbing for REST translation providers.

httpx errors are converted here so the rest of the pipeline only sees
ProviderError (and InitError while a service initializes).
"""

import os
from contextlib import nullcontext
from email.utils import parsedate_to_datetime
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from autotranslate.exceptions import InitError, ProviderError
from autotranslate.logger import get_logger
from autotranslate.services.base import TranslationService

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 120


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 60.0),
            read=timeout_config.get('read', 120.0),
            pool=timeout_config.get('pool', 10.0),
        )

    timeout_value = float(timeout_config) if timeout_config else float(DEFAULT_TIMEOUT)
    return httpx.Timeout(connect=10.0, write=60.0, read=timeout_value, pool=10.0)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Seconds to wait according to a Retry-After header (delta seconds or HTTP date).

    Examples:
        >>> parse_retry_after("3")
        3.0
        >>> parse_retry_after(None) is None
        True
    """
    if not value:
        return None

    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(0.0, (retry_at - datetime.now(timezone.utc)).total_seconds())


def _error_text(response: httpx.Response) -> str:
    """Pull the most useful message out of an error response."""
    try:
        error_json = response.json()
    except ValueError:
        return response.text[:500]

    if isinstance(error_json, dict):
        detail = error_json.get("error", error_json.get("message"))
        if isinstance(detail, dict):
            return str(detail.get("message", detail))
        if detail is not None:
            return str(detail)

    return response.text[:500]


def handle_http_error(e: httpx.HTTPStatusError, provider: str) -> ProviderError:
    """Turn an HTTP status error into a ProviderError carrying status, body and Retry-After."""
    response = e.response
    return ProviderError(
        f"{provider} API error",
        status=response.status_code,
        body=_error_text(response),
        retry_after=parse_retry_after(response.headers.get("Retry-After")),
    )


def get_api_key(config: Optional[str], env_var: str, provider: str) -> str:
    """
    Use the configured key, else the environment.

    Raises:
        InitError: If neither provides a key
    """
    api_key = (config or os.environ.get(env_var, '')).strip()
    if not api_key or api_key == "YOUR_API_KEY_HERE":
        raise InitError(
            f"{provider} API key not configured. Pass it with --config or set {env_var}",
            details={"service": provider},
        )
    return api_key


class HTTPTranslationService(TranslationService):
    """
    Base class of providers called over REST.

    A client can be injected (tests use httpx.MockTransport); otherwise a
    short-lived client is opened per request.
    """

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__()
        self.client = client

    @property
    def timeout(self) -> httpx.Timeout:
        return get_httpx_timeout(self.options.extra.get('timeout', DEFAULT_TIMEOUT))

    def _client(self):
        if self.client is not None:
            return nullcontext(self.client)
        return httpx.Client(timeout=self.timeout)

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ProviderError: On HTTP errors, timeouts, transport failures and non-JSON bodies
        """
        try:
            with self._client() as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            raise handle_http_error(e, self.name)
        except httpx.TimeoutException:
            raise ProviderError(f"{self.name} API request timeout")
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} API call failed: {e}")
        except ValueError as e:
            raise ProviderError(f"{self.name} returned an invalid JSON response: {e}")

    def _init_request(self, method: str, url: str, **kwargs) -> Any:
        """Like _request, for calls made while initializing: failures raise InitError."""
        try:
            return self._request(method, url, **kwargs)
        except ProviderError as e:
            raise InitError(f"Could not initialize {self.name}: {e}", details={"service": self.name})
