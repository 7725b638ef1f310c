# =============================================================================
# core/fmp_client.py  —  Financial Modeling Prep HTTP client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One method that matters: fetch(path, query) → decoded JSON.  Everything
#   else in core/ works on the JSON this returns.
#
# FAILURE CONTRACT:
#   Any failure (non-2xx, network error, unreadable body) becomes a single
#   ProviderError(status, message).  When FMP explains itself with an
#   {"Error Message": "..."} body, that text is the message.
#
#   The client NEVER retries.  The tool layer reports the failure to the
#   model as text and lets it decide what to do next.
#
# CONFIGURATION:
#   The API key arrives through the constructor (see core/config.py).  It is
#   appended to every URL and never logged.
# =============================================================================

import asyncio
import http.client
import json
import logging
from typing import Any, Mapping, Optional
import urllib.error
import urllib.parse
import urllib.request

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://financialmodelingprep.com/api/v3"
ERROR_MESSAGE_KEY = "Error Message"


class ProviderError(Exception):
    """An FMP request failed.  `status` is None for network-level failures."""

    def __init__(self, status: Optional[int], message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return self.message


def _provider_message(body: Any) -> Optional[str]:
    if isinstance(body, dict) and body.get(ERROR_MESSAGE_KEY):
        return str(body[ERROR_MESSAGE_KEY])
    return None


class FMPClient:
    """Thin, stateless wrapper around the FMP REST API."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout: float = 15.0):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def build_url(self, path: str, query: Optional[Mapping[str, Any]] = None) -> str:
        """Join base URL, path and query; None-valued params are dropped."""
        if not path.startswith("/"):
            path = "/" + path
        params = {k: v for k, v in (query or {}).items() if v is not None}
        params["apikey"] = self._api_key
        return f"{self.base_url}{path}?{urllib.parse.urlencode(params)}"

    def fetch(self, path: str, query: Optional[Mapping[str, Any]] = None) -> Any:
        """GET `path` and return the decoded JSON body.

        Raises:
            ProviderError: on HTTP errors, network errors, invalid JSON, or a
                200 response that carries FMP's "Error Message" body.
        """
        url = self.build_url(path, query)
        logger.debug("GET %s params=%s", path, sorted((query or {}).keys()))

        try:
            req = urllib.request.Request(url, headers={"Accept": "application/json"})
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                status = response.status
                payload = response.read()
        except urllib.error.HTTPError as e:
            raise ProviderError(e.code, self._http_error_message(e)) from e
        except urllib.error.URLError as e:
            raise ProviderError(None, f"Request to FMP failed: {e.reason}") from e
        except TimeoutError as e:
            raise ProviderError(None, f"Request to FMP timed out after {self.timeout}s") from e
        except (OSError, http.client.HTTPException) as e:
            # Dropped connections and short reads surface here, not as URLError.
            raise ProviderError(None, f"Request to FMP failed: {e!r}") from e

        try:
            raw = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProviderError(status, f"Invalid response returned by FMP for {path}") from e

        try:
            body = json.loads(raw) if raw.strip() else None
        except json.JSONDecodeError as e:
            raise ProviderError(status, f"Invalid JSON returned by FMP for {path}") from e

        message = _provider_message(body)
        if message is not None:
            raise ProviderError(status, message)
        return body

    async def afetch(self, path: str, query: Optional[Mapping[str, Any]] = None) -> Any:
        """fetch() on a worker thread so concurrent tool calls don't block."""
        return await asyncio.to_thread(self.fetch, path, query)

    @staticmethod
    def _http_error_message(error: urllib.error.HTTPError) -> str:
        try:
            body = json.loads(error.read().decode("utf-8"))
        except (ValueError, OSError):
            body = None
        return _provider_message(body) or f"HTTP {error.code}: {error.reason}"
