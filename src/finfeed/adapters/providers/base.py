# src/finfeed/adapters/providers/base.py
"""
Base Provider - Shared HTTP Access for Best-Effort Sources

This module defines the base class for the public data sources (central
bank, exchange market data, mining pool). It performs a single uncached
GET and turns every transport problem into RuntimeError, which the
concrete providers catch at their operation boundary and degrade to None
or an empty list.

Files that USE this module:
- finfeed.adapters.providers.cbr (CBRProvider extends HttpProvider)
- finfeed.adapters.providers.mexc (MexcMarketProvider extends HttpProvider)
- finfeed.adapters.providers.hashvault (HashVaultProvider extends HttpProvider)

Files that this module USES:
- finfeed.config (settings for the default timeout)
"""
import logging
from typing import Any, Dict, Optional

import requests

from finfeed.config import settings

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


class HttpProvider:
    """Base class for unauthenticated, soft-fail HTTP sources."""

    name = "http"

    def __init__(self, base_url: str, timeout: Optional[int] = None):
        """
        Args:
            base_url: Root URL of the upstream API
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    def _get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Perform a GET request and return the successful response.

        Raises:
            RuntimeError: If the request times out, fails, or returns a non-2xx status
        """
        request_headers = {"User-Agent": USER_AGENT}
        if headers:
            request_headers.update(headers)
        try:
            log.debug("GET %s params=%s", url, params)
            resp = requests.get(url, params=params, headers=request_headers, timeout=self.timeout)
            resp.raise_for_status()
            return resp
        except requests.exceptions.Timeout:
            log.error("%s timeout after %d seconds for %s", self.name, self.timeout, url)
            raise RuntimeError(f"{self.name} timeout after {self.timeout}s")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            log.error("%s HTTP error %s for %s", self.name, status, url)
            raise RuntimeError(f"{self.name} HTTP {status}") from e
        except requests.exceptions.RequestException as e:
            log.error("%s request failed for %s: %s", self.name, url, e)
            raise RuntimeError(f"{self.name} request failed: {e}") from e

    def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        GET a JSON document.

        Raises:
            RuntimeError: On transport errors or when the body is not valid JSON
        """
        resp = self._get(url, params=params, headers={"Accept": "application/json"})
        try:
            return resp.json()
        except ValueError as e:
            log.error("%s returned invalid JSON: %s", self.name, e)
            raise RuntimeError(f"{self.name} returned invalid JSON: {e}") from e
