"""
Proxied search fetcher with exponential backoff.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
import urllib3

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# The proxy terminates TLS with its own certificate
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


class SearchPayloadError(ValueError):
    """Response body is not a usable search payload."""


def parse_search_payload(data: Any) -> Dict[str, Any]:
    """Accept either a zero-results marker or a payload carrying ``organic`` results."""
    if not isinstance(data, dict):
        raise SearchPayloadError("Response is not a JSON object")
    general = data.get("general")
    if isinstance(general, dict) and general.get("results_cnt") == 0:
        return {"organic": []}
    if isinstance(data.get("organic"), list):
        return data
    raise SearchPayloadError("Response missing organic results")


class RetryingFetcher:
    """Fetches search result pages through the proxy, retrying with backoff."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the retry that follows ``attempt`` (1-based)."""
        s = self.settings
        return min(s.retry_initial_delay_seconds * s.retry_backoff_factor ** (attempt - 1), s.retry_max_delay_seconds)

    def _get_once(self, url: str) -> Dict[str, Any]:
        proxy = self.settings.proxy_url
        response = self.session.get(
            url,
            proxies={"http": proxy, "https": proxy},
            headers={"User-Agent": self.settings.user_agent},
            timeout=self.settings.request_timeout_seconds,
            verify=False,
        )
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            logger.error("Response starts with: %s", (response.text or "")[:100])
            raise SearchPayloadError(f"Failed to parse response as JSON: {e}") from e
        return parse_search_payload(data)

    def fetch(self, url: str) -> Optional[Dict[str, Any]]:
        """Return the parsed payload, or None once every attempt has failed."""
        max_attempts = max(1, self.settings.max_retries)
        for attempt in range(1, max_attempts + 1):
            logger.info("Fetching search results", extra={"step": "search", "attempt": attempt})
            try:
                payload = self._get_once(url)
                if not payload["organic"]:
                    logger.info("No results found", extra={"step": "search", "status": "empty"})
                return payload
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"Error on attempt {attempt}: {e}", extra={"step": "search", "attempt": attempt, "status": "error"})

            if attempt < max_attempts:
                delay = self.backoff_delay(attempt)
                logger.info(f"Retrying in {delay:.1f} seconds...", extra={"step": "search", "attempt": attempt})
                self.sleep(delay)

        logger.error(f"Failed after {max_attempts} attempts", extra={"step": "search", "status": "failed"})
        return None
