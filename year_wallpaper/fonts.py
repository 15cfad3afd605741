"""
Fetches the footer font for PNG rendering and keeps the last one around.

One entry, keyed by URL. Concurrent requests for the same URL share a
single in-flight download; asking for a different URL replaces the entry.
A failed download is dropped from the cache and reported as None so the
request can go ahead without an embedded font.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_FONT_URL = "https://rsms.me/inter/font-files/Inter-Regular.woff2"
DEFAULT_TIMEOUT = 10.0


def fetch_font(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


class FontCache:
    """Single-entry URL -> font bytes cache that memoizes the in-flight fetch."""

    def __init__(
        self,
        fetcher: Callable[[str], bytes] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._fetcher = fetcher or (lambda url: fetch_font(url, timeout))
        self._lock = threading.Lock()
        self._entry: Optional[Tuple[str, Future]] = None

    @property
    def cached_url(self) -> Optional[str]:
        entry = self._entry
        return entry[0] if entry else None

    def get(self, url: Optional[str]) -> Optional[bytes]:
        """Font bytes for url, or None when there is no url or the fetch fails."""
        if not url:
            return None

        owner = False
        with self._lock:
            if self._entry is None or self._entry[0] != url:
                future: Future = Future()
                self._entry = (url, future)
                owner = True
            else:
                future = self._entry[1]

        if owner:
            self._load(url, future)

        try:
            return future.result()
        except Exception as e:
            logger.warning("Font fetch failed for %s: %s", url, e)
            return None

    def _load(self, url: str, future: Future) -> None:
        logger.info("Fetching font %s", url)
        try:
            data = self._fetcher(url)
        except BaseException as e:
            with self._lock:
                if self._entry is not None and self._entry[1] is future:
                    self._entry = None
            future.set_exception(e)
            if not isinstance(e, Exception):
                raise
        else:
            future.set_result(data)

    def clear(self) -> None:
        with self._lock:
            self._entry = None
