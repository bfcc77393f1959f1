"""Retrieval of candidate files from the target under test."""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import quote

import httpx

from fingerprinter.errors import FetchError
from fingerprinter.net.retry import RetryConfig, async_retry_with_backoff

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: str) -> str:
    """Ensure *base_url* ends with a slash so relative joins stay below it."""
    return base_url if base_url.endswith("/") else base_url + "/"


def candidate_url(base_url: str, path_value: str) -> str:
    """Join *base_url* and a corpus path, percent-encoding the path.

    The corpus path's leading slash is dropped so that a target installed
    under a sub-directory (``https://example.org/blog/``) is probed below
    that directory rather than at the host root.

    >>> candidate_url("https://example.org/blog", "/wp-includes/js/a b.js")
    'https://example.org/blog/wp-includes/js/a%20b.js'
    """
    return normalize_base_url(base_url) + quote(path_value.lstrip("/"), safe="/")


class Fetcher(Protocol):
    """Anything able to return the raw bytes served at a URL."""

    async def fetch(self, url: str) -> bytes: ...


class HttpFetcher:
    """Fetch candidate files with ``httpx``.

    Any failure to retrieve the file raises :class:`FetchError`, including a
    URL httpx refuses to send.  Only transport errors are retried, once per
    unit of retry budget: a 404 will not change on a second attempt.
    """

    def __init__(self, client: httpx.AsyncClient, retry: RetryConfig | None = None) -> None:
        self._client = client
        self._retry = retry or RetryConfig()

    async def fetch(self, url: str) -> bytes:
        async def _get() -> httpx.Response:
            return await self._client.get(url)

        try:
            response = await async_retry_with_backoff(_get, self._retry, (httpx.TransportError,))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise FetchError(url, f"HTTP {response.status_code}")
        return response.content
