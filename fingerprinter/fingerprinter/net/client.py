"""Factory for the shared ``httpx.AsyncClient``."""

from __future__ import annotations

import httpx

from fingerprinter.config import Settings


def build_http_client(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Return an async client configured from *settings*.

    *transport* is injected by tests (``httpx.MockTransport``).
    """
    return httpx.AsyncClient(
        timeout=settings.fetch_timeout,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
        verify=settings.verify_tls,
        transport=transport,
    )
