"""HTTP helpers shared by live matching and remote release downloads."""

from fingerprinter.net.client import build_http_client
from fingerprinter.net.retry import RetryConfig, async_retry_with_backoff

__all__ = [
    "RetryConfig",
    "async_retry_with_backoff",
    "build_http_client",
]
