"""Unique fingerprint resolution and live matching against a target."""

from fingerprinter.matching.engine import LoggingReporter, MatchEngine, MatchReporter
from fingerprinter.matching.fetcher import Fetcher, HttpFetcher, candidate_url, normalize_base_url
from fingerprinter.matching.unique import UniqueFingerprintResolver

__all__ = [
    "Fetcher",
    "HttpFetcher",
    "LoggingReporter",
    "MatchEngine",
    "MatchReporter",
    "UniqueFingerprintResolver",
    "candidate_url",
    "normalize_base_url",
]
