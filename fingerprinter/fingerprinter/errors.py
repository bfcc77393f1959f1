"""Exception hierarchy shared by the ingestion, store and matching layers."""

from __future__ import annotations


class FingerprinterError(Exception):
    """Base class for every error raised by the fingerprinter."""


class DuplicateVersionError(FingerprinterError):
    """Raised when a version number is already present in the corpus."""

    def __init__(self, number: str) -> None:
        super().__init__(f"Version {number} already in DB")
        self.number = number


class VersionNotFoundError(FingerprinterError):
    """Raised when a query names a version that was never ingested."""

    def __init__(self, number: str) -> None:
        super().__init__(f"The version supplied: '{number}' is not in the database")
        self.number = number


class IngestionError(FingerprinterError):
    """Raised when hashing, extraction or a store write fails for a version."""

    def __init__(self, number: str, reason: str) -> None:
        super().__init__(f"Ingestion of version {number} failed: {reason}")
        self.number = number
        self.reason = reason


class FetchError(FingerprinterError):
    """Raised when a candidate file cannot be retrieved from the target."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class MissingOptionError(FingerprinterError):
    """Raised when a required command option was not supplied."""

    def __init__(self, option: str) -> None:
        super().__init__(f"The {option} option has to be supplied")
        self.option = option
