"""Domain models exchanged between the store, the resolver and the match engine."""

from fingerprinter.models.fingerprint import FingerprintRecord
from fingerprinter.models.match import VersionScore
from fingerprinter.models.release import RemoteRelease, UpdateReport

__all__ = [
    "FingerprintRecord",
    "RemoteRelease",
    "UpdateReport",
    "VersionScore",
]
