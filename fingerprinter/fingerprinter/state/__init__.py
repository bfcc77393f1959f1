"""Persistence layer for the fingerprint corpus (async SQLAlchemy)."""

from fingerprinter.state.database import get_engine, get_session, open_store
from fingerprinter.state.repository import FingerprintStore
from fingerprinter.state.tables import Base, FingerprintTable, PathTable, VersionTable

__all__ = [
    "Base",
    "FingerprintStore",
    "FingerprintTable",
    "PathTable",
    "VersionTable",
    "get_engine",
    "get_session",
    "open_store",
]
