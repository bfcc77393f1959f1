"""Unique fingerprints: files whose content alone proves a version.

A fingerprint of version V is unique when no *other* version ever produced
its hash, at any path.  Repeats of the hash inside V do not disqualify it.
The set depends on the whole corpus, so it is queried live on every call
and is never cached across ingestions.
"""

from __future__ import annotations

from fingerprinter.errors import VersionNotFoundError
from fingerprinter.models.fingerprint import FingerprintRecord
from fingerprinter.state.repository import FingerprintStore
from fingerprinter.state.tables import VersionTable


class UniqueFingerprintResolver:
    def __init__(self, store: FingerprintStore) -> None:
        self._store = store

    async def unique(self, version: VersionTable) -> list[FingerprintRecord]:
        """Return the unique fingerprints of *version*, ordered by path."""
        return await self._store.unique_fingerprints(version)

    async def unique_for_number(self, number: str) -> list[FingerprintRecord]:
        """Like :meth:`unique` but looks the version up by number first.

        Raises
        ------
        VersionNotFoundError
            If *number* was never ingested.
        """
        version = await self._store.get_version(number)
        if version is None:
            raise VersionNotFoundError(number)
        return await self.unique(version)
