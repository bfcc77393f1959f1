"""Live matching of a target against every version in the corpus.

Versions are visited in natural order.  For each one the engine probes
its candidate files (all fingerprints, or only the unique ones), hashes
what the target serves and counts matches.  Progress is pushed to a
:class:`MatchReporter` after every candidate.

When scanning unique fingerprints, a version with at least one match is a
strong identification: the engine asks its ``confirm`` callback whether to
keep going and stops on anything but ``True``.  There is no cross-version
"best match"; reading the per-version scores is left to the operator.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from fingerprinter.errors import FetchError
from fingerprinter.ingest.hashing import md5_bytes
from fingerprinter.matching.fetcher import Fetcher, candidate_url, normalize_base_url
from fingerprinter.matching.unique import UniqueFingerprintResolver
from fingerprinter.models.fingerprint import FingerprintRecord
from fingerprinter.models.match import VersionScore
from fingerprinter.state.repository import FingerprintStore
from fingerprinter.state.tables import VersionTable

logger = logging.getLogger(__name__)


class MatchReporter(Protocol):
    def on_match(self, url: str, version: str) -> None: ...

    def on_progress(self, score: VersionScore) -> None: ...

    def on_version_done(self, score: VersionScore) -> None: ...


class LoggingReporter:
    """Reporter used when no console is attached."""

    def on_match(self, url: str, version: str) -> None:
        logger.info("%s matches v%s", url, version, extra={"url": url, "version": version})

    def on_progress(self, score: VersionScore) -> None:
        logger.debug("Version %s [%d/%d %s%%]", score.version, score.matches, score.total, score.percent)

    def on_version_done(self, score: VersionScore) -> None:
        logger.info(
            "Version %s [%d/%d %s%% matches]",
            score.version,
            score.matches,
            score.total,
            score.percent,
            extra={"version": score.version},
        )


def _never_continue(_score: VersionScore) -> bool:
    return False


class MatchEngine:
    """Score every corpus version against a live target."""

    def __init__(
        self,
        store: FingerprintStore,
        fetcher: Fetcher,
        reporter: MatchReporter | None = None,
        confirm: Callable[[VersionScore], bool] | None = None,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._reporter: MatchReporter = reporter or LoggingReporter()
        self._confirm = confirm or _never_continue
        self._resolver = UniqueFingerprintResolver(store)

    async def candidates(self, version: VersionTable, use_unique: bool) -> list[FingerprintRecord]:
        if use_unique:
            return await self._resolver.unique(version)
        return [FingerprintRecord.from_row(row) for row in await self._store.fingerprints_of(version)]

    async def run(
        self,
        target_base_url: str,
        *,
        use_unique: bool = False,
        verbose: bool = False,
    ) -> list[VersionScore]:
        """Scan *target_base_url* and return one score per version that had candidates.

        Scores are in the order the versions were visited.  The list ends
        early if a unique-fingerprint hit was not confirmed.
        """
        base_url = normalize_base_url(target_base_url)
        scores: list[VersionScore] = []

        for version in await self._store.list_versions():
            candidates = await self.candidates(version, use_unique)
            if not candidates:
                logger.debug("Version %s has no candidate fingerprints, skipping", version.number)
                continue

            score = VersionScore(version=version.number, total=len(candidates), unique=use_unique)
            for fingerprint in candidates:
                url = candidate_url(base_url, fingerprint.path)
                if await self._matches(url, fingerprint.md5_hash):
                    score.matches += 1
                    if verbose:
                        self._reporter.on_match(url, version.number)
                self._reporter.on_progress(score)

            self._reporter.on_version_done(score)
            scores.append(score)

            if score.identified and not self._confirm(score):
                logger.info("Stopping scan after unique match on version %s", version.number)
                break

        return scores

    async def _matches(self, url: str, expected_hash: str) -> bool:
        try:
            content = await self._fetcher.fetch(url)
        except FetchError as exc:
            logger.debug("Treating %s as non-match: %s", url, exc.reason, extra={"url": url})
            return False
        return md5_bytes(content) == expected_hash
