"""Batch corpus updates: every remote release, or one pre-extracted tree.

Both entry points skip versions already in the corpus and treat a failure
on one version as recoverable: the unit of work is rolled back, the error
is logged and recorded in the :class:`UpdateReport`, and the batch moves on.
Only a failure to read the release index itself ends ``auto_update``
early, since nothing has been discovered yet.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path

import httpx

from fingerprinter.config import Settings
from fingerprinter.errors import DuplicateVersionError, MissingOptionError
from fingerprinter.ingest.ignore import IgnorePredicate
from fingerprinter.ingest.ingestor import Ingestor
from fingerprinter.models.release import RemoteRelease, UpdateReport
from fingerprinter.sources.remote import RemoteVersionIndex, download_and_extract
from fingerprinter.state.repository import FingerprintStore

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _workspace_slug(version_number: str) -> str:
    """Return a filesystem-safe, single-component prefix for a download workspace."""
    slug = _UNSAFE_CHARS.sub("_", version_number).strip(".")
    return slug or "release"


class BatchUpdater:
    """Drive :class:`Ingestor` over many versions with skip-and-continue semantics."""

    def __init__(
        self,
        store: FingerprintStore,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._client = client
        self._ignore = IgnorePredicate(settings.ignore_patterns)

    async def auto_update(self) -> UpdateReport:
        """Ingest every published version that is not yet in the corpus, oldest first.

        Raises
        ------
        MissingOptionError
            If no ``version_index_url`` is configured.
        FetchError
            If the release index cannot be read.
        """
        if not self._settings.version_index_url:
            raise MissingOptionError("FINGERPRINTER_VERSION_INDEX_URL")
        if self._client is None:
            raise RuntimeError("auto_update requires an HTTP client")

        logger.info("Retrieving remote version numbers ...")
        releases = await RemoteVersionIndex(self._client, self._settings.version_index_url).fetch()
        logger.info("%d remote version numbers retrieved", len(releases))

        report = UpdateReport()
        for release in releases:
            if await self._store.get_version(release.version) is not None:
                logger.info("Version %s already in DB, skipping", release.version)
                report.skipped.append(release.version)
                continue
            await self._update_from_remote(release, report)
        return report

    async def manual_update(
        self,
        version_number: str | None,
        tree_root: Path,
        *,
        remove_tree: bool = True,
    ) -> UpdateReport:
        """Ingest a tree the operator already extracted.

        Raises
        ------
        MissingOptionError
            If *version_number* is empty.
        """
        if not version_number:
            raise MissingOptionError("--version")

        report = UpdateReport()
        if await self._store.get_version(version_number) is not None:
            logger.info("Version %s already in DB, skipping", version_number)
            report.skipped.append(version_number)
            return report

        await self.process_version(version_number, tree_root, report, remove_tree=remove_tree)
        return report

    async def process_version(
        self,
        version_number: str,
        tree_root: Path,
        report: UpdateReport,
        *,
        remove_tree: bool = True,
    ) -> None:
        """Ingest one tree, recording the outcome in *report* instead of raising."""
        ingestor = Ingestor(self._store, self._ignore, remove_tree=remove_tree)
        try:
            await ingestor.ingest(version_number, tree_root)
        except DuplicateVersionError:
            await self._store.rollback()
            logger.info("Version %s already in DB, skipping", version_number)
            report.skipped.append(version_number)
        except Exception as exc:
            await self._store.rollback()
            logger.error("An error occurred: %s, skipping the version", exc, extra={"version": version_number})
            report.failed[version_number] = str(exc)
        else:
            report.ingested.append(version_number)

    async def _update_from_remote(self, release: RemoteRelease, report: UpdateReport) -> None:
        assert self._client is not None  # noqa: S101
        workspace: Path | None = None
        try:
            try:
                download_dir = self._settings.download_dir
                download_dir.mkdir(parents=True, exist_ok=True)
                # Version numbers come from the remote index and may hold path separators.
                workspace = Path(tempfile.mkdtemp(prefix=f"{_workspace_slug(release.version)}-", dir=download_dir))
                tree_root = await download_and_extract(self._client, release, workspace)
            except Exception as exc:
                logger.error("An error occurred: %s, skipping the version", exc, extra={"version": release.version})
                report.failed[release.version] = str(exc)
                return
            await self.process_version(release.version, tree_root, report)
        finally:
            if workspace is not None:
                shutil.rmtree(workspace, ignore_errors=True)
