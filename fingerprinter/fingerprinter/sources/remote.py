"""Remote release index and archive download.

The index is a JSON document served at ``FINGERPRINTER_VERSION_INDEX_URL``
in either of two shapes::

    {"2.4.9": "https://example.org/app-2.4.9.zip", "2.4.10": "..."}

    [{"version": "2.4.9", "url": "https://example.org/app-2.4.9.zip"}, ...]

Archives are streamed to disk and unpacked with :func:`shutil.unpack_archive`.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from fingerprinter.errors import FetchError, IngestionError
from fingerprinter.models.release import RemoteRelease
from fingerprinter.versioning import sort_versions

logger = logging.getLogger(__name__)

# Longest suffixes first so ".tar.gz" wins over ".gz".
_ARCHIVE_FORMATS: tuple[tuple[str, str], ...] = (
    (".tar.gz", "gztar"),
    (".tar.bz2", "bztar"),
    (".tar.xz", "xztar"),
    (".tgz", "gztar"),
    (".tbz2", "bztar"),
    (".txz", "xztar"),
    (".tar", "tar"),
    (".zip", "zip"),
)


def archive_format(url: str) -> tuple[str, str]:
    """Return ``(suffix, shutil format name)`` for the archive at *url*.

    Raises
    ------
    ValueError
        If the URL path does not end with a known archive suffix.
    """
    path = urlparse(url).path.lower()
    for suffix, fmt in _ARCHIVE_FORMATS:
        if path.endswith(suffix):
            return suffix, fmt
    raise ValueError(f"Unsupported archive type: {url}")


def parse_index(payload: Any) -> list[RemoteRelease]:
    """Parse either index shape into releases sorted oldest to newest."""
    if isinstance(payload, dict):
        items = [{"version": str(k), "download_url": str(v)} for k, v in payload.items()]
    elif isinstance(payload, list):
        items = [
            {"version": str(entry.get("version", "")), "download_url": str(entry.get("url", ""))}
            for entry in payload
            if isinstance(entry, dict)
        ]
    else:
        raise ValueError(f"Unexpected index payload type: {type(payload).__name__}")

    releases = [RemoteRelease.model_validate(item) for item in items]
    return sort_versions(releases, key=lambda r: r.version)


class RemoteVersionIndex:
    """Reads the list of published versions from a JSON index."""

    def __init__(self, client: httpx.AsyncClient, index_url: str) -> None:
        self._client = client
        self._index_url = index_url

    async def fetch(self) -> list[RemoteRelease]:
        """Return every published release, oldest first.

        Raises
        ------
        FetchError
            If the index cannot be retrieved or parsed.
        """
        try:
            response = await self._client.get(self._index_url)
            response.raise_for_status()
            return parse_index(response.json())
        except httpx.HTTPError as exc:
            raise FetchError(self._index_url, str(exc) or type(exc).__name__) from exc
        except (ValueError, ValidationError) as exc:
            raise FetchError(self._index_url, f"invalid index: {exc}") from exc


async def download_and_extract(
    client: httpx.AsyncClient,
    release: RemoteRelease,
    workspace: Path,
) -> Path:
    """Download *release* into *workspace*, unpack it and return the tree root.

    An archive holding a single top-level directory (the usual
    ``app-2.4.10/...`` layout) yields that directory as the root.  The
    downloaded archive itself is deleted once unpacked.

    Raises
    ------
    IngestionError
        On any download or extraction failure.
    """
    try:
        suffix, fmt = archive_format(release.download_url)
    except ValueError as exc:
        raise IngestionError(release.version, str(exc)) from exc

    workspace.mkdir(parents=True, exist_ok=True)
    extract_dir = workspace / "tree"
    with tempfile.NamedTemporaryFile(dir=workspace, suffix=suffix, delete=False) as fh:
        archive_path = Path(fh.name)
        logger.info("Downloading %s", release.download_url, extra={"version": release.version})
        try:
            async with client.stream("GET", release.download_url) as response:
                response.raise_for_status()
                async for chunk in response.aiter_bytes():
                    fh.write(chunk)
        except httpx.HTTPError as exc:
            raise IngestionError(release.version, f"download failed: {exc}") from exc

    try:
        if fmt == "zip":
            shutil.unpack_archive(archive_path, extract_dir, fmt)
        else:
            shutil.unpack_archive(archive_path, extract_dir, fmt, filter="data")
    except (OSError, tarfile.TarError, ValueError) as exc:
        raise IngestionError(release.version, f"extraction failed: {exc}") from exc
    finally:
        archive_path.unlink(missing_ok=True)

    entries = list(extract_dir.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return extract_dir
