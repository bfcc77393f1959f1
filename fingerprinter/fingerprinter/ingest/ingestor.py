"""Ingest one extracted release tree as a new corpus version.

Typical usage::

    ingestor = Ingestor(store, IgnorePredicate(settings.ignore_patterns))
    version = await ingestor.ingest("2.4.10", Path("/tmp/release-2.4.10"))

Every regular file below the tree root that the ignore predicate lets
through becomes one fingerprint.  Path values are the file's location
relative to the root, in POSIX form with a leading slash.  The root prefix
is stripped with :meth:`pathlib.PurePath.relative_to`, which is anchored at
the start of the path, so a nested directory that repeats the root's name is
left intact.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from fingerprinter.errors import DuplicateVersionError, IngestionError
from fingerprinter.ingest.hashing import md5_file
from fingerprinter.state.repository import FingerprintStore
from fingerprinter.state.tables import VersionTable

logger = logging.getLogger(__name__)


def relative_path_value(root: Path, file_path: Path) -> str:
    """Return the normalized corpus path of *file_path* inside *root*.

    >>> relative_path_value(Path("/tmp/wp"), Path("/tmp/wp/wp-includes/wp/app.js"))
    '/wp-includes/wp/app.js'
    """
    return "/" + file_path.relative_to(root).as_posix()


def _iter_files(root: Path, ignore: Callable[[str], bool]) -> Iterator[tuple[Path, str]]:
    for entry in sorted(root.rglob("*")):
        if entry.is_dir():
            continue
        value = relative_path_value(root, entry)
        if ignore(value):
            logger.debug("Ignoring %s", value)
            continue
        yield entry, value


class Ingestor:
    """Populate a :class:`FingerprintStore` from extracted release trees."""

    def __init__(
        self,
        store: FingerprintStore,
        ignore: Callable[[str], bool] | None = None,
        *,
        remove_tree: bool = True,
    ) -> None:
        self._store = store
        self._ignore: Callable[[str], bool] = ignore if ignore is not None else (lambda _value: False)
        self._remove_tree = remove_tree

    async def ingest(self, version_number: str, tree_root: Path) -> VersionTable:
        """Fingerprint every file under *tree_root* as *version_number*.

        The version and its fingerprints are committed together once every
        file has been processed; afterwards *tree_root* is deleted (unless
        the ingestor was built with ``remove_tree=False``).

        Raises
        ------
        DuplicateVersionError
            If *version_number* is already in the corpus.
        IngestionError
            On any hashing or store failure.  Nothing is committed in that
            case; the caller decides whether to roll back and move on.
        """
        if await self._store.get_version(version_number) is not None:
            raise DuplicateVersionError(version_number)

        root = Path(tree_root)
        if not root.is_dir():
            raise IngestionError(version_number, f"{root} is not a directory")

        logger.info("Processing fingerprints for version %s", version_number, extra={"version": version_number})

        try:
            version = await self._store.create_version(version_number)
            count = 0
            for file_path, value in _iter_files(root, self._ignore):
                md5_hash = md5_file(file_path)
                path = await self._store.find_or_create_path(value)
                await self._store.create_fingerprint(path, version, md5_hash)
                count += 1
            await self._store.commit()
        except DuplicateVersionError:
            raise
        except (OSError, SQLAlchemyError) as exc:
            raise IngestionError(version_number, str(exc)) from exc

        logger.info(
            "Stored %d fingerprints for version %s",
            count,
            version_number,
            extra={"version": version_number},
        )

        if self._remove_tree:
            self._dispose(root)
        return version

    @staticmethod
    def _dispose(root: Path) -> None:
        try:
            shutil.rmtree(root)
        except OSError as exc:
            # The version is already committed at this point.
            logger.warning("Could not remove %s: %s", root, exc)
