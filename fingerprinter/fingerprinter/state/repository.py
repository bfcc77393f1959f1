"""Repository providing access to the fingerprint corpus.

:class:`FingerprintStore` takes an ``AsyncSession`` at construction time and
operates within the caller's transaction boundary.  All writes call
``session.flush()`` so that generated keys are populated; durability is the
caller's decision through :meth:`FingerprintStore.commit` (ingestion commits
once per version) or the :func:`fingerprinter.state.database.open_store`
context manager.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from fingerprinter.errors import DuplicateVersionError
from fingerprinter.models.fingerprint import FingerprintRecord
from fingerprinter.state.tables import FingerprintTable, PathTable, VersionTable
from fingerprinter.versioning import sort_versions

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    """Escape SQL LIKE metacharacters so they are treated as literal characters.

    Handles the backslash escape character itself first, then the ``%`` and
    ``_`` wildcards.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def like_pattern(pattern: str) -> tuple[str, str | None]:
    """Turn an operator-supplied file pattern into a LIKE expression.

    A pattern containing ``%`` is passed through untouched so that explicit
    wildcards keep their SQL meaning.  Anything else is a literal substring
    match.

    Returns
    -------
    tuple[str, str | None]
        The LIKE expression and the escape character to use with it.
    """
    if "%" in pattern:
        return pattern, None
    return f"%{_escape_like(pattern)}%", "\\"


async def _insert_ignore_conflict(
    session: AsyncSession,
    table: Any,
    values: dict[str, Any],
    index_elements: list[str],
) -> Any:
    """Dialect-aware insert with ``ON CONFLICT DO NOTHING``."""
    bind = session.get_bind()
    dialect_name = getattr(getattr(bind, "dialect", None), "name", "")

    stmt: Any
    if "postgresql" in str(dialect_name):
        from sqlalchemy.dialects.postgresql import insert as _pg_insert

        stmt = _pg_insert(table).values(**values)
    else:
        from sqlalchemy.dialects.sqlite import insert as _sqlite_insert

        stmt = _sqlite_insert(table).values(**values)
    stmt = stmt.on_conflict_do_nothing(index_elements=index_elements)
    return await session.execute(stmt)


class FingerprintStore:
    """CRUD and query operations over ``versions``, ``paths`` and ``fingerprints``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    # -- unit of work -------------------------------------------------------

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    # -- versions -----------------------------------------------------------

    async def create_version(self, number: str) -> VersionTable:
        """Insert a new version row.

        Raises
        ------
        DuplicateVersionError
            If *number* is already in the corpus.
        """
        if await self.get_version(number) is not None:
            raise DuplicateVersionError(number)

        row = VersionTable(number=number)
        self._session.add(row)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateVersionError(number) from exc
        logger.debug("Created version %s (id=%d)", number, row.id)
        return row

    async def get_version(self, number: str) -> VersionTable | None:
        """Fetch a single version by its number."""
        stmt = select(VersionTable).where(VersionTable.number == number)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_versions(self) -> list[VersionTable]:
        """Return every known version in natural version order."""
        result = await self._session.execute(select(VersionTable))
        return sort_versions(result.scalars().all(), key=lambda v: v.number)

    # -- paths --------------------------------------------------------------

    async def find_or_create_path(self, value: str) -> PathTable:
        """Return the path row for *value*, inserting it on first sight.

        Repeated calls with the same *value* return the same row identity.
        """
        await _insert_ignore_conflict(self._session, PathTable, {"value": value}, ["value"])
        stmt = select(PathTable).where(PathTable.value == value)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def paths_matching(self, pattern: str) -> list[PathTable]:
        """Return paths whose value matches *pattern*, ordered by value.

        See :func:`like_pattern` for how *pattern* is interpreted.
        """
        expr, escape = like_pattern(pattern)
        stmt = select(PathTable).where(PathTable.value.like(expr, escape=escape)).order_by(PathTable.value)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # -- fingerprints -------------------------------------------------------

    async def create_fingerprint(self, path: PathTable, version: VersionTable, md5_hash: str) -> FingerprintTable:
        """Record that *version* shipped *path* with content hash *md5_hash*."""
        row = FingerprintTable(path_id=path.id, version_id=version.id, md5_hash=md5_hash)
        self._session.add(row)
        await self._session.flush()
        return row

    async def fingerprints_of(self, version: VersionTable) -> list[FingerprintTable]:
        """Return all fingerprints of *version*, ordered by path value."""
        stmt = (
            select(FingerprintTable)
            .join(PathTable, FingerprintTable.path_id == PathTable.id)
            .where(FingerprintTable.version_id == version.id)
            .order_by(PathTable.value, FingerprintTable.id)
        )
        # Rows flushed earlier in this session still have their relationships unloaded.
        stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return list(result.scalars().unique().all())

    async def fingerprints_by_hash(self, md5_hash: str) -> list[FingerprintTable]:
        """Return every fingerprint recorded under *md5_hash*, in version order."""
        stmt = select(FingerprintTable).where(FingerprintTable.md5_hash == md5_hash.lower())
        stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        rows = result.scalars().unique().all()
        return sort_versions(rows, key=lambda f: f.version.number)

    async def fingerprints_of_path(self, path: PathTable) -> list[FingerprintTable]:
        """Return every fingerprint recorded at *path*, in version order."""
        stmt = select(FingerprintTable).where(FingerprintTable.path_id == path.id)
        stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        rows = result.scalars().unique().all()
        return sort_versions(rows, key=lambda f: f.version.number)

    async def unique_fingerprints(self, version: VersionTable) -> list[FingerprintRecord]:
        """Return the fingerprints of *version* whose hash no other version produced.

        A hash repeated at several paths of *version* itself stays unique;
        only other versions are excluded.  Ordered by path value ascending.
        """
        other = aliased(FingerprintTable)
        other_hashes = select(other.md5_hash).where(other.version_id != version.id).distinct()
        stmt = (
            select(
                FingerprintTable.md5_hash,
                FingerprintTable.path_id,
                FingerprintTable.version_id,
                PathTable.value.label("path"),
            )
            .join(PathTable, FingerprintTable.path_id == PathTable.id)
            .where(
                FingerprintTable.version_id == version.id,
                FingerprintTable.md5_hash.not_in(other_hashes),
            )
            .order_by(PathTable.value, FingerprintTable.id)
        )
        result = await self._session.execute(stmt)
        return [
            FingerprintRecord(
                md5_hash=row.md5_hash,
                path=row.path,
                version=version.number,
                path_id=row.path_id,
                version_id=row.version_id,
            )
            for row in result.all()
        ]
