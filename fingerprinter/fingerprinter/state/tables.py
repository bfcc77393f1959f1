"""SQLAlchemy 2.0 ORM table definitions for the fingerprint corpus.

All tables use the ``Mapped`` / ``mapped_column`` declaration style.  The
``Base`` declarative base is exported for the repository layer and for
:func:`fingerprinter.state.sqlite_adapter.create_local_tables`.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    """Shared declarative base for all fingerprint tables."""


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------


class VersionTable(Base):
    """One row per ingested release version."""

    __tablename__ = "versions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    fingerprints: Mapped[list[FingerprintTable]] = relationship(
        back_populates="version",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"VersionTable(id={self.id!r}, number={self.number!r})"


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class PathTable(Base):
    """Normalized file paths, shared by every version that ships them."""

    __tablename__ = "paths"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"PathTable(id={self.id!r}, value={self.value!r})"


# ---------------------------------------------------------------------------
# Fingerprints
# ---------------------------------------------------------------------------


class FingerprintTable(Base):
    """The fact "at version V, path P had content hash H"."""

    __tablename__ = "fingerprints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    path_id: Mapped[int] = mapped_column(ForeignKey("paths.id"), nullable=False)
    version_id: Mapped[int] = mapped_column(ForeignKey("versions.id", ondelete="CASCADE"), nullable=False)
    md5_hash: Mapped[str] = mapped_column(String(32), nullable=False)

    path: Mapped[PathTable] = relationship(lazy="joined")
    version: Mapped[VersionTable] = relationship(back_populates="fingerprints", lazy="joined")

    __table_args__ = (
        Index("ix_fingerprints_md5_hash", "md5_hash"),
        Index("ix_fingerprints_version_id", "version_id"),
        Index("ix_fingerprints_path_id", "path_id"),
    )

    def __repr__(self) -> str:
        return f"FingerprintTable(id={self.id!r}, path_id={self.path_id!r}, md5_hash={self.md5_hash!r})"
