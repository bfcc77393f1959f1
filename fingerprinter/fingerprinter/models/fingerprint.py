"""Detached fingerprint records.

ORM rows are bound to a session; the resolver and the match engine work on
these plain records instead so that results can outlive the session that
produced them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from fingerprinter.state.tables import FingerprintTable


class FingerprintRecord(BaseModel):
    """A (hash, path, version) fact read from the corpus."""

    md5_hash: str = Field(
        ...,
        min_length=32,
        max_length=32,
        description="Lowercase hex MD5 digest of the file content.",
    )
    path: str = Field(
        ...,
        min_length=1,
        description="Normalized path relative to the release root, e.g. '/assets/app.js'.",
    )
    version: str = Field(
        ...,
        min_length=1,
        description="Version number the file was shipped with.",
    )
    path_id: int | None = None
    version_id: int | None = None

    @classmethod
    def from_row(cls, row: FingerprintTable) -> FingerprintRecord:
        """Build a record from an ORM row with its path and version loaded."""
        return cls(
            md5_hash=row.md5_hash,
            path=row.path.value,
            version=row.version.number,
            path_id=row.path_id,
            version_id=row.version_id,
        )
