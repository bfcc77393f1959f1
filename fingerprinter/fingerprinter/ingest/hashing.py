"""Content hashing shared by ingestion and live matching.

Both sides must use the same algorithm so that identical content always
yields identical digests.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 64 * 1024


def md5_bytes(content: bytes) -> str:
    """Return the lowercase hex MD5 digest of *content*."""
    return hashlib.md5(content, usedforsecurity=False).hexdigest()


def md5_file(path: Path) -> str:
    """Return the lowercase hex MD5 digest of the file at *path*, read in chunks."""
    digest = hashlib.md5(usedforsecurity=False)
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
