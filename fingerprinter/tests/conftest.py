"""Shared fixtures for fingerprinter engine tests.

Every store fixture is backed by a fresh in-memory SQLite database via
aiosqlite, so tests never touch the operator's corpus.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path

import pytest
import pytest_asyncio
from fingerprinter.ingest.hashing import md5_bytes
from fingerprinter.state.repository import FingerprintStore
from fingerprinter.state.sqlite_adapter import create_local_tables, get_local_engine
from fingerprinter.state.tables import VersionTable
from sqlalchemy.ext.asyncio import async_sessionmaker

TreeFactory = Callable[[str, Mapping[str, bytes]], Path]
Seeder = Callable[[str, Mapping[str, bytes]], Awaitable[VersionTable]]


@pytest_asyncio.fixture
async def store():
    """Provide a FingerprintStore over an empty in-memory database."""
    engine = get_local_engine(":memory:")
    await create_local_tables(engine)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield FingerprintStore(session)

    await engine.dispose()


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeFactory:
    """Return a factory writing ``{relative path: content}`` below ``tmp_path/<name>``."""

    def _make(name: str, files: Mapping[str, bytes]) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        return root

    return _make


@pytest.fixture
def seed(store: FingerprintStore) -> Seeder:
    """Return a coroutine inserting a version whose fingerprints are the MD5 of each content."""

    async def _seed(number: str, files: Mapping[str, bytes]) -> VersionTable:
        version = await store.create_version(number)
        for value, content in files.items():
            path = await store.find_or_create_path(value)
            await store.create_fingerprint(path, version, md5_bytes(content))
        await store.commit()
        return version

    return _seed
