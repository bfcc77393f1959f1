"""Shared fixtures for CLI tests.

Every test gets its own file-backed SQLite corpus below ``tmp_path`` so
that commands run end to end through ``open_store`` without touching the
operator's database.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fingerprinter_cli.app import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'corpus' / 'fp.db'}"


@pytest.fixture
def release_tree(tmp_path: Path) -> Callable[[str, Mapping[str, bytes]], Path]:
    """Return a factory writing an extracted release below ``tmp_path/releases``."""

    def _make(name: str, files: Mapping[str, bytes]) -> Path:
        root = tmp_path / "releases" / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        return root

    return _make


@pytest.fixture
def ingest(runner: CliRunner, db_url: str, release_tree):
    """Return a helper that runs ``manual-update`` for one release tree."""

    def _ingest(number: str, files: Mapping[str, bytes]) -> None:
        root = release_tree(number, files)
        result = runner.invoke(app, ["--database-url", db_url, "manual-update", "-a", str(root), "-v", number])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"

    return _ingest
