"""Fingerprinter CLI application -- Typer-based operator interface.

Provides commands to build the fingerprint corpus (``auto-update``,
``manual-update``), inspect it (``list-versions``, ``show-unique``,
``search-hash``, ``search-file``) and match a live target against it
(``fingerprint``).  Human-readable output goes to *stderr* via Rich;
``--json`` output goes to *stdout* so that pipelines can compose cleanly.
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from fingerprinter.config import Settings, load_settings
from fingerprinter.errors import FetchError, MissingOptionError, VersionNotFoundError
from fingerprinter.logging_config import configure_logging
from fingerprinter.models import FingerprintRecord, UpdateReport, VersionScore
from fingerprinter_cli.display import (
    RichMatchReporter,
    display_file_results,
    display_hash_results,
    display_unique_fingerprints,
    display_update_report,
    display_versions,
)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="fingerprinter",
    help="Identify the release version deployed at a URL from file content hashes.",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Mutable global options populated by the Typer callback.
_json_output: bool = False
_database_url: str | None = None


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit structured JSON to stdout instead of human-readable output.",
    ),
    database_url: str | None = typer.Option(
        None,
        "--database-url",
        help="SQLAlchemy URL of the fingerprint database.",
        envvar="FINGERPRINTER_DATABASE_URL",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output, _database_url  # noqa: PLW0603
    _json_output = json_mode
    _database_url = database_url


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settings() -> Settings:
    overrides: dict[str, Any] = {}
    if _database_url:
        overrides["database_url"] = _database_url
    settings = load_settings(**overrides)
    configure_logging(settings)
    return settings


def _run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


def _emit_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, default=str) + "\n")


def _emit_report(report: UpdateReport) -> None:
    if _json_output:
        _emit_json(report.model_dump())
    else:
        display_update_report(console, report)


# ---------------------------------------------------------------------------
# auto-update
# ---------------------------------------------------------------------------


@app.command("auto-update")
def auto_update() -> None:
    """Download and ingest every published version not yet in the database.

    Versions are processed oldest to newest.  A failure on one version is
    reported and the batch carries on with the next.
    """
    from fingerprinter.ingest import BatchUpdater
    from fingerprinter.net import build_http_client
    from fingerprinter.state import open_store

    settings = _settings()

    async def _auto_update() -> UpdateReport:
        async with build_http_client(settings) as client, open_store(settings) as store:
            return await BatchUpdater(store, settings, client=client).auto_update()

    try:
        report = _run(_auto_update())
    except MissingOptionError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from exc
    except FetchError as exc:
        console.print(f"[red]Failed to retrieve remote versions: {escape(str(exc))}[/red]")
        raise typer.Exit(code=3) from exc

    _emit_report(report)


# ---------------------------------------------------------------------------
# manual-update
# ---------------------------------------------------------------------------


@app.command("manual-update")
def manual_update(
    archive: Path = typer.Option(
        ...,
        "--archive",
        "-a",
        help="Directory holding the extracted release.",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    manual_version: str | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Version number to record the release under.",
    ),
    keep: bool = typer.Option(
        False,
        "--keep/--no-keep",
        help="Keep the extracted directory after ingestion instead of deleting it.",
    ),
) -> None:
    """Ingest an already extracted release directory under a given version."""
    from fingerprinter.ingest import BatchUpdater
    from fingerprinter.state import open_store

    settings = _settings()

    async def _manual_update() -> UpdateReport:
        async with open_store(settings) as store:
            return await BatchUpdater(store, settings).manual_update(manual_version, archive, remove_tree=not keep)

    try:
        report = _run(_manual_update())
    except MissingOptionError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from exc

    _emit_report(report)


# ---------------------------------------------------------------------------
# Corpus queries
# ---------------------------------------------------------------------------


@app.command("list-versions")
def list_versions() -> None:
    """List every version in the database, in natural version order."""
    from fingerprinter.state import open_store

    settings = _settings()

    async def _list() -> list[str]:
        async with open_store(settings) as store:
            return [v.number for v in await store.list_versions()]

    numbers = _run(_list())
    if _json_output:
        _emit_json(numbers)
    else:
        display_versions(console, numbers)


@app.command("show-unique")
def show_unique(
    version: str = typer.Argument(..., help="Version number to show unique fingerprints for."),
) -> None:
    """Print the fingerprints that only VERSION ever shipped."""
    from fingerprinter.matching import UniqueFingerprintResolver
    from fingerprinter.state import open_store

    settings = _settings()

    async def _unique() -> list[FingerprintRecord]:
        async with open_store(settings) as store:
            return await UniqueFingerprintResolver(store).unique_for_number(version)

    try:
        records = _run(_unique())
    except VersionNotFoundError as exc:
        console.print(f"[yellow]{escape(str(exc))}[/yellow]")
        raise typer.Exit(code=0) from exc

    if _json_output:
        _emit_json([r.model_dump(include={"md5_hash", "path"}) for r in records])
    else:
        display_unique_fingerprints(console, version, records)


@app.command("search-hash")
def search_hash(
    md5_hash: str = typer.Argument(..., metavar="HASH", help="MD5 digest to look up."),
) -> None:
    """Print every version and path recorded under HASH."""
    from fingerprinter.state import open_store

    settings = _settings()

    async def _search() -> list[FingerprintRecord]:
        async with open_store(settings) as store:
            rows = await store.fingerprints_by_hash(md5_hash)
            return [FingerprintRecord.from_row(row) for row in rows]

    records = _run(_search())
    if _json_output:
        _emit_json([r.model_dump(include={"version", "path"}) for r in records])
    else:
        display_hash_results(console, md5_hash, records)


@app.command("search-file")
def search_file(
    pattern: str = typer.Argument(
        ...,
        help="Substring of the file path, or a SQL LIKE pattern when it contains '%'.",
    ),
) -> None:
    """Print the hash of every matching file, per version, grouped by path."""
    from fingerprinter.state import open_store

    settings = _settings()

    async def _search() -> dict[str, list[FingerprintRecord]]:
        async with open_store(settings) as store:
            groups: dict[str, list[FingerprintRecord]] = {}
            for path in await store.paths_matching(pattern):
                rows = await store.fingerprints_of_path(path)
                groups[path.value] = [FingerprintRecord.from_row(row) for row in rows]
            return groups

    groups = _run(_search())
    if _json_output:
        _emit_json(
            {path: [r.model_dump(include={"md5_hash", "version"}) for r in records] for path, records in groups.items()}
        )
    else:
        display_file_results(console, groups)


# ---------------------------------------------------------------------------
# fingerprint
# ---------------------------------------------------------------------------


@app.command()
def fingerprint(
    url: str = typer.Argument(..., help="Base URL of the target installation."),
    unique: bool = typer.Option(
        False,
        "--unique",
        "-u",
        help="Only probe fingerprints unique to each version.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Print every URL that matched.",
    ),
    stop_on_unique: bool | None = typer.Option(
        None,
        "--stop-on-unique/--continue-on-unique",
        help=(
            "Answer the 'continue after a unique match?' question up front "
            "instead of prompting.  Defaults to FINGERPRINTER_STOP_ON_UNIQUE_MATCH, "
            "or an interactive prompt when that is unset."
        ),
    ),
) -> None:
    """Match the files served at URL against every version in the database."""
    from fingerprinter.matching import HttpFetcher, MatchEngine
    from fingerprinter.net import RetryConfig, build_http_client
    from fingerprinter.state import open_store

    settings = _settings()
    if stop_on_unique is None:
        stop_on_unique = settings.stop_on_unique_match

    def _confirm(score: VersionScore) -> bool:
        if stop_on_unique is not None:
            return not stop_on_unique
        return typer.confirm(
            f"The version is very likely to be {score.version}. Do you still want to continue anyway?",
            default=False,
            err=True,
        )

    async def _fingerprint() -> list[VersionScore]:
        async with build_http_client(settings) as client, open_store(settings) as store:
            engine = MatchEngine(
                store,
                HttpFetcher(client, RetryConfig.from_settings(settings)),
                reporter=RichMatchReporter(console),
                confirm=_confirm,
            )
            return await engine.run(url, use_unique=unique, verbose=verbose)

    scores = _run(_fingerprint())

    if _json_output:
        _emit_json([s.model_dump() for s in scores])
    elif not scores:
        console.print("[yellow]No fingerprints to test.[/yellow]")
