"""Rich output formatting for the fingerprinter CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that machine-readable output on *stdout* is never
polluted with human-readable decoration.  Result lines are printed with
``soft_wrap=True`` so long paths are never broken across lines.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from fingerprinter.models import FingerprintRecord, UpdateReport, VersionScore


def _line(console: Console, text: str) -> None:
    console.print(text, soft_wrap=True, highlight=False)


# ---------------------------------------------------------------------------
# Corpus queries
# ---------------------------------------------------------------------------


def display_versions(console: Console, numbers: list[str]) -> None:
    """Print one version number per line, already in natural order."""
    if not numbers:
        console.print("[dim]No versions in the database.[/dim]")
        return
    for number in numbers:
        _line(console, escape(number))


def display_unique_fingerprints(console: Console, number: str, records: list[FingerprintRecord]) -> None:
    """Print ``<hash> <path>`` for every unique fingerprint of *number*."""
    _line(console, f"Results for {escape(number)}:")
    if not records:
        console.print("[dim]No unique fingerprints.[/dim]")
        return
    for record in records:
        _line(console, f"{record.md5_hash} {escape(record.path)}")


def display_hash_results(console: Console, md5_hash: str, records: list[FingerprintRecord]) -> None:
    """Print ``<version> <path>`` for every file recorded under *md5_hash*."""
    _line(console, f"Results for {escape(md5_hash)}:")
    if not records:
        _line(console, "No Results")
        return
    for record in records:
        _line(console, f"  {escape(record.version)} {escape(record.path)}")


def display_file_results(console: Console, groups: dict[str, list[FingerprintRecord]]) -> None:
    """Print ``<hash> <version>`` lines grouped under each matching path."""
    if not groups:
        _line(console, "No Results")
        return
    for path, records in groups.items():
        _line(console, f"Results for {escape(path)}:")
        for record in records:
            _line(console, f"  {record.md5_hash} {escape(record.version)}")


# ---------------------------------------------------------------------------
# Batch updates
# ---------------------------------------------------------------------------


def display_update_report(console: Console, report: UpdateReport) -> None:
    """Render the outcome of a corpus update as a table."""
    if report.attempted == 0:
        console.print("[dim]No versions to process.[/dim]")
        return

    table = Table(
        title="Corpus Update",
        show_lines=False,
        pad_edge=True,
        expand=False,
    )
    table.add_column("Version", style="bold")
    table.add_column("Outcome")
    table.add_column("Detail")

    for number in report.ingested:
        table.add_row(escape(number), "[green]INGESTED[/green]", "")
    for number in report.skipped:
        table.add_row(escape(number), "[dim]SKIPPED[/dim]", "already in DB")
    for number, reason in report.failed.items():
        table.add_row(escape(number), "[red]FAILED[/red]", escape(reason))

    console.print(table)
    console.print(
        f"\n[bold]{len(report.ingested)}[/bold] ingested, "
        f"[bold]{len(report.skipped)}[/bold] skipped, "
        f"[bold]{len(report.failed)}[/bold] failed"
    )


# ---------------------------------------------------------------------------
# Live matching
# ---------------------------------------------------------------------------


def _progress_text(score: VersionScore) -> str:
    return f"Version {score.version} [{score.matches}/{score.total} {score.percent}% matches]"


class RichMatchReporter:
    """Match progress on a Rich console.

    Progress for the current version is redrawn in place with a carriage
    return; the final figure for each version is printed on its own line.
    """

    def __init__(self, console: Console) -> None:
        self._console = console

    def on_match(self, url: str, version: str) -> None:
        self._console.print(f"{escape(url)} matches v{escape(version)}", soft_wrap=True, highlight=False)

    def on_progress(self, score: VersionScore) -> None:
        self._console.print(escape(_progress_text(score)), end="\r", soft_wrap=True, highlight=False)

    def on_version_done(self, score: VersionScore) -> None:
        style = "green" if score.matches else "dim"
        self._console.print(
            f"[{style}]{escape(_progress_text(score))}[/{style}]",
            soft_wrap=True,
            highlight=False,
        )
