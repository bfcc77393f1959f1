"""Tests for fingerprinter_cli.display -- Rich output formatting.

Output is captured through a Console writing to a StringIO buffer rather
than stderr.
"""

from __future__ import annotations

import io

from rich.console import Console

from fingerprinter.models import FingerprintRecord, UpdateReport, VersionScore
from fingerprinter_cli.display import (
    RichMatchReporter,
    _progress_text,
    display_file_results,
    display_hash_results,
    display_unique_fingerprints,
    display_update_report,
    display_versions,
)

HASH_A = "a" * 32
HASH_B = "b" * 32


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=60, no_color=True), buf


def _record(md5_hash: str, path: str, version: str) -> FingerprintRecord:
    return FingerprintRecord(md5_hash=md5_hash, path=path, version=version)


# ---------------------------------------------------------------------------
# Corpus queries
# ---------------------------------------------------------------------------


class TestDisplayVersions:
    def test_one_per_line(self):
        console, buf = _console()
        display_versions(console, ["1.2", "1.10"])
        assert buf.getvalue().splitlines() == ["1.2", "1.10"]

    def test_empty(self):
        console, buf = _console()
        display_versions(console, [])
        assert "No versions" in buf.getvalue()


class TestDisplayUniqueFingerprints:
    def test_hash_then_path(self):
        console, buf = _console()
        display_unique_fingerprints(console, "1.0", [_record(HASH_A, "/a.js", "1.0")])
        assert buf.getvalue().splitlines() == ["Results for 1.0:", f"{HASH_A} /a.js"]

    def test_markup_in_path_is_literal(self):
        console, buf = _console()
        display_unique_fingerprints(console, "1.0", [_record(HASH_A, "/[bold]x.js", "1.0")])
        assert "/[bold]x.js" in buf.getvalue()

    def test_long_path_not_wrapped(self):
        console, buf = _console()
        path = "/" + "deep/" * 30 + "a.js"
        display_unique_fingerprints(console, "1.0", [_record(HASH_A, path, "1.0")])
        assert f"{HASH_A} {path}" in buf.getvalue().splitlines()


class TestDisplayHashResults:
    def test_version_then_path(self):
        console, buf = _console()
        display_hash_results(
            console,
            HASH_A,
            [_record(HASH_A, "/a.js", "1.9"), _record(HASH_A, "/b.js", "1.10")],
        )
        assert buf.getvalue().splitlines() == [f"Results for {HASH_A}:", "  1.9 /a.js", "  1.10 /b.js"]

    def test_no_results(self):
        console, buf = _console()
        display_hash_results(console, HASH_A, [])
        assert buf.getvalue().splitlines() == [f"Results for {HASH_A}:", "No Results"]


class TestDisplayFileResults:
    def test_grouped(self):
        console, buf = _console()
        display_file_results(
            console,
            {
                "/a.js": [_record(HASH_A, "/a.js", "1.0"), _record(HASH_B, "/a.js", "2.0")],
                "/b.js": [_record(HASH_B, "/b.js", "2.0")],
            },
        )
        assert buf.getvalue().splitlines() == [
            "Results for /a.js:",
            f"  {HASH_A} 1.0",
            f"  {HASH_B} 2.0",
            "Results for /b.js:",
            f"  {HASH_B} 2.0",
        ]

    def test_no_results(self):
        console, buf = _console()
        display_file_results(console, {})
        assert buf.getvalue().strip() == "No Results"


# ---------------------------------------------------------------------------
# Batch updates
# ---------------------------------------------------------------------------


class TestDisplayUpdateReport:
    def test_all_outcomes(self):
        console, buf = _console()
        report = UpdateReport(ingested=["1.1"], skipped=["1.0"], failed={"1.2": "boom"})
        display_update_report(console, report)
        output = buf.getvalue()
        assert "INGESTED" in output
        assert "SKIPPED" in output
        assert "FAILED" in output
        assert "boom" in output
        assert "1 ingested, 1 skipped, 1 failed" in output

    def test_nothing_to_do(self):
        console, buf = _console()
        display_update_report(console, UpdateReport())
        assert "No versions to process." in buf.getvalue()


# ---------------------------------------------------------------------------
# Live matching
# ---------------------------------------------------------------------------


class TestRichMatchReporter:
    def test_progress_text(self):
        score = VersionScore(version="1.0", total=3, matches=1)
        assert _progress_text(score) == "Version 1.0 [1/3 33.33% matches]"

    def test_progress_redrawn_in_place(self):
        console, buf = _console()
        RichMatchReporter(console).on_progress(VersionScore(version="1.0", total=2, matches=1))
        output = buf.getvalue()
        assert output.startswith("Version 1.0 [1/2 50.0% matches]")
        assert not output.endswith("\n")

    def test_version_done_on_own_line(self):
        console, buf = _console()
        RichMatchReporter(console).on_version_done(VersionScore(version="1.0", total=2, matches=2))
        assert buf.getvalue() == "Version 1.0 [2/2 100.0% matches]\n"

    def test_match_line(self):
        console, buf = _console()
        RichMatchReporter(console).on_match("http://h/a.js", "1.0")
        assert buf.getvalue() == "http://h/a.js matches v1.0\n"
