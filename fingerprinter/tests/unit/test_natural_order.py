"""Unit tests for fingerprinter.versioning.natural_order."""

from __future__ import annotations

import pytest
from fingerprinter.versioning import compare_versions, sort_versions, version_sort_key

# ---------------------------------------------------------------------------
# compare_versions
# ---------------------------------------------------------------------------


class TestCompareVersions:
    def test_numeric_segments_compare_numerically(self):
        assert compare_versions("1.9", "1.10") == -1
        assert compare_versions("1.10", "1.9") == 1

    def test_same_string_is_equal(self):
        for version in ("1.0", "2.4.10", "3.0-beta1", ""):
            assert compare_versions(version, version) == 0

    def test_shorter_version_is_padded_below(self):
        assert compare_versions("1.2", "1.2.1") == -1
        assert compare_versions("1.2.1", "1.2") == 1

    def test_trailing_zero_segment_never_sorts_first(self):
        assert compare_versions("2.0", "2.0.0") in (-1, 0)
        assert compare_versions("2.0.0", "2.0") in (0, 1)

    def test_leading_zeros_do_not_collapse_distinct_strings(self):
        # Numerically equal segments still need a deterministic order.
        assert compare_versions("1.01", "1.1") != 0
        assert compare_versions("1.01", "1.1") == -compare_versions("1.1", "1.01")

    def test_major_segment_dominates(self):
        assert compare_versions("2.0", "10.0") == -1
        assert compare_versions("10.0", "9.99.99") == 1

    def test_suffix_segments_are_ordered(self):
        assert compare_versions("3.0-beta1", "3.0-beta2") == -1
        assert compare_versions("3.1", "3.0-beta2") == 1

    def test_suffixed_segment_is_a_prerelease_of_its_number(self):
        assert compare_versions("3.0-beta2", "3.0") == -1
        assert compare_versions("3.0-beta2", "3.0.1") == -1
        assert compare_versions("2.0rc1", "2.0") == -1
        assert sort_versions(["3.0.1", "3.0", "3.0-beta2"]) == ["3.0-beta2", "3.0", "3.0.1"]

    @pytest.mark.parametrize(
        ("a", "b", "c"),
        [
            ("1.2", "1.2.1", "1.10"),
            ("0.9", "1.0", "1.0.1"),
        ],
    )
    def test_transitive(self, a, b, c):
        assert compare_versions(a, b) == -1
        assert compare_versions(b, c) == -1
        assert compare_versions(a, c) == -1


# ---------------------------------------------------------------------------
# Sorting helpers
# ---------------------------------------------------------------------------


class TestSortVersions:
    def test_sorts_strings_naturally(self):
        versions = ["1.10", "1.2", "1.9", "1.2.1", "0.9"]
        assert sort_versions(versions) == ["0.9", "1.2", "1.2.1", "1.9", "1.10"]

    def test_lexicographic_order_differs(self):
        versions = ["1.10", "1.9"]
        assert sorted(versions) == ["1.10", "1.9"]
        assert sort_versions(versions) == ["1.9", "1.10"]

    def test_sorts_objects_by_key(self):
        rows = [{"n": "2.0"}, {"n": "1.10"}, {"n": "1.9"}]
        assert [r["n"] for r in sort_versions(rows, key=lambda r: r["n"])] == ["1.9", "1.10", "2.0"]

    def test_version_sort_key_with_builtin_sorted(self):
        assert sorted(["3.0", "3.0.0", "2.9"], key=version_sort_key) == ["2.9", "3.0", "3.0.0"]
