"""Natural ordering of version-number strings."""

from fingerprinter.versioning.natural_order import compare_versions, sort_versions, version_sort_key

__all__ = [
    "compare_versions",
    "sort_versions",
    "version_sort_key",
]
