"""Natural-order comparison for dot-delimited version strings.

Plain string comparison puts ``"1.10"`` before ``"1.9"``.  Here each
dot-delimited segment is compared on its own: the leading run of digits
numerically, then any remaining suffix as a string.  A suffix marks a
pre-release of its number, so ``"3.0-beta2" < "3.0" < "3.0.1"``.  When one
version has fewer segments it is padded with a segment that sorts below
every real one, so ``"1.2" < "1.2.1"`` and ``"2.0" < "2.0.0"``.

The order is total and consistent with equality: two different strings
never compare equal (``"1.01"`` and ``"1.1"`` fall back to a raw string
comparison), which makes it safe for "already known" checks.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

T = TypeVar("T")

_SEGMENT_RE = re.compile(r"^(\d*)(.*)$", re.DOTALL)

# Numeric part of a segment without leading digits, e.g. "beta" or "".
_NO_NUMBER = -1

# Sorts below every real segment, including an empty one.
_PADDING: tuple[int, int, int, str] = (0, _NO_NUMBER, 0, "")


def _segment_key(segment: str) -> tuple[int, int, int, str]:
    match = _SEGMENT_RE.match(segment)
    assert match is not None  # noqa: S101 -- the pattern matches any string
    digits, suffix = match.groups()
    number = int(digits) if digits else _NO_NUMBER
    # A bare number ranks above the same number carrying a suffix.
    return (1, number, 0 if suffix else 1, suffix)


def _segments(version: str) -> list[tuple[int, int, int, str]]:
    return [_segment_key(part) for part in version.strip().split(".")]


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings in natural order.

    Returns
    -------
    int
        ``-1`` if *a* sorts before *b*, ``0`` if they are the same string,
        ``1`` otherwise.
    """
    if a == b:
        return 0

    left = _segments(a)
    right = _segments(b)
    width = max(len(left), len(right))
    left += [_PADDING] * (width - len(left))
    right += [_PADDING] * (width - len(right))

    for lseg, rseg in zip(left, right):
        result = _cmp(lseg, rseg)
        if result:
            return result

    return _cmp(a, b)


version_sort_key: Callable[[str], Any] = functools.cmp_to_key(compare_versions)


def sort_versions(items: Iterable[T], key: Callable[[T], str] | None = None) -> list[T]:
    """Return *items* sorted in natural version order.

    *key* extracts the version number from each item; by default the items
    are the version strings themselves.
    """
    if key is None:
        return sorted(items, key=version_sort_key)  # type: ignore[arg-type]
    extract = key
    return sorted(items, key=lambda item: version_sort_key(extract(item)))
