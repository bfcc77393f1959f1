"""Predicate deciding which files of a release tree are left out of the corpus."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable


class IgnorePredicate:
    """Glob-based exclusion test.

    Each pattern is matched (``fnmatch`` semantics, case-sensitive) against
    both the normalized relative path (``/docs/readme.txt``) and the file's
    basename (``readme.txt``).  With no patterns nothing is ignored.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: tuple[str, ...] = tuple(p for p in patterns if p)

    @classmethod
    def none(cls) -> IgnorePredicate:
        return cls(())

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def __call__(self, path_value: str) -> bool:
        if not self._patterns:
            return False
        basename = path_value.rsplit("/", 1)[-1]
        return any(
            fnmatch.fnmatchcase(path_value, pattern) or fnmatch.fnmatchcase(basename, pattern)
            for pattern in self._patterns
        )

    def __repr__(self) -> str:
        return f"IgnorePredicate({list(self._patterns)!r})"
