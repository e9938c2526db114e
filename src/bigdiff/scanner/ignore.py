"""Ignore rules — glob patterns and .bigdiffignore files.

.bigdiffignore file format:
  - One glob per line, matched against the relative path and the basename.
  - Lines starting with ``#`` are comments; blank lines are skipped.
  - A trailing ``/`` is accepted and ignored (``build/`` == ``build``).

The same rules are applied to both trees, so a path that is ignored in one
is ignored in the other.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List

DEFAULT_IGNORED_NAMES = frozenset({".git", "__pycache__", ".DS_Store", "Thumbs.db"})


def split_patterns(values: Iterable[str]) -> List[str]:
    """Flatten comma-separated globs: ``["*.log,build", "tmp"]`` -> 3 patterns."""
    return [p.strip() for value in values for p in value.split(",") if p.strip()]


class IgnoreRules:
    """Callable ``should_ignore(relative_path) -> bool`` predicate."""

    def __init__(self, patterns: Iterable[str] = (), *, use_defaults: bool = True) -> None:
        self._patterns: List[str] = []
        self._use_defaults = use_defaults
        self.extend(patterns)

    def load_file(self, path: Path) -> int:
        """Add the rules in an ignore file. Returns how many were added.

        Raises OSError if the file cannot be read.
        """
        before = len(self._patterns)
        with open(path, encoding="utf-8") as f:
            self.extend(f)
        return len(self._patterns) - before

    def extend(self, patterns: Iterable[str]) -> None:
        for raw in patterns:
            pattern = raw.strip()
            if not pattern or pattern.startswith("#"):
                continue
            pattern = pattern.replace("\\", "/").rstrip("/")
            if pattern:
                self._patterns.append(pattern)

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def __call__(self, relative_path: str) -> bool:
        return self.is_ignored(relative_path)

    def is_ignored(self, relative_path: str) -> bool:
        """Return True if *relative_path* (or its basename) matches a rule."""
        rel = relative_path.replace("\\", "/").strip("/")
        name = rel.rsplit("/", 1)[-1]
        if self._use_defaults and name in DEFAULT_IGNORED_NAMES:
            return True
        for pat in self._patterns:
            if fnmatchcase(rel, pat) or fnmatchcase(name, pat):
                return True
        return False
