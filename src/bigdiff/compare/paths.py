"""Path classifier — set differences of two tree listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from bigdiff.scanner.models import TreeListing


@dataclass
class PathPlan:
    """Which file paths are new, gone, or present on both sides."""

    added: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    common: List[str] = field(default_factory=list)
    deleted_dirs: List[str] = field(default_factory=list)  # top-most only

    @property
    def total(self) -> int:
        return len(self.added) + len(self.deleted) + len(self.common)


def _top_most(dirs: List[str]) -> List[str]:
    """Drop every directory that sits under another one in *dirs*."""
    heads: List[str] = []
    for d in sorted(dirs, key=lambda p: (p.count("/"), p)):
        if not any(d.startswith(head + "/") for head in heads):
            heads.append(d)
    return sorted(heads)


def classify_paths(base: TreeListing, target: TreeListing) -> PathPlan:
    """Split file paths into added / deleted / common.

    Only files are compared. A path that is a file on one side and a
    directory on the other therefore shows up as a deleted (or added) file,
    while the directory's own files are classified separately.
    """
    base_files = set(base.files)
    target_files = set(target.files)

    return PathPlan(
        added=sorted(target_files - base_files),
        deleted=sorted(base_files - target_files),
        common=sorted(base_files & target_files),
        deleted_dirs=_top_most(list(base.dirs - target.dirs)),
    )
