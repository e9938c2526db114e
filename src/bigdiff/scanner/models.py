"""Data models for tree scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Set


class WarningKind(str, Enum):
    UNREADABLE = "unreadable"
    BROKEN_LINK = "broken_link"
    LINK_ESCAPES_ROOT = "link_escapes_root"
    LINK_CYCLE = "link_cycle"


@dataclass(frozen=True, slots=True)
class PathEntry:
    """A file or directory found under a scan root.

    ``relative_path`` is POSIX-separated with no leading or trailing slash.
    """

    relative_path: str
    is_dir: bool
    size_bytes: int = 0


@dataclass(frozen=True)
class ScanWarning:
    """Non-fatal problem met while scanning; the path is excluded."""

    relative_path: str
    kind: WarningKind
    message: str

    def __str__(self) -> str:
        return f"{self.relative_path or '.'}: {self.message}"


@dataclass
class TreeListing:
    """Completed scan of one root."""

    root: Path
    files: Dict[str, PathEntry] = field(default_factory=dict)
    dirs: Set[str] = field(default_factory=set)
    warnings: List[ScanWarning] = field(default_factory=list)

    def abspath(self, relative_path: str) -> Path:
        return self.root.joinpath(*relative_path.split("/"))
